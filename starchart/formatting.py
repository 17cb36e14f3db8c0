"""
Text helpers for expanded records.

Roman numerals for level titles, human-readable body names and lists, and the
"$token" placeholder substitution used by per-body template expansion.
"""

import re
from functools import cached_property
from typing import Iterable, List

from .bodies import CelestialBody
from .hierarchy import HierarchyQuery

_ROMAN_NUMERALS = [
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
]


def integer_to_roman(num: int) -> str:
    """
    Render an integer in subtractive roman notation.

    Args:
        num: Value between -3999 and 3999; negatives get a leading "-" and
            zero renders as an empty string

    Returns:
        Roman numeral string

    Raises:
        ValueError: If abs(num) is greater than 3999

    Example:
        >>> integer_to_roman(2024)
        'MMXXIV'
    """
    number = abs(num)
    if number > 3999:
        raise ValueError(f"Cannot render {num} as a roman numeral, insert a value between 1 and 3999")

    numeral = []
    for value, symbol in _ROMAN_NUMERALS:
        while number >= value:
            numeral.append(symbol)
            number -= value

    result = "".join(numeral)
    return "-" + result if num < 0 else result


def clean_display_name(body: CelestialBody) -> str:
    """
    Display name fit for the middle of a sentence.

    Strips the host grammar suffix ("Mun^N" -> "Mun") and lowercases a leading
    article ("The Mun" -> "the Mun").
    """
    name = (body.display_name or body.name).split("^", 1)[0].strip()
    if name.startswith("The "):
        name = "the " + name[4:]
    return name


def culled_name(body: CelestialBody) -> str:
    """Display name without grammar suffix or leading article."""
    return re.sub(r"^[Tt]he\s+", "", clean_display_name(body))


def body_list(bodies: Iterable[CelestialBody], conjunction: str) -> str:
    """
    Join body names into an English list.

    Args:
        bodies: Bodies to list
        conjunction: Word before the last item, e.g. "and" or "or"

    Returns:
        "" for no bodies, "A", "A and B", or "A, B and C"
    """
    names = [clean_display_name(b) for b in bodies]
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + f" {conjunction} " + names[-1]


def format_string(text: str, home: CelestialBody) -> str:
    """Substitute the placeholders that do not depend on a target body."""
    return text.replace("$homeWorld", home.name)


PLACEHOLDERS = [
    "body",
    "culledName",
    "primaryBody",
    "theBody",
    "primaryAndSecondary",
    "primaryOrSecondary",
    "theBodies",
    "childBodies",
    "childBodyCount",
    "gasGiantMoons",
    "homeWorld",
]

# Longest first so "$theBodies" never matches as "$theBody" + "ies"
_PLACEHOLDER_RE = re.compile(
    r"( ?)\$(" + "|".join(sorted(PLACEHOLDERS, key=len, reverse=True)) + r")"
)


class BodyStringFormatter:
    """
    Substitutes "$token" placeholders for one target body.

    Values are computed on first use, so strings that do not mention the
    list-style tokens never walk the graph.

    Args:
        query: Hierarchy queries for the body's graph
        body: Target body (a planet or a planetary barycenter)
        home: Home body, for "$homeWorld"
    """

    def __init__(self, query: HierarchyQuery, body: CelestialBody, home: CelestialBody):
        self.query = query
        self.body = body
        self.home = home

    @cached_property
    def display(self) -> CelestialBody:
        return self.query.display_body(self.body)

    @cached_property
    def primary(self) -> CelestialBody:
        return self.query.primary_body(self.body)

    @cached_property
    def child_bodies(self) -> List[CelestialBody]:
        return list(self.query.bodies_under_node(self.body, solids_only=True))

    def value(self, token: str) -> str:
        """
        The replacement text for a placeholder name (without the "$").

        Raises:
            KeyError: If token is not a known placeholder
        """
        if token == "body":
            return self.display.name
        if token == "culledName":
            return culled_name(self.display)
        if token == "primaryBody":
            return self.primary.name
        if token == "theBody":
            return clean_display_name(self.primary)
        if token == "primaryAndSecondary":
            return body_list(self.query.primary_and_secondary(self.body), "and")
        if token == "primaryOrSecondary":
            return body_list(self.query.primary_and_secondary(self.body), "or")
        if token == "theBodies":
            return body_list(
                self.query.bodies_under_node(self.body, include_primary=True), "and"
            )
        if token == "childBodies":
            return body_list(self.child_bodies, "and")
        if token == "childBodyCount":
            return integer_to_roman(len(self.child_bodies))
        if token == "gasGiantMoons":
            if self.child_bodies:
                return f"each of {clean_display_name(self.primary)}'s moons"
            return f"{clean_display_name(self.primary)}'s moon"
        if token == "homeWorld":
            return self.home.name
        raise KeyError(token)

    def format(self, text: str) -> str:
        """
        Substitute every placeholder in a single pass.

        With no child bodies "$childBodyCount" is removed together with the
        space in front of it.
        """

        def _replace(match: re.Match) -> str:
            space, token = match.group(1), match.group(2)
            if token == "childBodyCount" and not self.child_bodies:
                return ""
            return space + self.value(token)

        return _PLACEHOLDER_RE.sub(_replace, text)
