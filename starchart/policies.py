"""
Selection policies for bodies.

A policy decides whether a body should be selected by a hierarchy query, for
example "the primary of this planet node is a gas giant". Policies can be
combined to build more specific criteria.
"""

from typing import Protocol

from .bodies import CelestialBody
from .classification import BodyKind, Classifier


class BodyPolicy(Protocol):
    """
    Protocol defining the interface for body selection policies.
    """

    def accept(self, body: CelestialBody, classifier: Classifier) -> bool:
        """
        Determine if a body should be selected.

        Args:
            body: The body to evaluate
            classifier: Classifier giving access to the body's kind

        Returns:
            True if the body meets the policy, False otherwise
        """
        ...


class DefaultPolicy:
    """
    Accept every body that classifies as anything but NOT_APPLICABLE.
    """

    def accept(self, body: CelestialBody, classifier: Classifier) -> bool:
        return classifier.classify(body) is not BodyKind.NOT_APPLICABLE


class KindPolicy:
    """
    Accept bodies of the given kinds.

    Args:
        *kinds: One or more BodyKind values to accept

    Example:
        >>> policy = KindPolicy(BodyKind.TERRESTRIAL, BodyKind.GAS_GIANT)
    """

    def __init__(self, *kinds: BodyKind):
        if not kinds:
            raise ValueError("KindPolicy needs at least one kind")
        self.kinds = frozenset(kinds)

    def accept(self, body: CelestialBody, classifier: Classifier) -> bool:
        return classifier.classify(body) in self.kinds


class SolidSurfacePolicy:
    """
    Accept bodies you can land on.
    """

    def accept(self, body: CelestialBody, classifier: Classifier) -> bool:
        return classifier.is_solid(body)


class CompositePolicy:
    """
    Combine multiple policies using logical AND.

    Args:
        *policies: Variable number of policies to combine

    Example:
        >>> policy = CompositePolicy(DefaultPolicy(), SolidSurfacePolicy())
    """

    def __init__(self, *policies: BodyPolicy):
        self.policies = policies

    def accept(self, body: CelestialBody, classifier: Classifier) -> bool:
        return all(p.accept(body, classifier) for p in self.policies)


class AnyPolicy:
    """
    Combine multiple policies using logical OR.

    Args:
        *policies: Variable number of policies to combine
    """

    def __init__(self, *policies: BodyPolicy):
        self.policies = policies

    def accept(self, body: CelestialBody, classifier: Classifier) -> bool:
        return any(p.accept(body, classifier) for p in self.policies)


TERRESTRIAL = KindPolicy(BodyKind.TERRESTRIAL)
GAS_GIANT = KindPolicy(BodyKind.GAS_GIANT)
