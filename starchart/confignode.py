"""
Reading and writing ConfigNode documents.

Templates and expanded records use the host's nested key/value text format:

    STRATEGY_LEVEL_EXPAND
    {
        name = Outreach
        title = Public Outreach   // trailing comments are allowed
        title
        {
            3 = Grand Public Outreach
        }
        EFFECT
        {
            name = CurrencyOperation
        }
    }

A key may repeat; child nodes with the same name as a key hold its overrides.
"""

import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple


class ConfigNode:
    """
    A named node holding ordered, possibly repeated, values and child nodes.

    Args:
        name: Node name (e.g. "STRATEGY" or "EFFECT")
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.values: List[Tuple[str, str]] = []
        self.nodes: List["ConfigNode"] = []

    def __repr__(self) -> str:
        return f"ConfigNode({self.name!r}, values={len(self.values)}, nodes={len(self.nodes)})"

    def has_value(self, name: str) -> bool:
        return any(key == name for key, _ in self.values)

    def get_value(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value stored under name, or default."""
        return next((value for key, value in self.values if key == name), default)

    def get_values(self, name: str) -> List[str]:
        return [value for key, value in self.values if key == name]

    def add_value(self, name: str, value: str) -> None:
        self.values.append((name, value))

    def set_value(self, name: str, value: str, create_if_missing: bool = True) -> None:
        """Replace the first value stored under name, appending it if absent."""
        for i, (key, _) in enumerate(self.values):
            if key == name:
                self.values[i] = (name, value)
                return
        if create_if_missing:
            self.values.append((name, value))

    def remove_value(self, name: str) -> None:
        """Remove every value stored under name."""
        self.values = [(key, value) for key, value in self.values if key != name]

    def has_node(self, name: str) -> bool:
        return any(node.name == name for node in self.nodes)

    def get_node(self, name: str) -> Optional["ConfigNode"]:
        return next((node for node in self.nodes if node.name == name), None)

    def get_nodes(self, name: Optional[str] = None) -> List["ConfigNode"]:
        """Child nodes, optionally only those with the given name."""
        return [node for node in self.nodes if name is None or node.name == name]

    def add_node(self, node: "ConfigNode") -> "ConfigNode":
        self.nodes.append(node)
        return node

    def parse_int(self, name: str, default: Optional[int] = None) -> int:
        """
        Parse a value as an integer.

        Raises:
            ValueError: If the value is malformed, or missing without a default
        """
        raw = self.get_value(name)
        if raw is None:
            if default is None:
                raise ValueError(f"Missing required value '{name}' in {self.name}")
            return default
        try:
            return int(raw.strip())
        except ValueError:
            raise ValueError(f"Value '{name}' in {self.name} is not an integer: {raw!r}")

    def parse_float(self, name: str, default: Optional[float] = None) -> float:
        """
        Parse a value as a float.

        Raises:
            ValueError: If the value is malformed, or missing without a default
        """
        raw = self.get_value(name)
        if raw is None:
            if default is None:
                raise ValueError(f"Missing required value '{name}' in {self.name}")
            return default
        try:
            return float(raw.strip())
        except ValueError:
            raise ValueError(f"Value '{name}' in {self.name} is not a number: {raw!r}")

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-serializable form. Repeated keys become lists.
        """
        values: Dict[str, Any] = {}
        for key, value in self.values:
            if key in values:
                if not isinstance(values[key], list):
                    values[key] = [values[key]]
                values[key].append(value)
            else:
                values[key] = value
        return {
            "node": self.name,
            "values": values,
            "nodes": [node.to_dict() for node in self.nodes],
        }

    def to_text(self, indent: int = 0) -> str:
        """Serialize the node in the host text format."""
        pad = "\t" * indent
        lines = [f"{pad}{self.name}", f"{pad}{{"]
        for key, value in self.values:
            lines.append(f"{pad}\t{key} = {value}")
        for node in self.nodes:
            lines.append(node.to_text(indent + 1))
        lines.append(f"{pad}}}")
        return "\n".join(lines)


def _tokens(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (line number, token) with comments stripped and braces split out."""
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.split("//", 1)[0]
        for piece in re.split(r"([{}])", line):
            piece = piece.strip()
            if piece:
                yield lineno, piece


def parse_config(text: str) -> ConfigNode:
    """
    Parse a ConfigNode document.

    Args:
        text: Document text

    Returns:
        An unnamed root node holding the top-level values and nodes

    Raises:
        ValueError: On unbalanced braces or a node name not followed by "{"
    """
    root = ConfigNode()
    stack = [root]
    pending: Optional[Tuple[int, str]] = None

    for lineno, token in _tokens(text):
        if pending is not None and token != "{":
            raise ValueError(f"Line {pending[0]}: expected '{{' after '{pending[1]}'")

        if token == "{":
            if pending is None:
                raise ValueError(f"Line {lineno}: '{{' without a node name")
            node = stack[-1].add_node(ConfigNode(pending[1]))
            stack.append(node)
            pending = None
        elif token == "}":
            if len(stack) == 1:
                raise ValueError(f"Line {lineno}: unbalanced '}}'")
            stack.pop()
        elif "=" in token:
            key, value = token.split("=", 1)
            stack[-1].add_value(key.strip(), value.strip())
        else:
            pending = (lineno, token)

    if pending is not None:
        raise ValueError(f"Line {pending[0]}: expected '{{' after '{pending[1]}'")
    if len(stack) != 1:
        raise ValueError(f"Unclosed node '{stack[-1].name}' at end of document")
    return root


def load_config_file(filepath: str | Path) -> ConfigNode:
    """
    Load and parse a ConfigNode file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document is malformed
    """
    path = Path(filepath)
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    try:
        return parse_config(text)
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from e
