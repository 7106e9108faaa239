"""Read-only view over a composed YAML node.

Structural access never raises: asking a scalar or a sequence for a key
simply finds nothing. Every node keeps the source mark PyYAML attached to
it, so diagnostics can point at a line and column.
"""

from typing import Any, Iterator, List, Optional

import yaml
from yaml.constructor import SafeConstructor

NULL_TAG = "tag:yaml.org,2002:null"


class Node:
    """A node of a loaded database document."""

    __slots__ = ("_node",)

    def __init__(self, yaml_node: yaml.Node):
        self._node = yaml_node

    @property
    def raw(self) -> yaml.Node:
        return self._node

    @property
    def tag(self) -> str:
        return self._node.tag

    @property
    def line(self) -> int:
        """1-based line of the node start."""
        mark = self._node.start_mark
        return mark.line + 1 if mark is not None else 0

    @property
    def column(self) -> int:
        """1-based column of the node start."""
        mark = self._node.start_mark
        return mark.column + 1 if mark is not None else 0

    @property
    def is_mapping(self) -> bool:
        return isinstance(self._node, yaml.MappingNode)

    @property
    def is_sequence(self) -> bool:
        return isinstance(self._node, yaml.SequenceNode)

    @property
    def is_scalar(self) -> bool:
        return isinstance(self._node, yaml.ScalarNode)

    @property
    def is_null(self) -> bool:
        return self.is_scalar and self._node.tag == NULL_TAG

    @property
    def value(self) -> Optional[str]:
        """Source text of a scalar, None for collections."""
        if self.is_scalar:
            return self._node.value
        return None

    def get(self, name: str) -> Optional["Node"]:
        """Return the child stored under ``name``, or None.

        Duplicate keys resolve to the last occurrence, as PyYAML's own
        constructor does.
        """
        if not self.is_mapping:
            return None
        found = None
        for key_node, value_node in self._node.value:
            if isinstance(key_node, yaml.ScalarNode) and key_node.value == name:
                found = value_node
        return Node(found) if found is not None else None

    def keys(self) -> List[str]:
        if not self.is_mapping:
            return []
        return [
            key_node.value
            for key_node, _ in self._node.value
            if isinstance(key_node, yaml.ScalarNode)
        ]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator["Node"]:
        """Iterate sequence items; other nodes have no items."""
        if self.is_sequence:
            for item in self._node.value:
                yield Node(item)

    def __len__(self) -> int:
        if self.is_sequence or self.is_mapping:
            return len(self._node.value)
        return 0

    def construct(self) -> Any:
        """Build the plain Python value for this node (SafeLoader rules)."""
        return SafeConstructor().construct_document(self._node)

    def dump(self) -> str:
        """Serialize the node back to YAML text."""
        return yaml.serialize(self._node, Dumper=yaml.SafeDumper)

    def __repr__(self) -> str:
        kind = type(self._node).__name__
        return f"Node({kind}, line={self.line}, column={self.column})"
