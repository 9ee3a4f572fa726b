"""Undirected weighted link between two nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spanning_tree.core.types import Cost, NodeId


@dataclass(frozen=True, eq=False)
class Link:
    """An undirected edge. Member order is kept as stored but ignored for equality."""

    members: tuple[NodeId, NodeId]
    cost: Cost = 0

    def __post_init__(self) -> None:
        if self.cost < 0:
            raise ValueError(f"Link cost must be non-negative, got {self.cost}")

    @property
    def key(self) -> frozenset[NodeId]:
        """Unordered pair identifying the link within a topology."""
        return frozenset(self.members)

    @property
    def is_self_link(self) -> bool:
        return self.members[0] == self.members[1]

    def connects(self, a: NodeId, b: NodeId) -> bool:
        first, second = self.members
        return (first == a and second == b) or (first == b and second == a)

    def touches(self, node_id: NodeId) -> bool:
        return node_id in self.members

    def other_end(self, node_id: NodeId) -> NodeId | None:
        """Member on the far side from node_id.

        Returns None for self-links and for links not incident to node_id.
        """
        first, second = self.members
        if first == second:
            return None
        if first == node_id:
            return second
        if second == node_id:
            return first
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Link):
            return NotImplemented
        return self.key == other.key and self.cost == other.cost

    def __hash__(self) -> int:
        return hash((self.key, self.cost))
