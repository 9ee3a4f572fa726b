"""Per-node belief state and the root election acceptance rule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from spanning_tree.core.types import UNASSIGNED, NodeId

if TYPE_CHECKING:
    from spanning_tree.core.types import Cost


class Belief(NamedTuple):
    """What a node currently holds to be true about the root."""

    root_id: NodeId
    root_cost: Cost
    next_hop: NodeId | None


@dataclass
class Node:
    """A participant in root election.

    Every node starts out believing it is the root itself, at cost 0 and with
    no next hop. The belief only changes through receive_suggestion().
    """

    id: NodeId
    name: str = ""
    msg_count: int = 0
    root_id: NodeId = None  # type: ignore[assignment]
    root_cost: Cost = 0
    next_hop: NodeId | None = None

    def __post_init__(self) -> None:
        if self.root_id is None:
            self.root_id = self.id

    @classmethod
    def named(cls, name: str) -> Node:
        """Create a node whose id is assigned by a name-keyed topology."""
        return cls(id=UNASSIGNED, name=name)

    @property
    def belief(self) -> Belief:
        return Belief(self.root_id, self.root_cost, self.next_hop)

    @property
    def believes_self_root(self) -> bool:
        return self.root_id == self.id

    def bind(self, node_id: NodeId) -> None:
        """Give the node its topology-assigned id and make it its own root again."""
        self.id = node_id
        self.reset()

    def reset(self) -> None:
        self.msg_count = 0
        self.root_id = self.id
        self.root_cost = 0
        self.next_hop = None

    def prefers(self, suggested_root: NodeId, suggested_cost: Cost) -> bool:
        """Whether a suggestion would replace the current belief.

        A strictly lower root id wins regardless of cost. Cost only matters
        once both sides agree on the same root.
        """
        if suggested_root < self.root_id:
            return True
        return suggested_root == self.root_id and suggested_cost < self.root_cost

    def receive_suggestion(
        self,
        suggested_root: NodeId,
        source_id: NodeId,
        suggested_cost: Cost,
    ) -> bool:
        """Apply a neighbor's suggestion. Returns True if the belief changed."""
        # Counted even when the suggestion is rejected
        self.msg_count += 1

        if not self.prefers(suggested_root, suggested_cost):
            return False

        self.root_id = suggested_root
        self.root_cost = suggested_cost
        self.next_hop = source_id
        return True
