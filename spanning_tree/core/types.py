"""Core type aliases for the simulation."""

from typing import NewType

# Node identification - lower ids are more senior in root election
NodeId = NewType("NodeId", int)

# Accumulated path cost, summed over link costs
type Cost = int

# Id carried by a node that has not been inserted into a name-keyed topology yet
UNASSIGNED = NodeId(-1)
