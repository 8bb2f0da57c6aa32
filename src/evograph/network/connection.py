"""
Network Connection Module.

This module implements the Connection class: a weighted, directed edge
between two nodes, which may be gated by a third node.

Classes:
    Connection: Weighted, optionally gated edge between two nodes

Functions:
    innovation_id: Deterministic key of an ordered (from, to) index pair
"""

import numpy as np
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from evograph.network.node import Node

def innovation_id(a: int, b: int) -> int:
    """
    Cantor pairing of two node indices.

    The result is unique for each ordered pair, so (a, b) and (b, a) map to
    different ids. Crossover aligns connection genes through this key.
    """
    return (a + b) * (a + b + 1) // 2 + b

class Connection:
    """
    A weighted directed edge from one node to another.

    The effective weight of a connection is weight * gain. The gain is 1,
    unless the connection is gated, in which case it is set to the gating
    node's activation every time the gating node activates.

    Public Attributes:
        from_node:              Source node
        to_node:                Destination node
        weight:                 Connection weight
        gain:                   Multiplier set by the gating node (1 if ungated)
        gate_node:              The node gating this connection (or None)
        eligibility:            Eligibility trace used for gradient computation
        xtrace:                 Extended traces, keyed by the nodes influenced
                                through the gate of the destination node
        delta_weights_previous: Last applied weight change (for momentum)
        delta_weights_total:    Accumulated, not yet applied, weight change

    Public Methods:
        innovation_id(): Innovation id of this connection (from current node indices)
        to_dict():       Serialize the connection
    """

    def __init__(self,
                 from_node: 'Node',
                 to_node  : 'Node',
                 weight   : float | None = None,
                 rng      : np.random.Generator | None = None):
        """
        Create a connection.
        If 'weight' is not specified, a random weight in [-0.1, 0.1] is used.

        Parameters:
            from_node: Source node
            to_node:   Destination node
            weight:    Connection weight
            rng:       Random generator used when the weight is drawn
        """
        if weight is None:
            rng    = rng if rng is not None else np.random.default_rng()
            weight = rng.uniform(-0.1, 0.1)

        self.from_node              : 'Node'          = from_node
        self.to_node                : 'Node'          = to_node
        self.weight                 : float           = float(weight)
        self.gain                   : float           = 1.0
        self.gate_node              : 'Node | None'   = None
        self.eligibility            : float           = 0.0
        self.xtrace                 : dict['Node', float] = {}
        self.delta_weights_previous : float           = 0.0
        self.delta_weights_total    : float           = 0.0

    def innovation_id(self) -> int:
        return innovation_id(self.from_node.index, self.to_node.index)

    def to_dict(self) -> dict:
        """
        Serialize the connection, using the current indices of the nodes
        involved (the caller is responsible for having them assigned).
        """
        return {
            "fromIndex"    : self.from_node.index,
            "toIndex"      : self.to_node.index,
            "weight"       : self.weight,
            "gateNodeIndex": None if self.gate_node is None else self.gate_node.index
        }

    def __repr__(self):
        gated = f", gate={self.gate_node.index}" if self.gate_node is not None else ""
        return f"Connection({self.from_node.index}->{self.to_node.index}, w={self.weight:.3f}{gated})"
