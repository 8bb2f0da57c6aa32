"""
Layer Base Module.

A layer is a group of nodes, possibly with internal connections and gates,
that the Architect wires into a network. Each layer exposes the nodes that
receive connections from the previous layer (input_nodes) and the nodes that
project to the next layer (output_nodes).

Classes:
    ConnectionType: How the nodes of two consecutive layers are connected
    GatingType:     Which connections of a node a gater controls
    Layer:          Abstract base class of all layers
"""

import math
import numpy as np
from abc    import ABC, abstractmethod
from enum   import Enum
from typing import Sequence

from evograph.network.connection import Connection
from evograph.network.node       import Node

class ConnectionType(Enum):
    NO_CONNECTION = "no_connection"
    ALL_TO_ALL    = "all_to_all"
    ONE_TO_ONE    = "one_to_one"
    POOLING       = "pooling"

class GatingType(Enum):
    """
    INPUT:  a gater controls the incoming connections of one target node
    OUTPUT: a gater controls the outgoing connections of one source node
    SELF:   a gater controls the self connection of one node
    """
    INPUT  = "input"
    OUTPUT = "output"
    SELF   = "self"

class Layer(ABC):
    """
    Abstract base class of all layers.

    Public Attributes:
        output_size:  Number of nodes the layer outputs
        nodes:        All nodes of the layer, in activation order
        input_nodes:  Nodes receiving connections from the previous layer
        output_nodes: Nodes projecting to the next layer
        connections:  Connections internal to the layer
        gates:        Gated connections internal to the layer

    Public Methods:
        default_incoming_connection_type():       Connection type used when none is given
        connection_type_is_allowed(type):         Whether the layer accepts a connection type
        connect(from_nodes, to_nodes, type, ...): Connect two groups of nodes (static)
        gate(gaters, connections, type):          Gate connections by a group of nodes (static)
    """

    def __init__(self, output_size: int, rng: np.random.Generator | None = None):
        if output_size < 1:
            raise ValueError(f"a layer needs at least one node, got {output_size}")

        self.output_size  : int              = output_size
        self.nodes        : list[Node]       = []
        self.input_nodes  : list[Node]       = []
        self.output_nodes : list[Node]       = []
        self.connections  : list[Connection] = []
        self.gates        : list[Connection] = []
        self._rng         : np.random.Generator = rng if rng is not None else np.random.default_rng()

    @abstractmethod
    def default_incoming_connection_type(self) -> ConnectionType:
        pass

    @abstractmethod
    def connection_type_is_allowed(self, connection_type: ConnectionType) -> bool:
        pass

    @staticmethod
    def connect(from_nodes     : Sequence[Node],
                to_nodes       : Sequence[Node],
                connection_type: ConnectionType = ConnectionType.ALL_TO_ALL,
                weight         : float | None = None,
                rng            : np.random.Generator | None = None) -> list[Connection]:
        """
        Connect two groups of nodes.

        ALL_TO_ALL connects every pair, ONE_TO_ONE the i-th node of each group
        (groups must have equal sizes), POOLING every source node to one target
        node, splitting the sources into consecutive windows.

        Parameters:
            from_nodes:      Source nodes
            to_nodes:        Target nodes
            connection_type: How to connect them
            weight:          Weight of every connection (random He-scaled weights if not given)
            rng:             Random generator for the weights

        Returns:
            The new connections
        """
        rng   = rng if rng is not None else np.random.default_rng()
        scale = math.sqrt(2.0 / max(len(from_nodes), 1))

        def new_weight():
            return weight if weight is not None else rng.normal() * scale

        connections = []
        if connection_type is ConnectionType.NO_CONNECTION:
            pass
        elif connection_type is ConnectionType.ALL_TO_ALL:
            for from_node in from_nodes:
                for to_node in to_nodes:
                    connections.append(from_node.connect(to_node, new_weight()))
        elif connection_type is ConnectionType.ONE_TO_ONE:
            if len(from_nodes) != len(to_nodes):
                raise ValueError(f"ONE_TO_ONE needs groups of equal size, got {len(from_nodes)} and {len(to_nodes)}")
            for from_node, to_node in zip(from_nodes, to_nodes):
                connections.append(from_node.connect(to_node, new_weight()))
        elif connection_type is ConnectionType.POOLING:
            for i, from_node in enumerate(from_nodes):
                to_node = to_nodes[i * len(to_nodes) // len(from_nodes)]
                connections.append(from_node.connect(to_node, 1.0 if weight is None else weight))
        return connections

    @staticmethod
    def gate(gaters: Sequence[Node], connections: Sequence[Connection], gating_type: GatingType) -> list[Connection]:
        """
        Gate connections by a group of nodes.

        The nodes concerned (targets for INPUT, sources for OUTPUT and SELF)
        are enumerated in order, and the i-th of them is assigned the gater
        gaters[i % len(gaters)].

        Returns:
            The gated connections
        """
        members = set(connections)
        if gating_type is GatingType.INPUT:
            nodes = list(dict.fromkeys(conn.to_node for conn in connections))
        else:
            nodes = list(dict.fromkeys(conn.from_node for conn in connections))

        gated = []
        for i, node in enumerate(nodes):
            gater = gaters[i % len(gaters)]
            if gating_type is GatingType.INPUT:
                candidates = list(node.incoming)
            elif gating_type is GatingType.OUTPUT:
                candidates = list(node.outgoing)
            else:
                candidates = [node.self_connection] if node.self_connection is not None else []

            for conn in candidates:
                if conn in members and conn.gate_node is None:
                    gater.add_gate(conn)
                    gated.append(conn)
        return gated
