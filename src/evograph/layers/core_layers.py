"""
Core Layers Module.

Classes:
    InputLayer:  The input nodes of a network
    DenseLayer:  A group of hidden nodes
    OutputLayer: The output nodes of a network
"""

import numpy as np
from typing import Callable

from evograph.activations  import activations
from evograph.layers.layer import Layer, ConnectionType
from evograph.network.node import Node, NodeType

class InputLayer(Layer):
    """
    The first layer of every model; it cannot receive connections.
    """

    def __init__(self, output_size: int, rng: np.random.Generator | None = None):
        super().__init__(output_size, rng)
        self.nodes        = [Node(NodeType.INPUT, rng=self._rng) for _ in range(output_size)]
        self.input_nodes  = self.nodes
        self.output_nodes = self.nodes

    def default_incoming_connection_type(self) -> ConnectionType:
        return ConnectionType.NO_CONNECTION

    def connection_type_is_allowed(self, connection_type: ConnectionType) -> bool:
        return connection_type is ConnectionType.NO_CONNECTION

class DenseLayer(Layer):
    """
    A group of hidden nodes sharing an activation function (logistic by default).
    """

    def __init__(self,
                 output_size: int,
                 activation : Callable | None = None,
                 rng        : np.random.Generator | None = None):
        super().__init__(output_size, rng)
        squash = activation if activation is not None else activations["logistic"]
        self.nodes        = [Node(NodeType.HIDDEN, squash=squash, rng=self._rng) for _ in range(output_size)]
        self.input_nodes  = self.nodes
        self.output_nodes = self.nodes

    def default_incoming_connection_type(self) -> ConnectionType:
        return ConnectionType.ALL_TO_ALL

    def connection_type_is_allowed(self, connection_type: ConnectionType) -> bool:
        return connection_type is not ConnectionType.NO_CONNECTION

class OutputLayer(Layer):
    """
    The last layer of every model (identity activation by default).
    """

    def __init__(self,
                 output_size: int,
                 activation : Callable | None = None,
                 rng        : np.random.Generator | None = None):
        super().__init__(output_size, rng)
        squash = activation if activation is not None else activations["identity"]
        self.nodes        = [Node(NodeType.OUTPUT, squash=squash, rng=self._rng) for _ in range(output_size)]
        self.input_nodes  = self.nodes
        self.output_nodes = self.nodes

    def default_incoming_connection_type(self) -> ConnectionType:
        return ConnectionType.ALL_TO_ALL

    def connection_type_is_allowed(self, connection_type: ConnectionType) -> bool:
        return connection_type is not ConnectionType.NO_CONNECTION
