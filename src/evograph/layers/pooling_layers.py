"""
Pooling Layers Module.

A pooling layer is a group of PoolNodes; by default each of them pools a
consecutive window of the previous layer's nodes (POOLING connections).

Classes:
    PoolingLayer:      Base class of the pooling layers
    MaxPooling1DLayer: Outputs the maximum of each window
    AvgPooling1DLayer: Outputs the average of each window
    MinPooling1DLayer: Outputs the minimum of each window
"""

import numpy as np
from typing import Callable

from evograph.activations  import activations
from evograph.layers.layer import Layer, ConnectionType
from evograph.network.node import PoolNode, PoolingType

class PoolingLayer(Layer):

    pooling_type: PoolingType

    def __init__(self,
                 output_size: int,
                 activation : Callable | None = None,
                 rng        : np.random.Generator | None = None):
        super().__init__(output_size, rng)
        squash = activation if activation is not None else activations["identity"]
        self.nodes = [PoolNode(self.pooling_type, rng=self._rng) for _ in range(output_size)]
        for node in self.nodes:
            node.squash = squash
        self.input_nodes  = self.nodes
        self.output_nodes = self.nodes

    def default_incoming_connection_type(self) -> ConnectionType:
        return ConnectionType.POOLING

    def connection_type_is_allowed(self, connection_type: ConnectionType) -> bool:
        return connection_type in (ConnectionType.POOLING, ConnectionType.ONE_TO_ONE, ConnectionType.ALL_TO_ALL)

class MaxPooling1DLayer(PoolingLayer):
    pooling_type = PoolingType.MAX_POOLING

class AvgPooling1DLayer(PoolingLayer):
    pooling_type = PoolingType.AVG_POOLING

class MinPooling1DLayer(PoolingLayer):
    pooling_type = PoolingType.MIN_POOLING
