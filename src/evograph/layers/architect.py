"""
Architect Module.

The Architect assembles a network from a stack of layers. Consecutive
layers are connected output nodes to input nodes, with the connection
type the receiving layer asks for (or the one given when the layer was
added). The first layer must be an InputLayer, the last an OutputLayer.

Classes:
    Architect: Builds a network from a list of layers
"""

import logging
import numpy as np

from evograph.layers.core_layers import InputLayer, OutputLayer
from evograph.layers.layer       import Layer, ConnectionType
from evograph.network.network    import Network

logger = logging.getLogger(__name__)

class Architect:
    """
    Builds a network from a list of layers.

    Public Attributes:
        layers: (layer, incoming connection type) pairs in the order they were added

    Public Methods:
        add_layer(layer, incoming_connection_type): Append a layer, return the architect
        build_model(rng):                           Create the network
    """

    def __init__(self):
        self.layers: list[tuple[Layer, ConnectionType]] = []

    def add_layer(self, layer: Layer, incoming_connection_type: ConnectionType | None = None) -> 'Architect':
        """
        Append a layer to the model.

        Raises:
            ValueError: if the layer does not accept the connection type
        """
        if incoming_connection_type is None:
            incoming_connection_type = layer.default_incoming_connection_type()
        if not layer.connection_type_is_allowed(incoming_connection_type):
            raise ValueError(f"{type(layer).__name__} does not accept {incoming_connection_type.name} connections")

        self.layers.append((layer, incoming_connection_type))
        return self

    def build_model(self, rng: np.random.Generator | None = None) -> Network:
        """
        Connect the layers and collect their nodes into a network, ordered
        [input layer, output layer, hidden layers in the order they were added].

        Raises:
            ValueError: unless the first layer is the only InputLayer and the last the only OutputLayer
        """
        layers = [layer for layer, _ in self.layers]
        if len(layers) < 2 or not isinstance(layers[0], InputLayer) or not isinstance(layers[-1], OutputLayer):
            raise ValueError("a model needs an InputLayer first and an OutputLayer last")
        if any(isinstance(layer, (InputLayer, OutputLayer)) for layer in layers[1:-1]):
            raise ValueError("InputLayer and OutputLayer may only be the first and last layer of a model")

        input_layer  = layers[0]
        output_layer = layers[-1]
        network = Network._empty(input_layer.output_size, len(output_layer.nodes), rng)

        for (previous, _), (layer, connection_type) in zip(self.layers, self.layers[1:]):
            network.connections.extend(Layer.connect(previous.output_nodes,
                                                     layer.input_nodes,
                                                     connection_type,
                                                     rng=network.rng))

        for layer in layers:
            network.connections.extend(layer.connections)
            network.gates.extend(layer.gates)

        network.nodes = input_layer.nodes + output_layer.nodes
        for layer in layers[1:-1]:
            network.nodes.extend(layer.nodes)
        network.reindex()

        logger.debug("Built a model of %d layers: %d nodes, %d connections, %d gates",
                     len(layers), len(network.nodes), len(network.connections), len(network.gates))
        return network
