"""
Layers Package

This package provides the layer builders and the Architect, which stacks
layers into a network.

Exported:
    Architect:          Builds a network from a list of layers
    Layer:              Abstract base class of all layers
    ConnectionType:     How consecutive layers are connected
    GatingType:         Which connections a gater controls
    InputLayer:         The input nodes of a model
    DenseLayer:         A group of hidden nodes
    OutputLayer:        The output nodes of a model
    PoolingLayer:       Base class of the pooling layers
    MaxPooling1DLayer:  Max pooling over windows of the previous layer
    AvgPooling1DLayer:  Average pooling over windows of the previous layer
    MinPooling1DLayer:  Min pooling over windows of the previous layer
    RNNLayer:           Self connected hidden nodes
    MemoryLayer:        Delays its input by a number of steps
    LSTMLayer:          Long short-term memory
    GRULayer:           Gated recurrent unit
    HopfieldLayer:      Fully recurrent binary layer
"""

from evograph.layers.layer            import Layer, ConnectionType, GatingType
from evograph.layers.core_layers      import InputLayer, DenseLayer, OutputLayer
from evograph.layers.pooling_layers   import PoolingLayer, MaxPooling1DLayer, AvgPooling1DLayer, MinPooling1DLayer
from evograph.layers.recurrent_layers import RNNLayer, MemoryLayer, LSTMLayer, GRULayer, HopfieldLayer
from evograph.layers.architect        import Architect

__all__ = [
    'Architect',
    'Layer',
    'ConnectionType',
    'GatingType',
    'InputLayer',
    'DenseLayer',
    'OutputLayer',
    'PoolingLayer',
    'MaxPooling1DLayer',
    'AvgPooling1DLayer',
    'MinPooling1DLayer',
    'RNNLayer',
    'MemoryLayer',
    'LSTMLayer',
    'GRULayer',
    'HopfieldLayer'
]
