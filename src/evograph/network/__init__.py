"""
Network Package

This package provides the network graph engine.

Exported:
    Network:           A trainable and evolvable neural network
    Node:              A single computational unit
    PoolNode:          A hidden node pooling its incoming signals
    NodeType:          Enumeration for node types (INPUT, HIDDEN, OUTPUT)
    PoolingType:       Enumeration for pooling operations
    Connection:        A weighted, optionally gated edge
    innovation_id:     Key of an ordered (from, to) node index pair
    save_network_json: Save a network as JSON
    load_network_json: Load a network from JSON
"""

from evograph.network.connection  import Connection, innovation_id
from evograph.network.node        import Node, PoolNode, NodeType, PoolingType
from evograph.network.network     import Network
from evograph.network.persistence import save_network_json, load_network_json

__all__ = [
    'Network',
    'Node',
    'PoolNode',
    'NodeType',
    'PoolingType',
    'Connection',
    'innovation_id',
    'save_network_json',
    'load_network_json'
]
