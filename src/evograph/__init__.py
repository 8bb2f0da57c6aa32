"""
evograph - trainable and evolvable neural network graphs.

This package implements neural networks as graphs of nodes and (gated,
possibly recurrent) connections. Networks are trained by backpropagation
with eligibility traces, edited structurally, bred by crossover and evolved
with a NEAT variant.

Main components:
- activations: Activation functions and their registry
- network: Nodes, connections, the Network graph engine and JSON persistence
- genotype: Mutation, crossover and compatibility distance
- layers: Layer builders and the Architect model builder
- pool: Selection, species, fitness evaluation and the Population
- run: Configuration, losses, learning rate policies, training and evolution loops

Example:
    >>> from evograph import Network
    >>> network = Network(2, 1)
    >>> dataset = [{"input": [0, 0], "output": [0]}, {"input": [0, 1], "output": [1]},
    ...            {"input": [1, 0], "output": [1]}, {"input": [1, 1], "output": [0]}]
    >>> result = network.evolve(dataset, error=0.05)
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from evograph.activations   import activations, register_activation
from evograph.errors        import (SizeMismatchError, StoppingCriterionError, NodeNotInNetworkError,
                                    ConnectionNotInNetworkError, ConnectionNotGatedError, DuplicateConnectionError)
from evograph.network       import Network, Node, PoolNode, NodeType, PoolingType, Connection
from evograph.network       import save_network_json, load_network_json
from evograph.run           import Config, Schedule, train, test
from evograph.genotype      import MutationKind, ALL_MUTATIONS, FEEDFORWARD_MUTATIONS, mutate, crossover
from evograph.layers        import Architect
from evograph.pool          import Population
from evograph.run.evolution import evolve

__all__ = [
    "activations",
    "register_activation",
    "SizeMismatchError",
    "StoppingCriterionError",
    "NodeNotInNetworkError",
    "ConnectionNotInNetworkError",
    "ConnectionNotGatedError",
    "DuplicateConnectionError",
    "Network",
    "Node",
    "PoolNode",
    "NodeType",
    "PoolingType",
    "Connection",
    "save_network_json",
    "load_network_json",
    "Config",
    "Schedule",
    "train",
    "test",
    "MutationKind",
    "ALL_MUTATIONS",
    "FEEDFORWARD_MUTATIONS",
    "mutate",
    "crossover",
    "Architect",
    "Population",
    "evolve"
]
