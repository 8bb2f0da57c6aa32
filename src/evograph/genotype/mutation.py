"""
Network Mutation Module.

This module implements the structural and parametric mutations applied to
networks during evolution. The set of mutations is closed: each MutationKind
has exactly one function in a dispatch table, and mutate() looks it up.

Each mutation picks its target at random among a specific subset of the
network (documented per function) and edits the network in place. When no
valid target exists, or when the result would exceed the size caps of the
configuration (max_nodes, max_connections, max_gates), the mutation does
nothing.

"Forward" and "backward" refer to the activation order of the network:
input nodes, then hidden nodes in index order, then output nodes.

Classes:
    MutationKind: Enumeration of all mutations

Functions:
    mutate: Apply one mutation to a network
"""

import numpy as np
from enum   import Enum
from typing import Callable, Sequence, TYPE_CHECKING

from evograph.activations  import activations
from evograph.network.node import Node, NodeType

if TYPE_CHECKING:
    from evograph.network    import Network
    from evograph.run.config import Config

class MutationKind(Enum):
    ADD_NODE             = "add_node"
    SUB_NODE             = "sub_node"
    ADD_CONNECTION       = "add_connection"
    SUB_CONNECTION       = "sub_connection"
    MOD_WEIGHT           = "mod_weight"
    MOD_BIAS             = "mod_bias"
    MOD_ACTIVATION       = "mod_activation"
    ADD_SELF_CONNECTION  = "add_self_connection"
    SUB_SELF_CONNECTION  = "sub_self_connection"
    ADD_GATE             = "add_gate"
    SUB_GATE             = "sub_gate"
    ADD_BACK_CONNECTION  = "add_back_connection"
    SUB_BACK_CONNECTION  = "sub_back_connection"
    SWAP_NODES           = "swap_nodes"

ALL_MUTATIONS = list(MutationKind)

# Mutations that never introduce recurrence (no self/back connections, no gates)
FEEDFORWARD_MUTATIONS = [
    MutationKind.ADD_NODE,
    MutationKind.SUB_NODE,
    MutationKind.ADD_CONNECTION,
    MutationKind.SUB_CONNECTION,
    MutationKind.MOD_WEIGHT,
    MutationKind.MOD_BIAS,
    MutationKind.MOD_ACTIVATION,
    MutationKind.SWAP_NODES
]

def _pick(items: Sequence, rng: np.random.Generator):
    return items[int(rng.integers(len(items)))]

def _ranks(network: 'Network') -> dict[Node, int]:
    return {node: rank for rank, node in enumerate(network.activation_order())}

def _add_node(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """
    Split a random connection (other than a self connection) with a new hidden node.

    The source connects to the new node with weight 1 and the new node
    connects to the target with the old weight. A gate on the split
    connection moves to one of the two new connections.
    """
    if len(network.nodes) >= config.max_nodes:
        return False
    candidates = [conn for conn in network.connections if conn.from_node is not conn.to_node]
    if not candidates:
        return False

    conn = _pick(candidates, rng)
    from_node, to_node, gater, weight = conn.from_node, conn.to_node, conn.gate_node, conn.weight
    network.disconnect(from_node, to_node)

    squash = activations[_pick(config.allowed_activations, rng)] if config.random_activation else None
    node   = Node(NodeType.HIDDEN, squash=squash, rng=rng)

    # Keep the new node ahead of a hidden target in the activation order
    if to_node.type is NodeType.HIDDEN:
        position = next(i for i, own in enumerate(network.nodes) if own is to_node)
    else:
        position = len(network.nodes)
    network.nodes.insert(position, node)
    network.reindex()

    first  = network.connect(from_node, node, 1.0)
    second = network.connect(node, to_node, weight)
    if gater is not None:
        network.add_gate(gater, first if rng.random() < 0.5 else second)
    return True

def _sub_node(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """Remove a random hidden node (see Network.remove_node)."""
    hidden = network.hidden_nodes
    if not hidden:
        return False
    network.remove_node(_pick(hidden, rng), config.keep_gates)
    return True

def _add_connection(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """Connect a random forward pair of nodes that is not connected yet."""
    if len(network.connections) >= config.max_connections:
        return False

    order = network.activation_order()
    pairs = [(a, b)
             for i, a in enumerate(order) if a.type is not NodeType.OUTPUT
             for b in order[i + 1:]       if b.type is not NodeType.INPUT and not a.is_projecting_to(b)]
    if not pairs:
        return False

    a, b = _pick(pairs, rng)
    network.connect(a, b, rng.uniform(-1.0, 1.0))
    return True

def _sub_connection(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """
    Remove a random forward connection whose source has other outgoing
    connections and whose target has other incoming connections.
    """
    rank       = _ranks(network)
    candidates = [conn for conn in network.connections
                  if conn.from_node is not conn.to_node
                  and len(conn.from_node.outgoing) > 1
                  and len(conn.to_node.incoming) > 1
                  and rank[conn.to_node] > rank[conn.from_node]]
    if not candidates:
        return False

    conn = _pick(candidates, rng)
    network.disconnect(conn.from_node, conn.to_node)
    return True

def _mod_weight(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """Perturb the weight of a random connection (self connections included)."""
    if not network.connections:
        return False
    conn = _pick(network.connections, rng)
    conn.weight += rng.uniform(config.weight_mutation_min, config.weight_mutation_max)
    return True

def _mod_bias(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """Perturb the bias of a random hidden or output node."""
    candidates = [node for node in network.nodes if node.type is not NodeType.INPUT]
    node = _pick(candidates, rng)
    node.bias += rng.uniform(config.bias_mutation_min, config.bias_mutation_max)
    return True

def _mod_activation(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """
    Give a random hidden node (or output node, if config.mutate_output)
    a different allowed activation function.
    """
    candidates = network.hidden_nodes + (network.output_nodes if config.mutate_output else [])
    if not candidates:
        return False

    node    = _pick(candidates, rng)
    options = [name for name in config.allowed_activations if activations[name] is not node.squash]
    if not options:
        return False
    node.squash = activations[_pick(options, rng)]
    return True

def _add_self_connection(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """Add a self connection to a random non-input node that has none."""
    if len(network.connections) >= config.max_connections:
        return False
    candidates = [node for node in network.nodes
                  if node.type is not NodeType.INPUT and node.self_connection is None]
    if not candidates:
        return False

    node = _pick(candidates, rng)
    network.connect(node, node, rng.uniform(-1.0, 1.0))
    return True

def _sub_self_connection(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """Remove the self connection of a random self connected node."""
    candidates = [node for node in network.nodes if node.self_connection is not None]
    if not candidates:
        return False

    node = _pick(candidates, rng)
    network.disconnect(node, node)
    return True

def _add_gate(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """Let a random non-input node gate a random ungated connection."""
    if len(network.gates) >= config.max_gates:
        return False
    ungated = [conn for conn in network.connections if conn.gate_node is None]
    if not ungated:
        return False

    gaters = [node for node in network.nodes if node.type is not NodeType.INPUT]
    network.add_gate(_pick(gaters, rng), _pick(ungated, rng))
    return True

def _sub_gate(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """Remove a random gate."""
    if not network.gates:
        return False
    network.remove_gate(_pick(network.gates, rng))
    return True

def _add_back_connection(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """Connect a random backward pair of non-input nodes that is not connected yet."""
    if len(network.connections) >= config.max_connections:
        return False

    order = network.activation_order()
    pairs = [(a, b)
             for i, b in enumerate(order) if b.type is not NodeType.INPUT
             for a in order[i + 1:]       if not a.is_projecting_to(b)]
    if not pairs:
        return False

    a, b = _pick(pairs, rng)
    network.connect(a, b, rng.uniform(-1.0, 1.0))
    return True

def _sub_back_connection(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """
    Remove a random backward connection whose source has other outgoing
    connections and whose target has other incoming connections.
    """
    rank       = _ranks(network)
    candidates = [conn for conn in network.connections
                  if conn.from_node is not conn.to_node
                  and len(conn.from_node.outgoing) > 1
                  and len(conn.to_node.incoming) > 1
                  and rank[conn.to_node] < rank[conn.from_node]]
    if not candidates:
        return False

    conn = _pick(candidates, rng)
    network.disconnect(conn.from_node, conn.to_node)
    return True

def _swap_nodes(network: 'Network', config: 'Config', rng: np.random.Generator) -> bool:
    """
    Swap bias and activation function of two random hidden nodes
    (output nodes included, if config.mutate_output).
    """
    candidates = network.hidden_nodes + (network.output_nodes if config.mutate_output else [])
    if len(candidates) < 2:
        return False

    i, j   = rng.choice(len(candidates), size=2, replace=False)
    node_a = candidates[int(i)]
    node_b = candidates[int(j)]
    node_a.bias,   node_b.bias   = node_b.bias,   node_a.bias
    node_a.squash, node_b.squash = node_b.squash, node_a.squash
    return True

_MUTATORS: dict[MutationKind, Callable[['Network', 'Config', np.random.Generator], bool]] = {
    MutationKind.ADD_NODE           : _add_node,
    MutationKind.SUB_NODE           : _sub_node,
    MutationKind.ADD_CONNECTION     : _add_connection,
    MutationKind.SUB_CONNECTION     : _sub_connection,
    MutationKind.MOD_WEIGHT         : _mod_weight,
    MutationKind.MOD_BIAS           : _mod_bias,
    MutationKind.MOD_ACTIVATION     : _mod_activation,
    MutationKind.ADD_SELF_CONNECTION: _add_self_connection,
    MutationKind.SUB_SELF_CONNECTION: _sub_self_connection,
    MutationKind.ADD_GATE           : _add_gate,
    MutationKind.SUB_GATE           : _sub_gate,
    MutationKind.ADD_BACK_CONNECTION: _add_back_connection,
    MutationKind.SUB_BACK_CONNECTION: _sub_back_connection,
    MutationKind.SWAP_NODES         : _swap_nodes
}

def mutate(network: 'Network',
           kind   : MutationKind,
           config : 'Config | None' = None,
           rng    : np.random.Generator | None = None) -> bool:
    """
    Apply one mutation to a network, in place.

    Parameters:
        network: The network to mutate
        kind:    Which mutation to apply
        config:  Mutation parameters (section [MUTATION]); defaults if not given
        rng:     Random generator (the network's own if not given)

    Returns:
        True if the network was changed, False if the mutation had no valid target
    """
    # Import here to avoid circular import
    from evograph.run.config import Config

    config = config if config is not None else Config()
    rng    = rng    if rng    is not None else network.rng
    return _MUTATORS[kind](network, config, rng)
