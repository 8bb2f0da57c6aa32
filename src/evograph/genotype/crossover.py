"""
Network Crossover Module.

This module implements crossover: the creation of an offspring network
from two parent networks.

Nodes are aligned by position. Connections are aligned as genes keyed by
their innovation id, computed from the parents' current node indices:
matching genes are inherited from a random parent, disjoint and excess
genes from the fitter parent (from both when the parents are equally fit).

Functions:
    crossover:        Create an offspring of two networks
    connection_genes: Connection genes of a network keyed by innovation id
"""

import numpy as np
from typing import TYPE_CHECKING

from evograph.errors             import SizeMismatchError
from evograph.network.connection import innovation_id
from evograph.network.node       import Node, NodeType, PoolNode

if TYPE_CHECKING:
    from evograph.network import Network

def connection_genes(network: 'Network') -> dict[int, dict]:
    """
    The connection genes of a network, keyed by innovation id
    (self connections with weight 0 are not genes).
    """
    network.reindex()
    genes = {}
    for conn in network.connections:
        if conn.from_node is conn.to_node and conn.weight == 0:
            continue
        genes[innovation_id(conn.from_node.index, conn.to_node.index)] = conn.to_dict()
    return genes

def _copy_node(node: Node, rng: np.random.Generator) -> Node:
    if isinstance(node, PoolNode):
        offspring_node      = PoolNode(node.pooling_type, rng=rng)
        offspring_node.bias = node.bias
    else:
        offspring_node = Node(node.type, node.bias, node.squash, rng)
    offspring_node.squash = node.squash
    return offspring_node

def _nth_of_type(network: 'Network', node_type: NodeType, n: int) -> Node:
    return [node for node in network.nodes if node.type is node_type][n]

def crossover(parent_a: 'Network',
              parent_b: 'Network',
              equal   : bool = False,
              rng     : np.random.Generator | None = None) -> 'Network':
    """
    Create an offspring of two networks.

    If 'equal' is set, or both parents have the same score, the offspring
    size is a random number between the sizes of the parents and genes are
    taken from both parents; otherwise the offspring has the size of the
    fitter parent and inherits its disjoint and excess genes.

    Parameters:
        parent_a: First parent
        parent_b: Second parent
        equal:    Treat the parents as equally fit
        rng:      Random generator (parent_a's if not given)

    Returns:
        The offspring network

    Raises:
        SizeMismatchError: if the parents have different input or output sizes
    """
    # Import here to avoid circular import
    from evograph.network.network import Network

    if parent_a.input_size != parent_b.input_size or parent_a.output_size != parent_b.output_size:
        raise SizeMismatchError("cannot cross over networks with different input or output sizes")
    rng = rng if rng is not None else parent_a.rng

    score_a = parent_a.score if parent_a.score is not None else -np.inf
    score_b = parent_b.score if parent_b.score is not None else -np.inf
    equal   = equal or score_a == score_b

    size_a = len(parent_a.nodes)
    size_b = len(parent_b.nodes)
    if equal:
        size = int(rng.integers(min(size_a, size_b), max(size_a, size_b) + 1))
    elif score_a > score_b:
        size = size_a
    else:
        size = size_b

    offspring = Network._empty(parent_a.input_size, parent_a.output_size, rng)

    # Node genes: input and output slots take the n-th input/output node of
    # a random parent, hidden slots the node at the same position.
    counters = {NodeType.INPUT: 0, NodeType.OUTPUT: 0}
    for i in range(size):
        if i >= size_a:
            source = parent_b
        elif i >= size_b:
            source = parent_a
        else:
            source = parent_a if rng.random() < 0.5 else parent_b

        slot_type = parent_a.nodes[i].type if i < size_a else parent_b.nodes[i].type
        if slot_type is NodeType.HIDDEN:
            node = source.nodes[i]
        else:
            node = _nth_of_type(source, slot_type, counters[slot_type])
            counters[slot_type] += 1
        offspring.nodes.append(_copy_node(node, rng))
    offspring.reindex()

    # Connection genes
    genes_a = connection_genes(parent_a)
    genes_b = connection_genes(parent_b)
    inherited = []
    for key in sorted(set(genes_a) | set(genes_b)):
        if key in genes_a and key in genes_b:
            gene = genes_a[key] if rng.random() < 0.5 else genes_b[key]
        elif key in genes_a:
            if not (equal or score_a > score_b):
                continue
            gene = genes_a[key]
        else:
            if not (equal or score_b > score_a):
                continue
            gene = genes_b[key]
        inherited.append(gene)

    for gene in inherited:
        if gene["fromIndex"] >= size or gene["toIndex"] >= size:
            continue
        conn = offspring.connect(offspring.nodes[gene["fromIndex"]],
                                 offspring.nodes[gene["toIndex"]],
                                 gene["weight"])
        gate_index = gene["gateNodeIndex"]
        if gate_index is not None and gate_index < size:
            offspring.add_gate(offspring.nodes[gate_index], conn)

    return offspring
