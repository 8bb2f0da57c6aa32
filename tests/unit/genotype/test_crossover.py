"""
Unit tests for crossover and the genomic distance.
"""

import pytest
import numpy as np

from evograph.errors             import SizeMismatchError
from evograph.genotype.crossover import crossover, connection_genes
from evograph.genotype.distance  import distance
from evograph.genotype.mutation  import MutationKind, mutate
from evograph.network            import Network, Node, NodeType, PoolNode, PoolingType
from evograph.network.connection import innovation_id
from evograph.run.config         import Config


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def config():
    return Config()

@pytest.fixture
def parent(rng):
    return Network(2, 1, rng)

@pytest.fixture
def grown_parent(rng, config):
    """A 2-1 network with two extra hidden nodes."""
    network = Network(2, 1, rng)
    mutate(network, MutationKind.ADD_NODE, config, rng)
    mutate(network, MutationKind.ADD_NODE, config, rng)
    return network


def connection_set(network):
    network.reindex()
    return {(c.from_node.index, c.to_node.index, c.weight) for c in network.connections}


# ============================================================================
# Test Connection Genes
# ============================================================================

class TestConnectionGenes:

    def test_keys_are_innovation_ids(self, parent):
        genes = connection_genes(parent)
        assert set(genes) == {innovation_id(0, 2), innovation_id(1, 2)}
        assert genes[innovation_id(0, 2)]["fromIndex"] == 0

    def test_zero_weight_self_connections_are_not_genes(self, parent):
        output = parent.output_nodes[0]
        parent.connect(output, output, 0.0)
        assert len(connection_genes(parent)) == 2


# ============================================================================
# Test Crossover
# ============================================================================

class TestCrossover:

    def test_mismatched_parents_raise(self, parent, rng):
        with pytest.raises(SizeMismatchError):
            crossover(parent, Network(3, 1, rng))

    def test_offspring_keeps_input_and_output_sizes(self, parent, grown_parent, rng):
        offspring = crossover(parent, grown_parent, equal=True, rng=rng)
        assert len(offspring.input_nodes) == 2
        assert len(offspring.output_nodes) == 1
        assert offspring is not parent and offspring is not grown_parent

    def test_identical_parents(self, grown_parent, rng):
        twin = grown_parent.copy()
        offspring = crossover(grown_parent, twin, equal=True, rng=rng)
        assert connection_set(offspring) == connection_set(grown_parent)
        assert [n.bias for n in offspring.nodes] == [n.bias for n in grown_parent.nodes]

    def test_fitter_parent_sets_size(self, parent, grown_parent, rng):
        parent.score       = 0.0
        grown_parent.score = 1.0
        offspring = crossover(parent, grown_parent, rng=rng)
        assert len(offspring.nodes) == len(grown_parent.nodes)

        parent.score = 2.0
        offspring = crossover(parent, grown_parent, rng=rng)
        assert len(offspring.nodes) == len(parent.nodes)

    def test_fitter_parent_contributes_disjoint_genes(self, parent, grown_parent, rng):
        parent.score       = 0.0
        grown_parent.score = 1.0
        offspring = crossover(parent, grown_parent, rng=rng)
        assert set(connection_genes(offspring)) == set(connection_genes(grown_parent))

    def test_equal_size_between_parents(self, parent, grown_parent, rng):
        for _ in range(10):
            offspring = crossover(parent, grown_parent, equal=True, rng=rng)
            assert len(parent.nodes) <= len(offspring.nodes) <= len(grown_parent.nodes)

    def test_genes_come_from_parents(self, parent, grown_parent, rng):
        genes = set(connection_genes(parent)) | set(connection_genes(grown_parent))
        for _ in range(10):
            offspring = crossover(parent, grown_parent, equal=True, rng=rng)
            assert set(connection_genes(offspring)) <= genes

    def test_gates_are_inherited(self, grown_parent, rng):
        hidden = grown_parent.hidden_nodes[0]
        grown_parent.add_gate(hidden, grown_parent.connections[0])
        offspring = crossover(grown_parent, grown_parent.copy(), equal=True, rng=rng)
        assert len(offspring.gates) == 1
        assert offspring.gates[0].gate_node.index == hidden.index

    def test_pool_nodes_are_copied(self, parent, rng):
        parent.nodes.append(PoolNode(PoolingType.MAX_POOLING, rng))
        parent.reindex()
        offspring = crossover(parent, parent.copy(), equal=True, rng=rng)
        assert isinstance(offspring.nodes[-1], PoolNode)
        assert offspring.nodes[-1].pooling_type is PoolingType.MAX_POOLING

    def test_static_entry_point(self, parent, rng):
        offspring = Network.crossover(parent, parent.copy(), True, rng)
        assert connection_set(offspring) == connection_set(parent)


# ============================================================================
# Test Distance
# ============================================================================

class TestDistance:

    def test_identical_networks(self, grown_parent, config):
        assert distance(grown_parent, grown_parent.copy(), config) == 0.0

    def test_weight_difference(self, parent, config):
        other = parent.copy()
        for conn in other.connections:
            conn.weight += 1.0
        assert distance(parent, other, config) == pytest.approx(config.distance_weight_coeff)

    def test_structural_difference(self, parent, grown_parent, config):
        assert distance(parent, grown_parent, config) > 0.0

    def test_symmetric(self, parent, grown_parent, config):
        assert distance(parent, grown_parent, config) == pytest.approx(distance(grown_parent, parent, config))

    def test_networks_without_connections(self, rng, config):
        a = Network(1, 1, rng)
        b = Network(1, 1, rng)
        for network in (a, b):
            network.disconnect(network.input_nodes[0], network.output_nodes[0])
        assert distance(a, b, config) == 0.0
