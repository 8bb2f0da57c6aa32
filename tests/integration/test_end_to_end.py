"""
Integration tests: training, evolution and persistence working together.

These tests use fixed seeds for reproducibility and keep iteration counts
small; they check that the pieces cooperate, not that a problem is solved
to a given precision.
"""

import os
import pytest
import numpy as np

from evograph            import Architect, Config, Network, load_network_json, save_network_json
from evograph.genotype   import MutationKind
from evograph.layers     import InputLayer, DenseLayer, LSTMLayer, OutputLayer
from evograph.activations import activations


# ============================================================================
# Test Training
# ============================================================================

class TestTrainingIntegration:

    def test_and_gate_is_learned(self, rng, and_dataset):
        network = Network(2, 1, rng)
        before  = network.test(and_dataset)
        result  = network.train(and_dataset, iterations=1000, error=0.01, rate=0.5)
        assert result["error"] <= before
        assert network.test(and_dataset) < before

    def test_layered_model_trains(self, rng, xor_dataset):
        network = (Architect()
                   .add_layer(InputLayer(2, rng=rng))
                   .add_layer(DenseLayer(4, activations['tanh'], rng=rng))
                   .add_layer(OutputLayer(1, activations['logistic'], rng=rng))
                   .build_model(rng))
        before = network.test(xor_dataset)
        network.train(xor_dataset, iterations=300, rate=0.3)
        assert network.test(xor_dataset) < before

    def test_recurrent_model_trains_on_a_sequence(self, rng):
        network = (Architect()
                   .add_layer(InputLayer(1, rng=rng))
                   .add_layer(LSTMLayer(2, rng=rng))
                   .add_layer(OutputLayer(1, activations['logistic'], rng=rng))
                   .build_model(rng))
        # Output the previous input
        sequence = [{"input": [x], "output": [y]} for x, y in zip([1, 0, 0, 1, 0], [0, 1, 0, 0, 1])]

        result = network.train(sequence, iterations=200, rate=0.1, clear=True)
        assert result["iterations"] == 200
        assert np.isfinite(result["error"])

        network.clear()
        assert np.isfinite(network.test(sequence))


# ============================================================================
# Test Evolution
# ============================================================================

class TestEvolutionIntegration:

    def test_xor_evolution_improves(self, xor_dataset):
        rng     = np.random.default_rng(42)
        network = Network(2, 1, rng)
        before  = network.test(xor_dataset)

        config = Config().override(population_size=30, iterations=15, mutation_rate=0.5,
                                   elitism=2, threads=1, growth=0.0)
        result = network.evolve(xor_dataset, config)
        assert result["iterations"] <= 15
        assert result["error"] <= before + 1e-9
        assert network.test(xor_dataset) == pytest.approx(result["error"])

    def test_evolution_with_all_mutations(self, xor_dataset):
        rng     = np.random.default_rng(7)
        network = Network(2, 1, rng)
        config  = Config().override(population_size=12, iterations=5, mutations='all',
                                    mutation_amount=2, mutation_rate=1.0, threads=1, clear=True)
        result = network.evolve(xor_dataset, config)
        assert result["iterations"] == 5
        assert np.isfinite(result["error"])

    def test_evolved_network_can_be_trained(self, xor_dataset):
        rng     = np.random.default_rng(1)
        network = Network(2, 1, rng)
        network.evolve(xor_dataset, iterations=3, population_size=10, threads=1)
        result = network.train(xor_dataset, iterations=10)
        assert result["iterations"] == 10


# ============================================================================
# Test Persistence
# ============================================================================

class TestPersistenceIntegration:

    def test_mutated_network_round_trip(self, tmp_path):
        rng     = np.random.default_rng(5)
        network = Network(3, 2, rng)
        for kind in [MutationKind.ADD_NODE, MutationKind.ADD_NODE, MutationKind.ADD_GATE,
                     MutationKind.ADD_SELF_CONNECTION, MutationKind.ADD_BACK_CONNECTION]:
            network.mutate(kind)

        path = os.path.join(tmp_path, "network.json")
        save_network_json(network, path)
        loaded = load_network_json(path, np.random.default_rng(5))

        inputs = [[0.1, 0.5, 0.9], [1.0, 0.0, 0.3], [0.2, 0.2, 0.2]]
        network.clear()
        loaded.clear()
        expected = [network.activate(x, trace=False) for x in inputs]
        actual   = [loaded.activate(x, trace=False) for x in inputs]
        assert actual == pytest.approx(expected)
