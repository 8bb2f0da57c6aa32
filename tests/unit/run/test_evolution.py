"""
Unit tests for the evolution loop.
"""

import logging
import pytest
from unittest.mock import Mock, patch

from evograph.errors        import SizeMismatchError, StoppingCriterionError
from evograph.network       import Network
from evograph.run.config    import Config
from evograph.run.evolution import evolve
from evograph.run.training  import Schedule


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def config():
    return Config().override(population_size=10, threads=1)

@pytest.fixture
def network(rng):
    return Network(2, 1, rng)


def prefer_small_networks(genomes):
    for genome in genomes:
        genome.score = -float(genome.size)


# ============================================================================
# Test Evolve
# ============================================================================

class TestEvolve:

    def test_needs_dataset_or_fitness_function(self, network, config):
        with pytest.raises(StoppingCriterionError):
            evolve(network, None, config)

    def test_mismatched_dataset_raises(self, network, config):
        with pytest.raises(SizeMismatchError):
            evolve(network, [{"input": [1], "output": [1]}], config)

    def test_generation_cap(self, network, config, xor_dataset):
        result = evolve(network, xor_dataset, config.override(iterations=3))
        assert result["iterations"] == 3
        assert set(result) == {"error", "iterations", "time"}

    def test_network_takes_over_best_genome(self, network, config, xor_dataset):
        result = evolve(network, xor_dataset, config.override(iterations=3))
        assert network.score is not None
        assert result["error"] == pytest.approx(network.test(xor_dataset))
        assert [node.index for node in network.nodes] == list(range(len(network.nodes)))

    def test_error_target(self, network, config):
        result = evolve(network, None, config.override(error=10.0), fitness_function=prefer_small_networks)
        assert result["iterations"] == 1
        assert result["error"] == pytest.approx(2.0)

    def test_positive_scores_without_error_target_run_all_generations(self, network, config):
        def constant_score(genomes):
            for genome in genomes:
                genome.score = 5.0

        result = evolve(network, None, config.override(iterations=5), fitness_function=constant_score)
        assert result["iterations"] == 5
        assert result["error"] == pytest.approx(-5.0)

    def test_network_is_cleared_only_on_request(self, network, config):
        with patch.object(Network, "clear") as clear:
            evolve(network, None, config.override(iterations=1), fitness_function=prefer_small_networks)
        clear.assert_not_called()

        with patch.object(Network, "clear") as clear:
            evolve(network, None, config.override(iterations=1, clear=True), fitness_function=prefer_small_networks)
        clear.assert_called()

    def test_custom_fitness_function(self, network, config):
        fitness_function = Mock(side_effect=prefer_small_networks)
        evolve(network, None, config.override(iterations=2), fitness_function=fitness_function)
        assert fitness_function.call_count == 2

    def test_schedule(self, network, config, xor_dataset):
        callback = Mock()
        evolve(network, xor_dataset, config.override(iterations=4, schedule=Schedule(callback, 2)))
        assert [call.args[2] for call in callback.call_args_list] == [2, 4]

    def test_logging(self, network, config, xor_dataset, caplog):
        with caplog.at_level(logging.INFO, logger='evograph.run.evolution'):
            evolve(network, xor_dataset, config.override(iterations=2, log=1))
        assert len(caplog.records) == 2
        assert "species" in caplog.records[0].getMessage()

    def test_network_method(self, network, xor_dataset):
        result = network.evolve(xor_dataset, iterations=2, population_size=8, threads=1)
        assert result["iterations"] == 2
