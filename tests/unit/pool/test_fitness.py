"""
Unit tests for dataset based fitness evaluation.
"""

import math
import pytest

from evograph.network      import Network
from evograph.pool.fitness import FitnessEvaluator, score_genome


# ============================================================================
# Test score_genome
# ============================================================================

class TestScoreGenome:

    def test_score_is_negated_loss(self, rng, xor_dataset):
        network = Network(2, 1, rng)
        score   = score_genome(xor_dataset, network.to_dict(), "MSE")
        assert score == pytest.approx(-network.test(xor_dataset, "MSE"))

    def test_broken_genome_scores_minus_infinity(self, xor_dataset):
        assert score_genome(xor_dataset, {"inputSize": 2}, "MSE") == -math.inf


# ============================================================================
# Test FitnessEvaluator
# ============================================================================

class TestFitnessEvaluator:

    def test_penalty_grows_with_size(self, rng, xor_dataset):
        evaluator = FitnessEvaluator(xor_dataset, growth=0.5, threads=1)
        network   = Network(2, 1, rng)
        assert evaluator.penalty(network) == pytest.approx(0.5 * network.size)

    def test_serial_scores(self, rng, xor_dataset):
        genomes = [Network(2, 1, rng) for _ in range(3)]
        with FitnessEvaluator(xor_dataset, "MSE", growth=0.001, threads=1) as evaluator:
            evaluator(genomes)

        for genome in genomes:
            expected = -genome.test(xor_dataset) - 0.001 * genome.size
            assert genome.score == pytest.approx(expected)

    def test_worker_pool_matches_serial(self, rng, xor_dataset):
        genomes = [Network(2, 1, rng) for _ in range(4)]
        copies  = [genome.copy() for genome in genomes]

        with FitnessEvaluator(xor_dataset, threads=1) as serial:
            serial(genomes)
        with FitnessEvaluator(xor_dataset, threads=2) as parallel:
            parallel(copies)

        assert [c.score for c in copies] == pytest.approx([g.score for g in genomes])

    def test_usable_without_context(self, rng, xor_dataset):
        genomes = [Network(2, 1, rng) for _ in range(2)]
        FitnessEvaluator(xor_dataset, threads=2)(genomes)
        assert all(genome.score is not None for genome in genomes)
