"""
Unit tests for the parent selection methods.
"""

import math
import pytest
import numpy as np
from unittest.mock import Mock

from evograph.network        import Network
from evograph.pool.selection import (PowerSelection, FitnessProportionateSelection, TournamentSelection,
                                     make_selection)
from evograph.run.config     import Config


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def genomes():
    """Ten genomes sorted by descending score."""
    population = []
    for score in range(10, 0, -1):
        genome = Mock(spec=Network)
        genome.score = float(score)
        population.append(genome)
    return population


# ============================================================================
# Test Power Selection
# ============================================================================

class TestPowerSelection:

    @pytest.mark.parametrize("r, expected_index", [(0.0, 0), (0.5, 0), (0.9, 6), (0.99, 9)])
    def test_index(self, genomes, r, expected_index):
        rng = Mock()
        rng.random.return_value = r
        assert PowerSelection(4).select(genomes, rng) is genomes[expected_index]

    def test_prefers_the_front(self, genomes, rng):
        picks = [genomes.index(PowerSelection(4).select(genomes, rng)) for _ in range(500)]
        assert np.mean(np.array(picks) < 3) > 0.5


# ============================================================================
# Test Fitness Proportionate Selection
# ============================================================================

class TestFitnessProportionateSelection:

    def test_only_positive_score_is_chosen(self, rng):
        genomes = [Mock(score=0.0), Mock(score=0.0), Mock(score=10.0)]
        for _ in range(20):
            assert FitnessProportionateSelection().select(genomes, rng) is genomes[2]

    def test_negative_scores_are_shifted(self, rng):
        genomes = [Mock(score=-1.0), Mock(score=-1.0), Mock(score=5.0)]
        for _ in range(20):
            assert FitnessProportionateSelection().select(genomes, rng) is genomes[2]

    def test_unscored_genomes_fall_back_to_uniform(self, rng):
        genomes = [Mock(score=None), Mock(score=-math.inf)]
        assert FitnessProportionateSelection().select(genomes, rng) in genomes


# ============================================================================
# Test Tournament Selection
# ============================================================================

class TestTournamentSelection:

    def test_best_contestant_wins_with_certainty(self, genomes):
        rng = Mock()
        rng.integers.return_value = np.array([5, 2, 7])
        rng.random.return_value   = 0.0
        assert TournamentSelection(3, 0.5).select(genomes, rng) is genomes[2]

    def test_last_contestant_when_nobody_wins(self, genomes):
        rng = Mock()
        rng.integers.return_value = np.array([5, 2, 7])
        rng.random.return_value   = 0.99
        assert TournamentSelection(3, 0.5).select(genomes, rng) is genomes[7]

    def test_tournament_larger_than_population_raises(self, genomes, rng):
        with pytest.raises(ValueError):
            TournamentSelection(11).select(genomes, rng)


# ============================================================================
# Test Factory
# ============================================================================

class TestMakeSelection:

    def test_default_is_power(self):
        selection = make_selection(Config())
        assert isinstance(selection, PowerSelection)
        assert selection.power == 4

    def test_tournament(self):
        selection = make_selection(Config().override(selection='tournament', tournament_size=3))
        assert isinstance(selection, TournamentSelection)
        assert selection.size == 3

    def test_fitness_proportionate(self):
        selection = make_selection(Config().override(selection='fitness_proportionate'))
        assert isinstance(selection, FitnessProportionateSelection)

    def test_unknown_raises(self):
        with pytest.raises(ValueError):
            make_selection(Config().override(selection='roulette'))
