"""
Parent Selection Module.

Selection methods pick a parent from a population that is sorted by
descending score.

Classes:
    PowerSelection:                Biased towards the front of the population
    FitnessProportionateSelection: Roulette wheel on (shifted) scores
    TournamentSelection:           Best of a random tournament, with some randomness

Functions:
    make_selection: Create the selection method described by a configuration
"""

import math
import numpy as np
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from evograph.network    import Network
    from evograph.run.config import Config

def _score(genome: 'Network') -> float:
    if genome.score is None or math.isnan(genome.score):
        return -math.inf
    return genome.score

class PowerSelection:
    """
    Pick index floor(r ** power * n) for a uniform random r: the higher
    the power, the stronger the preference for the fittest genomes.
    """

    def __init__(self, power: float = 4.0):
        self.power = power

    def select(self, genomes: list['Network'], rng: np.random.Generator) -> 'Network':
        index = int(math.floor(rng.random() ** self.power * len(genomes)))
        return genomes[index]

class FitnessProportionateSelection:
    """
    Pick a genome with probability proportional to its score. Scores are
    shifted so the lowest one is zero when negative scores are present.
    """

    def select(self, genomes: list['Network'], rng: np.random.Generator) -> 'Network':
        scores = np.array([_score(genome) for genome in genomes], dtype=float)
        finite = np.isfinite(scores)
        if not finite.any():
            return genomes[int(rng.integers(len(genomes)))]

        scores = np.where(finite, scores, np.min(scores[finite]))
        if scores.min() < 0:
            scores = scores - scores.min()
        total = scores.sum()
        if total <= 0:
            return genomes[int(rng.integers(len(genomes)))]
        return genomes[int(rng.choice(len(genomes), p=scores / total))]

class TournamentSelection:
    """
    Draw 'size' random genomes; the best of them wins with 'probability',
    otherwise the second best with 'probability', and so on.
    """

    def __init__(self, size: int = 5, probability: float = 0.5):
        self.size        = size
        self.probability = probability

    def select(self, genomes: list['Network'], rng: np.random.Generator) -> 'Network':
        if self.size > len(genomes):
            raise ValueError(f"tournament size {self.size} is larger than the population ({len(genomes)})")

        contestants = [genomes[int(i)] for i in rng.integers(len(genomes), size=self.size)]
        contestants.sort(key=_score, reverse=True)
        for contestant in contestants:
            if rng.random() < self.probability:
                return contestant
        return contestants[-1]

def make_selection(config: 'Config'):
    if config.selection == 'power':
        return PowerSelection(config.selection_power)
    elif config.selection == 'fitness_proportionate':
        return FitnessProportionateSelection()
    elif config.selection == 'tournament':
        return TournamentSelection(config.tournament_size, config.tournament_probability)
    raise ValueError(f"unknown selection method '{config.selection}'")
