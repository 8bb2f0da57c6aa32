"""
Pool Package

This package provides the population level machinery of evolution.

Exported:
    Population:                    The NEAT driver
    FitnessEvaluator:              Scores genomes on a dataset (optionally in a worker pool)
    Species:                       A cluster of genetically similar genomes
    SpeciesManager:                Partitions a population into species
    PowerSelection:                Selection biased towards the fittest genomes
    FitnessProportionateSelection: Roulette wheel selection
    TournamentSelection:           Tournament selection
"""

from evograph.pool.selection  import PowerSelection, FitnessProportionateSelection, TournamentSelection, make_selection
from evograph.pool.species    import Species, SpeciesManager
from evograph.pool.fitness    import FitnessEvaluator, score_genome
from evograph.pool.population import Population

__all__ = [
    'Population',
    'FitnessEvaluator',
    'score_genome',
    'Species',
    'SpeciesManager',
    'PowerSelection',
    'FitnessProportionateSelection',
    'TournamentSelection',
    'make_selection'
]
