"""
NEAT Population Module

This module implements the Population class, the driver of the NEAT
evolutionary algorithm. Each call to evolve() produces one new generation:
the current one is scored (by an external fitness function), speciated and
sorted; the best genomes survive unchanged, the rest of the new generation
is bred by crossover of selected parents and then mutated.

Classes:
    Population: A population of evolving networks
"""

import math
import numpy as np
from statistics import mean
from typing     import Callable

from evograph.errors             import SizeMismatchError
from evograph.genotype.crossover import crossover
from evograph.genotype.mutation  import mutate
from evograph.network.network    import Network
from evograph.pool.selection     import make_selection
from evograph.pool.species       import SpeciesManager
from evograph.run.config         import Config

def _sort_key(genome: Network) -> float:
    if genome.score is None or math.isnan(genome.score):
        return -math.inf
    return genome.score

class Population:
    """
    A population of evolving networks (genomes).

    The fitness function is called with the list of genomes and must assign
    a score to each of them (higher is better). It is only called when the
    population has not been scored yet, so callers may also score genomes
    themselves before calling evolve().

    Public Attributes:
        genomes:         The networks of the current generation
        generation:      Number of generations produced so far
        template:        The network every genome of generation zero is a copy of
        species_manager: Tracks the species of the population

    Public Methods:
        evolve():        Produce the next generation, return the fittest genome of the current one
        evaluate():      Score and speciate the current generation
        sort():          Sort the genomes by descending score
        get_fittest():   The genome with the best score
        get_average():   The average score
        get_parent():    Select a parent
        get_offspring(): Cross over two selected parents
        mutate(genomes): Mutate some of the given genomes
    """

    def __init__(self,
                 input_size      : int,
                 output_size     : int,
                 fitness_function: Callable[[list[Network]], None],
                 config          : Config | None = None,
                 template        : Network | None = None,
                 rng             : np.random.Generator | None = None):
        """
        Initialize the population with copies of the template network.

        Parameters:
            input_size:       Number of network inputs
            output_size:      Number of network outputs
            fitness_function: Assigns a score to every genome of a list
            config:           Evolution parameters (sections [EVOLUTION], [SPECIATION], [MUTATION])
            template:         Seed network (a new fully connected network if not given)
            rng:              Random generator used for selection, crossover and mutation
        """
        self._config           = config if config is not None else Config()
        self._fitness_function = fitness_function
        self._selection        = make_selection(self._config)
        self.rng               = rng if rng is not None else np.random.default_rng()

        if self._config.elitism + self._config.provenance > self._config.population_size:
            raise ValueError("elitism + provenance cannot exceed the population size")

        self.template = template if template is not None else Network(input_size, output_size, self.rng)
        if self.template.input_size != input_size or self.template.output_size != output_size:
            raise SizeMismatchError("the template network does not match the population's input/output sizes")

        self.input_size      : int             = input_size
        self.output_size     : int             = output_size
        self.generation      : int             = 0
        self.genomes         : list[Network]   = [self._copy_template() for _ in range(self._config.population_size)]
        self.species_manager : SpeciesManager  = SpeciesManager(self._config)

    def _copy_template(self) -> Network:
        genome = Network.from_dict(self.template.to_dict(), self.rng)
        genome.score = None
        return genome

    def _is_scored(self) -> bool:
        return all(genome.score is not None for genome in self.genomes)

    def evaluate(self):
        """
        Score all genomes with the fitness function, then speciate them.
        """
        if self._config.clear:
            for genome in self.genomes:
                genome.clear()

        self._fitness_function(self.genomes)
        self.species_manager.speciate(self.genomes, self.generation)

    def sort(self):
        self.genomes.sort(key=_sort_key, reverse=True)

    def get_fittest(self) -> Network:
        if not self._is_scored():
            self.evaluate()
        self.sort()
        return self.genomes[0]

    def get_average(self) -> float:
        if not self._is_scored():
            self.evaluate()
        return mean(genome.score for genome in self.genomes)

    def get_parent(self) -> Network:
        """
        Select a parent from the (sorted) population.
        """
        return self._selection.select(self.genomes, self.rng)

    def get_offspring(self) -> Network:
        parent1 = self.get_parent()
        parent2 = self.get_parent()
        return crossover(parent1, parent2, self._config.equal, self.rng)

    def mutate(self, genomes: list[Network]):
        """
        Each genome is mutated with probability mutation_rate;
        a mutated genome gets mutation_amount random mutations.
        """
        mutations = self._config.mutations
        for genome in genomes:
            if self.rng.random() < self._config.mutation_rate:
                for _ in range(self._config.mutation_amount):
                    kind = mutations[int(self.rng.integers(len(mutations)))]
                    mutate(genome, kind, self._config, self.rng)

    def evolve(self) -> Network:
        """
        Produce the next generation.

        Returns:
            A copy of the fittest genome of the generation that was replaced (with its score)
        """
        if not self._is_scored():
            self.evaluate()
        self.sort()

        fittest       = self.genomes[0].copy()
        fittest.score = self.genomes[0].score

        elitists       = self.genomes[:self._config.elitism]
        new_population = [self._copy_template() for _ in range(self._config.provenance)]
        num_offspring  = self._config.population_size - self._config.elitism - self._config.provenance
        for _ in range(num_offspring):
            new_population.append(self.get_offspring())

        self.mutate(new_population)
        self.genomes = new_population + elitists

        for genome in self.genomes:
            genome.score = None
        self.generation += 1

        return fittest
