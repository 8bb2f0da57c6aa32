"""
Evolution Module.

This module implements the evolution of a network with NEAT: the network
seeds a population, generations are produced until the error target or the
generation cap is reached, and the network then takes over the structure of
the best genome found.

Functions:
    evolve: Evolve a network in place
"""

import logging
import math
import time
from typing import Callable, TYPE_CHECKING

from evograph.errors          import StoppingCriterionError
from evograph.pool.fitness    import FitnessEvaluator
from evograph.pool.population import Population
from evograph.run.config      import Config
from evograph.run.training    import check_dataset

if TYPE_CHECKING:
    from evograph.network import Network

logger = logging.getLogger(__name__)

def evolve(network         : 'Network',
           dataset         : list[dict] | None = None,
           config          : Config | None = None,
           fitness_function: Callable | None = None) -> dict:
    """
    Evolve a network with NEAT.

    Without a fitness function, genomes are scored on the dataset by their
    negated loss minus a growth penalty (config.growth per hidden node,
    connection and gate), in a worker pool of config.threads processes.
    Evolution stops when the error of the fittest genome is at or below
    config.error, or after config.iterations generations; when neither is
    set, it runs for at most 1000 generations or until the error is 0.05.

    Parameters:
        network:          The network to evolve (in place); it seeds generation zero
        dataset:          List of {"input": [...], "output": [...]} examples
        config:           Evolution parameters
        fitness_function: Assigns a score to every genome of a list (optional)

    Returns:
        {"error": error of the best genome, "iterations": generations run, "time": seconds elapsed}

    Raises:
        StoppingCriterionError: if neither a dataset nor a fitness function is given
        SizeMismatchError:      if the dataset does not fit the network
    """
    config = config if config is not None else Config()
    if fitness_function is None and dataset is None:
        raise StoppingCriterionError("evolution needs a dataset or a fitness function to score genomes")
    if dataset is not None:
        check_dataset(network, dataset)

    iterations, target_error = config.iterations, config.error
    if iterations <= 0 and target_error <= 0:
        iterations, target_error = 1000, 0.05

    # A custom fitness function needs no worker pool
    threads   = config.threads if fitness_function is None else 1
    evaluator = FitnessEvaluator(dataset or [], config.loss, config.growth, threads)
    start     = time.perf_counter()

    with evaluator:
        population = Population(network.input_size,
                                network.output_size,
                                fitness_function if fitness_function is not None else evaluator,
                                config,
                                template=network,
                                rng=network.rng)

        error        = math.inf
        best_error   = math.inf
        best_score   = -math.inf
        best_genome  = None
        while (target_error <= 0 or error > target_error) and (iterations <= 0 or population.generation < iterations):
            fittest = population.evolve()
            score   = fittest.score

            # The growth penalty is not part of the error
            if fitness_function is None:
                error = -(score + evaluator.penalty(fittest))
            else:
                error = -score

            if score > best_score or best_genome is None:
                best_score  = score
                best_error  = error
                best_genome = fittest

            if config.log > 0 and population.generation % config.log == 0:
                species = len(population.species_manager.species)
                logger.info("generation %d, fitness %.6f, error %.6f, species %d",
                            population.generation, score, error, species)

            if config.schedule is not None and population.generation % config.schedule.iterations == 0:
                config.schedule.function(score, error, population.generation)

    if best_genome is not None:
        network.nodes       = best_genome.nodes
        network.connections = best_genome.connections
        network.gates       = best_genome.gates
        network.score       = best_genome.score
        network.reindex()
        if config.clear:
            network.clear()

    return {"error": best_error, "iterations": population.generation, "time": time.perf_counter() - start}
