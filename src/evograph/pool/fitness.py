"""
Fitness Evaluation Module.

This module implements the default fitness function used when a network is
evolved against a dataset: every genome is scored by its negated loss on
the dataset, minus a growth penalty proportional to its size.

Genomes are scored as independent tasks that receive only serialized data
(the dataset, the genome's record and the loss), so they can run in a
joblib worker pool. A task that fails scores -inf, so a single broken
genome cannot stop evolution.

Classes:
    FitnessEvaluator: Scores a population, serially or with a worker pool

Functions:
    score_genome: Score one serialized genome (the worker task)
"""

import logging
import math
from joblib import Parallel, delayed
from typing import Callable

from evograph.network.network import Network

logger = logging.getLogger(__name__)

def score_genome(dataset: list[dict], genome_record: dict, loss: str | Callable) -> float:
    """
    Negated mean loss of a serialized genome on a dataset.

    Returns:
        The score, or -inf if the genome could not be evaluated
    """
    try:
        network = Network.from_dict(genome_record)
        return -network.test(dataset, loss)
    except Exception:
        logger.warning("Genome evaluation failed, scoring it -inf", exc_info=True)
        return -math.inf

class FitnessEvaluator:
    """
    Scores every genome of a population in place.

    Parallelization of fitness evaluation:
        threads=1:  Serial evaluation (no parallelization)
        threads>1:  Use specified number of parallel processes
        threads=-1: Use all available CPU cores

    Used as a context manager, the worker pool is kept alive across
    generations and shut down on exit (after outstanding tasks complete).

    Public Methods:
        __call__(genomes): Assign a score to every genome (returns when all are scored)
        penalty(genome):   Growth penalty of a genome
    """

    def __init__(self,
                 dataset: list[dict],
                 loss   : str | Callable = "MSE",
                 growth : float = 0.0001,
                 threads: int | None = -1):
        self._dataset  : list[dict]      = list(dataset)
        self._loss     : str | Callable  = loss
        self._growth   : float           = growth
        self._threads  : int             = threads if threads is not None else -1
        self._parallel : Parallel | None = None

    def __enter__(self) -> 'FitnessEvaluator':
        if self._threads != 1:
            self._parallel = Parallel(n_jobs=self._threads)
            self._parallel.__enter__()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if self._parallel is not None:
            self._parallel.__exit__(exc_type, exc_value, traceback)
            self._parallel = None

    def penalty(self, genome: Network) -> float:
        return self._growth * genome.size

    def __call__(self, genomes: list[Network]):
        records = [genome.to_dict() for genome in genomes]

        if self._threads == 1:
            scores = [score_genome(self._dataset, record, self._loss) for record in records]
        else:
            parallel = self._parallel if self._parallel is not None else Parallel(n_jobs=self._threads)
            scores   = parallel(delayed(score_genome)(self._dataset, record, self._loss) for record in records)

        for genome, score in zip(genomes, scores):
            genome.score = score - self.penalty(genome)
