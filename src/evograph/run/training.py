"""
Training Module.

This module implements gradient based training of a network by repeated
activation and backpropagation over a dataset, and its evaluation.

A dataset is a list of examples, each a dict {"input": [...], "output": [...]}
whose sizes match the network's input and output sizes.

Classes:
    Schedule: A callback invoked every few iterations

Functions:
    train:       Train a network until an error target or iteration cap is reached
    train_epoch: One pass over a dataset
    test:        Mean loss of a network over a dataset
"""

import logging
import math
import time
from collections import namedtuple
from typing      import Callable, TYPE_CHECKING

from evograph.errors     import SizeMismatchError, StoppingCriterionError
from evograph.run.config import Config
from evograph.run.losses import get_loss
from evograph.run.rates  import make_rate_policy

if TYPE_CHECKING:
    from evograph.network import Network

logger = logging.getLogger(__name__)

# 'function' is called every 'iterations' iterations
Schedule = namedtuple('Schedule', ['function', 'iterations'])

def check_dataset(network: 'Network', dataset: list[dict]):
    """
    Raises:
        ValueError:        if the dataset is empty
        SizeMismatchError: if an example does not fit the network
    """
    if not dataset:
        raise ValueError("the dataset is empty")
    for example in dataset:
        if len(example["input"]) != network.input_size or len(example["output"]) != network.output_size:
            raise SizeMismatchError(f"dataset example sizes ({len(example['input'])}, {len(example['output'])}) "
                                    f"do not match the network ({network.input_size}, {network.output_size})")

def train_epoch(network   : 'Network',
                dataset   : list[dict],
                batch_size: int,
                rate      : float,
                momentum  : float,
                loss      : Callable,
                dropout   : float = 0.0) -> float:
    """
    Activate and backpropagate every example once.
    Weights are updated after every 'batch_size' examples and after the last one.

    Returns:
        The mean loss over the examples (measured before each update)
    """
    error_sum = 0.0
    for i, example in enumerate(dataset):
        update = (i + 1) % batch_size == 0 or i + 1 == len(dataset)
        output = network.activate(example["input"], dropout_rate=dropout, trace=True)
        network.propagate(example["output"], rate=rate, momentum=momentum, update=update)
        error_sum += loss(example["output"], output)
    return error_sum / len(dataset)

def test(network: 'Network', dataset: list[dict], loss: str | Callable = "MSE") -> float:
    """
    Mean loss over a dataset, activating the network without traces.
    """
    check_dataset(network, dataset)
    loss = get_loss(loss)

    error_sum = 0.0
    for example in dataset:
        output = network.activate(example["input"], trace=False)
        error_sum += loss(example["output"], output)
    return error_sum / len(dataset)

def train(network: 'Network', dataset: list[dict], config: Config | None = None) -> dict:
    """
    Train a network by backpropagation.

    Training stops as soon as the error is at or below config.error, or
    after config.iterations iterations; at least one of the two must be set.
    With cross validation the error is measured on the held out tail of
    the dataset, which is never trained on.

    Parameters:
        network: The network to train (in place)
        dataset: List of {"input": [...], "output": [...]} examples
        config:  Training parameters (section [TRAINING])

    Returns:
        {"error": final error, "iterations": iterations run, "time": seconds elapsed}

    Raises:
        StoppingCriterionError: if neither an iteration cap nor an error target is set
        SizeMismatchError:      if the dataset does not fit the network
    """
    config = config if config is not None else Config()
    if config.iterations <= 0 and config.error <= 0:
        raise StoppingCriterionError("set 'iterations' and/or 'error' so that training can stop")
    check_dataset(network, dataset)

    loss        = get_loss(config.loss)
    rate_policy = make_rate_policy(config)
    batch_size  = config.batch_size if config.batch_size and config.batch_size > 0 else len(dataset)
    batch_size  = min(batch_size, len(dataset))

    if config.cross_validate_test_size > 0:
        if not 0 < config.cross_validate_test_size < 1:
            raise ValueError("cross_validate_test_size must be a fraction in (0, 1)")
        train_size = math.ceil((1 - config.cross_validate_test_size) * len(dataset))
        train_set  = list(dataset[:train_size])
        test_set   = list(dataset[train_size:])
        if not test_set:
            raise ValueError("the cross validation test set is empty")
        batch_size = min(batch_size, len(train_set))
    else:
        train_set = list(dataset)
        test_set  = None

    start     = time.perf_counter()
    iteration = 0
    error     = math.inf
    # A non-positive error target or iteration cap is not a stopping criterion
    while (config.error <= 0 or error > config.error) and (config.iterations <= 0 or iteration < config.iterations):
        iteration += 1
        rate = rate_policy(config.rate, iteration)

        if config.shuffle:
            network.rng.shuffle(train_set)

        train_error = train_epoch(network, train_set, batch_size, rate, config.momentum, loss, config.dropout)
        if config.clear:
            network.clear()

        if test_set is not None:
            error = test(network, test_set, loss)
            if config.clear:
                network.clear()
        else:
            error = train_error

        if config.log > 0 and iteration % config.log == 0:
            logger.info("iteration %d, error %.6f, rate %.6f", iteration, error, rate)

        if config.schedule is not None and iteration % config.schedule.iterations == 0:
            config.schedule.function(error, iteration)

    if config.clear:
        network.clear()

    return {"error": error, "iterations": iteration, "time": time.perf_counter() - start}
