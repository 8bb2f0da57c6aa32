"""
Run Package

This package provides configuration and the training loop.
The evolution loop lives in evograph.run.evolution.

Exported:
    Config:           Training and evolution parameters
    train:            Train a network by backpropagation
    test:             Mean loss of a network over a dataset
    Schedule:         Periodic callback for training and evolution
    losses:           Dictionary mapping loss names to functions
    get_loss:         Resolve a loss by name
    make_rate_policy: Create the learning rate policy of a configuration
"""

from evograph.run.config   import Config
from evograph.run.losses   import losses, get_loss
from evograph.run.rates    import FixedRate, StepRate, ExponentialRate, InverseRate, make_rate_policy
from evograph.run.training import train, test, Schedule

__all__ = [
    'Config',
    'losses',
    'get_loss',
    'FixedRate',
    'StepRate',
    'ExponentialRate',
    'InverseRate',
    'make_rate_policy',
    'train',
    'test',
    'Schedule'
]
