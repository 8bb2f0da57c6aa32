"""
Learning Rate Policies Module.

A rate policy maps the base learning rate and the iteration number to the
learning rate used in that iteration.

Classes:
    FixedRate:       Always the base rate
    StepRate:        Multiplied by gamma every 'step_size' iterations
    ExponentialRate: Multiplied by gamma every iteration
    InverseRate:     Decays as (1 + gamma * iteration) ** -power

Functions:
    make_rate_policy: Create the policy described by a configuration
"""

import math
from typing import Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from evograph.run.config import Config

class FixedRate:

    def __call__(self, base_rate: float, iteration: int) -> float:
        return base_rate

class StepRate:

    def __init__(self, gamma: float = 0.9, step_size: int = 100):
        self.gamma     = gamma
        self.step_size = step_size

    def __call__(self, base_rate: float, iteration: int) -> float:
        return base_rate * self.gamma ** math.floor(iteration / self.step_size)

class ExponentialRate:

    def __init__(self, gamma: float = 0.999):
        self.gamma = gamma

    def __call__(self, base_rate: float, iteration: int) -> float:
        return base_rate * self.gamma ** iteration

class InverseRate:

    def __init__(self, gamma: float = 0.001, power: float = 2.0):
        self.gamma = gamma
        self.power = power

    def __call__(self, base_rate: float, iteration: int) -> float:
        return base_rate * (1 + self.gamma * iteration) ** -self.power

def make_rate_policy(config: 'Config') -> Callable[[float, int], float]:
    """
    Create the rate policy named by config.rate_policy.
    A callable policy is returned unchanged; a missing 'rate_gamma'
    means the policy's own default.
    """
    policy = config.rate_policy
    if callable(policy):
        return policy

    gamma = {} if config.rate_gamma is None else {"gamma": config.rate_gamma}
    if policy == 'fixed':
        return FixedRate()
    elif policy == 'step':
        return StepRate(step_size=config.rate_step_size, **gamma)
    elif policy == 'exponential':
        return ExponentialRate(**gamma)
    elif policy == 'inverse':
        return InverseRate(power=config.rate_power, **gamma)
    raise ValueError(f"unknown rate policy '{policy}'")
