"""
Activations Package

This package provides the activation ("squash") functions used by network nodes.

Exported:
    activations:         Dictionary mapping activation function names to functions
    activation_codes:    Dictionary mapping activation function names to short codes
    register_activation: Register a custom activation function
    activation_name:     Find the name of a registered activation function
    Individual activation functions: logistic_activation, tanh_activation, identity_activation,
                                     step_activation, relu_activation, softsign_activation,
                                     sinusoid_activation, gaussian_activation,
                                     bent_identity_activation, bipolar_activation,
                                     bipolar_sigmoid_activation, hard_tanh_activation,
                                     absolute_activation, inverse_activation,
                                     selu_activation, softplus_activation
"""

from evograph.activations.basic_activations import (
    activations,
    activation_codes,
    register_activation,
    activation_name,
    logistic_activation,
    tanh_activation,
    identity_activation,
    step_activation,
    relu_activation,
    softsign_activation,
    sinusoid_activation,
    gaussian_activation,
    bent_identity_activation,
    bipolar_activation,
    bipolar_sigmoid_activation,
    hard_tanh_activation,
    absolute_activation,
    inverse_activation,
    selu_activation,
    softplus_activation
)

__all__ = [
    'activations',
    'activation_codes',
    'register_activation',
    'activation_name',
    'logistic_activation',
    'tanh_activation',
    'identity_activation',
    'step_activation',
    'relu_activation',
    'softsign_activation',
    'sinusoid_activation',
    'gaussian_activation',
    'bent_identity_activation',
    'bipolar_activation',
    'bipolar_sigmoid_activation',
    'hard_tanh_activation',
    'absolute_activation',
    'inverse_activation',
    'selu_activation',
    'softplus_activation'
]
