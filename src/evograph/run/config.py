"""
Configuration Module.

This module implements the Config class, which holds every tunable
parameter of training and evolution. Parameters are read from an INI file
with the sections [TRAINING], [EVOLUTION], [SPECIATION] and [MUTATION];
without a file the documented defaults are used. Any parameter can be
overridden per call through Config.override().

Classes:
    Config: Training and evolution parameters
"""

import configparser
import copy
import math
import os

from evograph.activations import activations

class Config:

    @staticmethod
    def _parse_allowed_activations(raw_options):
        """
        Parse allowed_activations from string to list.

        Parameters:
            raw_options: Either "all", a comma-separated list, or already a list

        Returns:
            List of activation function names
        """
        # If already a list, return as-is
        if isinstance(raw_options, (list, tuple)):
            return list(raw_options)

        if raw_options == 'all':
            return list(activations.keys())

        parsed = [opt.strip() for opt in raw_options.split(',')]
        for opt in parsed:
            if opt not in activations:
                raise ValueError(f"Invalid activation function '{opt}' in allowed_activations")
        return parsed

    @staticmethod
    def _parse_mutations(raw_options):
        """
        Parse mutations from string to a list of MutationKind.

        Parameters:
            raw_options: Either "all", "feedforward", a comma-separated list
                         of mutation names, or already a list

        Returns:
            List of MutationKind values
        """
        # Import here to avoid circular import
        from evograph.genotype.mutation import MutationKind, ALL_MUTATIONS, FEEDFORWARD_MUTATIONS

        if isinstance(raw_options, (list, tuple)):
            return [MutationKind[opt.upper()] if isinstance(opt, str) else opt for opt in raw_options]

        if raw_options == 'all':
            return list(ALL_MUTATIONS)
        if raw_options == 'feedforward':
            return list(FEEDFORWARD_MUTATIONS)

        parsed = []
        for opt in raw_options.split(','):
            try:
                parsed.append(MutationKind[opt.strip().upper()])
            except KeyError:
                raise ValueError(f"Invalid mutation '{opt.strip()}' in mutations") from None
        return parsed

    def __setattr__(self, name, value):
        if name == 'allowed_activations' and value is not None:
            value = Config._parse_allowed_activations(value)
        elif name == 'mutations' and value is not None:
            value = Config._parse_mutations(value)
        super().__setattr__(name, value)

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or with the default values.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, every parameter gets its default value.
        """
        parser = configparser.ConfigParser()
        if config_file is not None:
            if not os.path.exists(config_file):
                raise FileNotFoundError(f"Configuration file '{config_file}' not found")
            parser.read(config_file)

        # Helper function to safely parse values
        def get_value(section, key, value_type, default):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                return default

        # [TRAINING]

        # Stop after this many iterations (-1: no iteration cap).
        self.iterations = get_value('TRAINING', 'iterations', int, -1)

        # Stop once the error is at or below this value (-1: no error target).
        self.error = get_value('TRAINING', 'error', float, -1.0)

        # Loss function: MSE, MBE, Binary, MAE, MAPE, WAPE, MSLE, Hinge (or a callable).
        self.loss = get_value('TRAINING', 'loss', str, 'MSE')

        # Base learning rate and its policy (fixed, step, exponential, inverse, or a callable).
        self.rate             = get_value('TRAINING', 'rate'            , float, 0.3)
        self.rate_policy      = get_value('TRAINING', 'rate_policy'     , str  , 'fixed')
        self.rate_gamma       = get_value('TRAINING', 'rate_gamma'      , float, None)
        self.rate_step_size   = get_value('TRAINING', 'rate_step_size'  , int  , 100)
        self.rate_power       = get_value('TRAINING', 'rate_power'      , float, 2.0)

        # Weights are applied after every 'batch_size' examples (and at the end of the dataset).
        self.batch_size = get_value('TRAINING', 'batch_size', int  , 1)
        self.momentum   = get_value('TRAINING', 'momentum'  , float, 0.0)
        self.dropout    = get_value('TRAINING', 'dropout'   , float, 0.0)

        # Reshuffle the training examples every iteration.
        self.shuffle = get_value('TRAINING', 'shuffle', bool, False)

        # Clear the node states after every training iteration and cross validation
        # test, before each genome is scored, and after evolution finishes.
        self.clear = get_value('TRAINING', 'clear', bool, False)

        # Fraction of the dataset held out to measure the error (0: no cross validation).
        self.cross_validate_test_size = get_value('TRAINING', 'cross_validate_test_size', float, 0.0)

        # Log progress every 'log' iterations (0: never).
        self.log = get_value('TRAINING', 'log', int, 0)

        # Periodic callback, an evograph.run.training.Schedule (not read from file).
        self.schedule = None

        # [EVOLUTION]

        self.population_size = get_value('EVOLUTION', 'population_size', int, 50)

        # Number of best genomes copied unchanged into the next generation.
        self.elitism = get_value('EVOLUTION', 'elitism', int, 1)

        # Number of copies of the template network added to each generation.
        self.provenance = get_value('EVOLUTION', 'provenance', int, 0)

        # Probability that an offspring is mutated, and how many mutations it then gets.
        self.mutation_rate   = get_value('EVOLUTION', 'mutation_rate'  , float, 0.4)
        self.mutation_amount = get_value('EVOLUTION', 'mutation_amount', int  , 1)

        # Mutations allowed during evolution: all, feedforward, or a comma separated list.
        self.mutations = get_value('EVOLUTION', 'mutations', str, 'feedforward')

        # Parent selection: power, fitness_proportionate, tournament.
        self.selection              = get_value('EVOLUTION', 'selection'             , str  , 'power')
        self.selection_power        = get_value('EVOLUTION', 'selection_power'       , float, 4.0)
        self.tournament_size        = get_value('EVOLUTION', 'tournament_size'       , int  , 5)
        self.tournament_probability = get_value('EVOLUTION', 'tournament_probability', float, 0.5)

        # Fitness penalty per hidden node, connection and gate.
        self.growth = get_value('EVOLUTION', 'growth', float, 0.0001)

        # Treat both parents as equally fit during crossover.
        self.equal = get_value('EVOLUTION', 'equal', bool, True)

        # Size of the worker pool used for fitness evaluation (1: serial, -1: all cores).
        self.threads = get_value('EVOLUTION', 'threads', int, -1)

        # [SPECIATION]

        self.compatibility_threshold = get_value('SPECIATION', 'compatibility_threshold', float, 3.0)
        self.distance_excess_coeff   = get_value('SPECIATION', 'distance_excess_coeff'  , float, 1.0)
        self.distance_disjoint_coeff = get_value('SPECIATION', 'distance_disjoint_coeff', float, 1.0)
        self.distance_weight_coeff   = get_value('SPECIATION', 'distance_weight_coeff'  , float, 0.4)

        # [MUTATION]

        # Structural caps; a mutation that would exceed them does nothing.
        self.max_nodes       = get_value('MUTATION', 'max_nodes'      , float, math.inf)
        self.max_connections = get_value('MUTATION', 'max_connections', float, math.inf)
        self.max_gates       = get_value('MUTATION', 'max_gates'      , float, math.inf)

        # Redistribute the gates of a removed node's connections.
        self.keep_gates = get_value('MUTATION', 'keep_gates', bool, True)

        # Whether activation mutations and node swaps may touch output nodes.
        self.mutate_output = get_value('MUTATION', 'mutate_output', bool, True)

        # Ranges of the uniform perturbations added to weights and biases.
        self.weight_mutation_min = get_value('MUTATION', 'weight_mutation_min', float, -1.0)
        self.weight_mutation_max = get_value('MUTATION', 'weight_mutation_max', float,  1.0)
        self.bias_mutation_min   = get_value('MUTATION', 'bias_mutation_min'  , float, -1.0)
        self.bias_mutation_max   = get_value('MUTATION', 'bias_mutation_max'  , float,  1.0)

        # Activations available to MOD_ACTIVATION (and to new nodes when randomized).
        self.allowed_activations = get_value('MUTATION', 'allowed_activations', str, 'all')

        # New hidden nodes get a random allowed activation (otherwise logistic).
        self.random_activation = get_value('MUTATION', 'random_activation', bool, False)

    def override(self, **options) -> 'Config':
        """
        Return a copy of this configuration with some parameters replaced.

        Raises:
            AttributeError: if an option does not name a parameter
        """
        overridden = copy.copy(self)
        for name, value in options.items():
            if not hasattr(self, name):
                raise AttributeError(f"unknown configuration parameter '{name}'")
            setattr(overridden, name, value)
        return overridden
