"""
Genotype Package

This package provides the genetic operators applied to networks during evolution.

Exported:
    MutationKind:          Enumeration of all mutations
    ALL_MUTATIONS:         Every mutation
    FEEDFORWARD_MUTATIONS: The mutations that keep a network feed-forward
    mutate:                Apply one mutation to a network
    crossover:             Create an offspring of two networks
    connection_genes:      Connection genes of a network keyed by innovation id
    distance:              NEAT compatibility distance between two networks
"""

from evograph.genotype.mutation  import MutationKind, ALL_MUTATIONS, FEEDFORWARD_MUTATIONS, mutate
from evograph.genotype.crossover import crossover, connection_genes
from evograph.genotype.distance  import distance

__all__ = [
    'MutationKind',
    'ALL_MUTATIONS',
    'FEEDFORWARD_MUTATIONS',
    'mutate',
    'crossover',
    'connection_genes',
    'distance'
]
