"""
Species Tracking Module

This module implements the Species and SpeciesManager classes. After every
evaluation the population is partitioned into species of genetically
similar genomes (NEAT compatibility distance below a threshold). Species
persist across generations through their representatives, and record how
their best score develops.

Speciation in this package is descriptive: parents are still selected
from the whole population, species are tracked for reporting and analysis.

Classes:
    Species:        A cluster of genetically similar genomes
    SpeciesManager: Partitions a population into species every generation
"""

import math
from itertools import count
from typing    import TYPE_CHECKING

from evograph.genotype.distance import distance

if TYPE_CHECKING:
    from evograph.network    import Network
    from evograph.run.config import Config

class Species:
    """
    A species representing a cluster of genetically similar genomes.

    Public Attributes:
        id:             Unique species identifier
        representative: Genome used for distance calculations during speciation
        members:        The genomes that are part of this species
        age:            Number of generations this species has existed
        last_improved:  Last generation in which best_score improved
        best_score:     Best score ever achieved by a member
    """

    def __init__(self, species_id: int, representative: 'Network', generation: int):
        self.id             : int             = species_id
        self.representative : 'Network'       = representative
        self.members        : list['Network'] = [representative]
        self.age            : int             = 0
        self.last_improved  : int             = generation
        self.best_score     : float           = -math.inf

    def update(self, representative: 'Network', members: list['Network'], generation: int):
        """
        Prepare the species for a new generation and record its best score.
        """
        self.representative = representative
        self.members        = members
        self.age           += 1

        scores = [m.score for m in members if m.score is not None and not math.isnan(m.score)]
        if scores and max(scores) > self.best_score:
            self.best_score    = max(scores)
            self.last_improved = generation

class SpeciesManager:
    """
    Manages the collection of species across generations.

    Public Attributes:
        species:           Dictionary mapping species IDs to Species instances
        genome_to_species: Dictionary mapping id(genome) to its Species

    Public Methods:
        speciate(genomes, generation): Assign all genomes to species
        species_of(genome):            The species of a genome
    """

    class DistanceCache:
        """
        Caches the genomic distance between networks.
        """
        def __init__(self, config: 'Config'):
            self.distances = {}
            self.config    = config

        def __call__(self, genome1, genome2):
            id1  = id(genome1)
            id2  = id(genome2)
            dist = self.distances.get((id1, id2))
            if dist is None:
                dist = distance(genome1, genome2, self.config)
                self.distances[(id1, id2)] = dist
                self.distances[(id2, id1)] = dist
            return dist

    def __init__(self, config: 'Config'):
        self.species           = {}        # species ID => Species instance
        self.genome_to_species = {}        # id(genome) => Species instance
        self._id_generator     = count(1)  # generates species IDs
        self._config           = config

    def speciate(self, genomes: list['Network'], generation: int = 0):
        """
        Assign every genome to the species whose representative is closest,
        provided the distance is below the compatibility threshold; genomes
        that fit no species found a new one.

        Phase 1: each existing species picks, as its new representative, the
                 genome closest to its current representative.
        Phase 2: every other genome joins the closest compatible species,
                 or founds a new one.
        Phase 3: species left without members go extinct.
        """
        dist_cache = SpeciesManager.DistanceCache(self._config)

        unspeciated = list(genomes)
        new_reps    : dict[int, 'Network']       = {}
        new_members : dict[int, list['Network']] = {}
        for spec_id, spec in self.species.items():
            if not unspeciated:
                break
            new_rep = min(unspeciated, key=lambda genome: dist_cache(genome, spec.representative))
            new_reps   [spec_id] =  new_rep
            new_members[spec_id] = [new_rep]
            unspeciated = [genome for genome in unspeciated if genome is not new_rep]

        for genome in unspeciated:
            candidate_species = []
            for spec_id, new_rep in new_reps.items():
                dist = dist_cache(genome, new_rep)
                if dist < self._config.compatibility_threshold:
                    candidate_species.append((dist, spec_id))

            if candidate_species:
                _, spec_id = min(candidate_species, key=lambda x: x[0])
                new_members[spec_id].append(genome)
            else:
                spec_id = next(self._id_generator)
                new_reps   [spec_id] =  genome
                new_members[spec_id] = [genome]

        self.genome_to_species = {}
        for spec_id, rep in new_reps.items():
            if spec_id not in self.species:
                self.species[spec_id] = Species(spec_id, rep, generation)
            spec = self.species[spec_id]
            spec.update(rep, new_members[spec_id], generation)
            for genome in new_members[spec_id]:
                self.genome_to_species[id(genome)] = spec

        for spec_id in [spec_id for spec_id in self.species if spec_id not in new_reps]:
            del self.species[spec_id]

    def species_of(self, genome: 'Network') -> Species:
        return self.genome_to_species[id(genome)]
