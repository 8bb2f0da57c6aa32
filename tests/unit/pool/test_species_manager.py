"""
Unit tests for species tracking.
"""

import math
import pytest
from unittest.mock import Mock

from evograph.genotype.mutation import MutationKind, mutate
from evograph.network           import Network
from evograph.pool.species      import Species, SpeciesManager
from evograph.run.config        import Config


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def config():
    return Config()

@pytest.fixture
def template(rng):
    return Network(2, 1, rng)


# ============================================================================
# Test Species
# ============================================================================

class TestSpecies:

    def test_init(self, template):
        species = Species(1, template, generation=0)
        assert species.id == 1
        assert species.members == [template]
        assert species.best_score == -math.inf
        assert species.age == 0

    def test_update_records_improvement(self, template):
        species = Species(1, template, generation=0)
        member  = Mock(score=2.5)
        species.update(member, [member, Mock(score=1.0)], generation=3)
        assert species.best_score == 2.5
        assert species.last_improved == 3
        assert species.age == 1
        assert species.representative is member

    def test_update_without_improvement(self, template):
        species = Species(1, template, generation=0)
        species.update(template, [Mock(score=2.0)], generation=1)
        species.update(template, [Mock(score=1.0)], generation=2)
        assert species.best_score == 2.0
        assert species.last_improved == 1

    def test_unscored_members_are_ignored(self, template):
        species = Species(1, template, generation=0)
        species.update(template, [Mock(score=None), Mock(score=float('nan'))], generation=1)
        assert species.best_score == -math.inf


# ============================================================================
# Test SpeciesManager
# ============================================================================

class TestSpeciesManager:

    def test_identical_genomes_share_a_species(self, config, template):
        genomes = [template.copy() for _ in range(5)]
        manager = SpeciesManager(config)
        manager.speciate(genomes)

        assert len(manager.species) == 1
        species = next(iter(manager.species.values()))
        assert len(species.members) == 5
        assert all(manager.species_of(genome) is species for genome in genomes)

    def test_zero_threshold_separates_every_genome(self, template):
        config  = Config().override(compatibility_threshold=0.0)
        genomes = [template.copy() for _ in range(4)]
        manager = SpeciesManager(config)
        manager.speciate(genomes)
        assert len(manager.species) == 4

    def test_distant_genome_founds_a_species(self, config, template, rng):
        far = template.copy()
        for conn in far.connections:
            conn.weight += 100.0
        manager = SpeciesManager(config)
        manager.speciate([template.copy(), template.copy(), far])
        assert len(manager.species) == 2
        assert len(manager.species_of(far).members) == 1

    def test_species_persist_across_generations(self, config, template, rng):
        manager = SpeciesManager(config)
        manager.speciate([template.copy() for _ in range(3)], generation=0)
        first_ids = set(manager.species)

        next_generation = [template.copy() for _ in range(3)]
        mutate(next_generation[0], MutationKind.MOD_BIAS, config, rng)
        manager.speciate(next_generation, generation=1)
        assert set(manager.species) == first_ids
        assert next(iter(manager.species.values())).age == 2

    def test_empty_species_go_extinct(self, template):
        config  = Config().override(compatibility_threshold=0.0)
        manager = SpeciesManager(config)
        manager.speciate([template.copy() for _ in range(3)])
        manager.speciate([template.copy()])
        assert len(manager.species) == 1

    def test_distance_cache_is_symmetric(self, config, template):
        cache = SpeciesManager.DistanceCache(config)
        other = template.copy()
        other.connections[0].weight += 1.0
        assert cache(template, other) == cache(other, template)
        assert len(cache.distances) == 2
