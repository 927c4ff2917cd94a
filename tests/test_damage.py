"""
Tests for damage vectors, spillover configuration and the per-part damage model.

Run with: python -m pytest tests/test_damage.py -v
"""

import random

import pytest

from anatomy.damage import (
    DEFAULT_CORROSIVE_SPILLOVER,
    DEFAULT_ENERGY_SPILLOVER,
    DEFAULT_IMPACT_SPILLOVER,
    DEFAULT_SHEAR_SPILLOVER,
    BodyPartDamage,
    DamageType,
    PartDamageResult,
    SpilloverThresholds,
    damage_part,
)
from anatomy.errors import ValidationError
from anatomy.materials import Substance, SubstanceVolume
from anatomy.parts import BodyPart


def make_part(integrity_per_liter=10.0, volume=1.0, **resists) -> BodyPart:
    """Single-substance part with the given resistances."""
    substance = Substance("test", density=1000, integrity_per_liter=integrity_per_liter, **resists)
    return BodyPart.from_components("Test Part", [SubstanceVolume(substance, volume)])


# =============================================================================
# DAMAGE VECTOR TESTS
# =============================================================================

class TestBodyPartDamage:
    """Tests for the four-component damage vector."""

    def test_defaults_to_zero(self):
        damage = BodyPartDamage()
        assert damage.is_zero is True
        assert damage.total == 0.0

    @pytest.mark.parametrize("field_name", ["impact", "shear", "corrosive", "energy"])
    @pytest.mark.parametrize("amount", [-0.1, float("nan")])
    def test_negative_component_rejected(self, field_name, amount):
        with pytest.raises(ValidationError):
            BodyPartDamage(**{field_name: amount})

    def test_get_by_type(self):
        damage = BodyPartDamage(impact=1, shear=2, corrosive=3, energy=4)
        assert [damage.get(t) for t in DamageType] == [1, 2, 3, 4]
        assert damage.total == 10

    def test_only(self):
        damage = BodyPartDamage.only(DamageType.CORROSIVE, 7.5)
        assert damage == BodyPartDamage(corrosive=7.5)

    def test_scaled_and_added(self):
        damage = BodyPartDamage(impact=2, energy=4)
        assert damage.scaled(0.5) == BodyPartDamage(impact=1, energy=2)
        assert damage + damage == BodyPartDamage(impact=4, energy=8)

    def test_dict_round_trip(self):
        damage = BodyPartDamage(shear=3, energy=1)
        assert BodyPartDamage.from_dict(damage.as_dict()) == damage

    def test_from_dict_fills_missing(self):
        assert BodyPartDamage.from_dict({"impact": 5}) == BodyPartDamage(impact=5)


# =============================================================================
# SPILLOVER CONFIGURATION TESTS
# =============================================================================

class TestSpilloverThresholds:
    """Tests for spillover configuration."""

    def test_defaults(self):
        thresholds = SpilloverThresholds()
        assert thresholds.for_type(DamageType.IMPACT) == DEFAULT_IMPACT_SPILLOVER == 0.30
        assert thresholds.for_type(DamageType.SHEAR) == DEFAULT_SHEAR_SPILLOVER == 0.45
        assert thresholds.for_type(DamageType.CORROSIVE) == DEFAULT_CORROSIVE_SPILLOVER == 0.80
        assert thresholds.for_type(DamageType.ENERGY) == DEFAULT_ENERGY_SPILLOVER == 0.65

    @pytest.mark.parametrize("value", [0.0, -0.2, 1.01])
    def test_out_of_range_rejected(self, value):
        with pytest.raises(ValidationError):
            SpilloverThresholds(shear=value)

    def test_one_is_allowed(self):
        assert SpilloverThresholds(energy=1.0).energy == 1.0

    def test_from_dict_partial(self):
        thresholds = SpilloverThresholds.from_dict({"impact": 0.5})
        assert thresholds.impact == 0.5
        assert thresholds.shear == DEFAULT_SHEAR_SPILLOVER

    @pytest.mark.parametrize("data", [None, {}])
    def test_from_dict_empty(self, data):
        assert SpilloverThresholds.from_dict(data) == SpilloverThresholds()


# =============================================================================
# DAMAGE MODEL TESTS
# =============================================================================

class TestDamagePart:
    """Tests for applying a damage vector to a single part."""

    def test_unresisted_damage_subtracts_directly(self):
        part = make_part()
        damage_part(part, BodyPartDamage(impact=3))
        assert part.integrity == pytest.approx(7.0)

    def test_all_types_sum(self):
        part = make_part(integrity_per_liter=100)
        damage_part(part, BodyPartDamage(impact=1, shear=2, corrosive=3, energy=4))
        assert part.integrity == pytest.approx(90.0)

    @pytest.mark.parametrize("damage_type", list(DamageType))
    def test_full_resistance_negates(self, damage_type):
        part = make_part(**{f"{damage_type.value}_resist": 1.0})
        damage_part(part, BodyPartDamage.only(damage_type, 50))
        assert part.integrity == part.max_integrity

    @pytest.mark.parametrize("damage_type", list(DamageType))
    def test_negative_resistance_doubles(self, damage_type):
        part = make_part(**{f"{damage_type.value}_resist": -1.0})
        damage_part(part, BodyPartDamage.only(damage_type, 2))
        assert part.integrity == pytest.approx(6.0)

    def test_partial_resistance_attenuates(self):
        part = make_part(shear_resist=0.25)
        damage_part(part, BodyPartDamage(shear=4))
        assert part.integrity == pytest.approx(7.0)

    def test_floor_at_zero(self):
        part = make_part()
        damage_part(part, BodyPartDamage(impact=15, shear=5))
        assert part.integrity == 0.0

    def test_later_types_do_nothing_once_zeroed(self):
        """Types are applied in order and floored after each step."""
        part = make_part(energy_resist=-1.0)
        damage_part(part, BodyPartDamage(impact=10, energy=100))
        assert part.integrity == 0.0

    def test_zero_damage_is_noop(self):
        part = make_part()
        damage_part(part, BodyPartDamage())
        assert part.integrity == part.max_integrity

    def test_returns_same_part(self):
        part = make_part()
        assert damage_part(part, BodyPartDamage(impact=1)) is part

    def test_integrity_stays_in_bounds(self):
        """Random parts and vectors never leave [0, max_integrity]."""
        rng = random.Random(1234)
        for _ in range(500):
            part = make_part(
                integrity_per_liter=rng.uniform(0.5, 50),
                volume=rng.uniform(0.1, 10),
                impact_resist=rng.uniform(-1, 1),
                shear_resist=rng.uniform(-1, 1),
                corrosive_resist=rng.uniform(-1, 1),
                energy_resist=rng.uniform(-1, 1),
            )
            for _ in range(5):
                damage_part(part, BodyPartDamage(
                    impact=rng.uniform(0, 40),
                    shear=rng.uniform(0, 40),
                    corrosive=rng.uniform(0, 40),
                    energy=rng.uniform(0, 40),
                ))
                assert 0.0 <= part.integrity <= part.max_integrity


class TestPartDamageResult:

    def test_destroyed_only_on_transition(self):
        killing = PartDamageResult("Heart", 1, BodyPartDamage(impact=20), 5.0, 0.0)
        already_dead = PartDamageResult("Heart", 1, BodyPartDamage(impact=20), 0.0, 0.0)
        assert killing.destroyed is True
        assert already_dead.destroyed is False

    def test_integrity_lost(self):
        result = PartDamageResult("Spine", 0, BodyPartDamage(shear=3), 40.0, 37.75)
        assert result.integrity_lost == pytest.approx(2.25)
