"""
Damage vectors, spillover configuration and the per-part damage model.

An attack carries four independent damage types. Each body part attenuates
each type by its matching resistance:

    applied = amount * (1 - resist)

so a resistance of 1.0 negates the type and -1.0 doubles it. The four terms
are subtracted from integrity one after another in a fixed order (impact,
shear, corrosive, energy), each floored at zero before the next.

Spillover thresholds decide how much of each type a layer keeps before the
rest penetrates to the layer beneath (see penetration.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .errors import ValidationError

if TYPE_CHECKING:
    from .parts import BodyPart


class DamageType(Enum):
    """The four damage types, in the order they are applied to a part."""
    IMPACT = "impact"
    SHEAR = "shear"
    CORROSIVE = "corrosive"
    ENERGY = "energy"


# Fraction of a layer target's initial integrity past which each damage
# type spills over into the next layer underneath.
DEFAULT_IMPACT_SPILLOVER: float = 0.30
DEFAULT_SHEAR_SPILLOVER: float = 0.45
DEFAULT_CORROSIVE_SPILLOVER: float = 0.80
DEFAULT_ENERGY_SPILLOVER: float = 0.65


# =============================================================================
# DAMAGE VECTOR
# =============================================================================

@dataclass(frozen=True)
class BodyPartDamage:
    """
    Quantities of the four damage types carried by one attack.

    Attributes:
        impact: Blunt force damage.
        shear: Cutting and piercing damage.
        corrosive: Chemical damage.
        energy: Heat, radiation and electrical damage.
    """
    impact: float = 0.0
    shear: float = 0.0
    corrosive: float = 0.0
    energy: float = 0.0

    def __post_init__(self) -> None:
        for damage_type in DamageType:
            amount = self.get(damage_type)
            if not amount >= 0:
                raise ValidationError(
                    f"'{damage_type.value}' must be no less than zero; got {amount}"
                )

    @classmethod
    def only(cls, damage_type: DamageType, amount: float) -> BodyPartDamage:
        """Create a damage vector holding a single damage type."""
        return cls(**{damage_type.value: amount})

    @classmethod
    def from_dict(cls, data: dict) -> BodyPartDamage:
        """Create a damage vector from a mapping of type name to amount."""
        return cls(**{t.value: float(data.get(t.value, 0.0)) for t in DamageType})

    def get(self, damage_type: DamageType) -> float:
        """Amount of one damage type."""
        return getattr(self, damage_type.value)

    def as_dict(self) -> dict[str, float]:
        return {t.value: self.get(t) for t in DamageType}

    @property
    def total(self) -> float:
        """Sum of all four damage types."""
        return self.impact + self.shear + self.corrosive + self.energy

    @property
    def is_zero(self) -> bool:
        return self.impact == 0 and self.shear == 0 and self.corrosive == 0 and self.energy == 0

    def scaled(self, factor: float) -> BodyPartDamage:
        """Return this damage multiplied by a non-negative factor."""
        return BodyPartDamage(
            impact=self.impact * factor,
            shear=self.shear * factor,
            corrosive=self.corrosive * factor,
            energy=self.energy * factor,
        )

    def __add__(self, other: BodyPartDamage) -> BodyPartDamage:
        return BodyPartDamage(
            impact=self.impact + other.impact,
            shear=self.shear + other.shear,
            corrosive=self.corrosive + other.corrosive,
            energy=self.energy + other.energy,
        )

    def __str__(self) -> str:
        return (
            f"I{self.impact:.2f}/S{self.shear:.2f}/"
            f"C{self.corrosive:.2f}/E{self.energy:.2f}"
        )


# =============================================================================
# SPILLOVER CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class SpilloverThresholds:
    """
    Per-type spillover points for a body definition.

    Each value is a fraction in (0, 1]. When the damage of a type remaining
    at a layer exceeds threshold * the target's initial integrity, the layer
    only absorbs remaining * threshold and the rest carries inward.
    """
    impact: float = DEFAULT_IMPACT_SPILLOVER
    shear: float = DEFAULT_SHEAR_SPILLOVER
    corrosive: float = DEFAULT_CORROSIVE_SPILLOVER
    energy: float = DEFAULT_ENERGY_SPILLOVER

    def __post_init__(self) -> None:
        for damage_type in DamageType:
            value = self.for_type(damage_type)
            if not 0.0 < value <= 1.0:
                raise ValidationError(
                    f"{damage_type.value} spillover threshold must be in (0, 1]; got {value}"
                )

    def for_type(self, damage_type: DamageType) -> float:
        """Threshold for one damage type."""
        return getattr(self, damage_type.value)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> SpilloverThresholds:
        """
        Create thresholds from a mapping, falling back to defaults for
        missing keys.
        """
        if not data:
            return cls()
        defaults = cls()
        return cls(**{
            t.value: float(data.get(t.value, defaults.for_type(t)))
            for t in DamageType
        })


# =============================================================================
# DAMAGE MODEL
# =============================================================================

def damage_part(part: BodyPart, damage: BodyPartDamage) -> BodyPart:
    """
    Apply a damage vector to a single body part.

    Each type is attenuated by the part's matching resistance and subtracted
    in the fixed order impact, shear, corrosive, energy. Integrity is floored
    at zero after every step, so a type that arrives after integrity has hit
    zero does nothing further.

    Args:
        part: The part to damage. Mutated in place.
        damage: Nominal (pre-resistance) damage to apply.

    Returns:
        The same part, for chaining.
    """
    integrity = part.integrity
    for damage_type in DamageType:
        amount = damage.get(damage_type)
        if amount == 0:
            continue
        integrity = max(0.0, integrity - amount * (1.0 - part.resistance(damage_type)))
    part.integrity = min(integrity, part.max_integrity)
    return part


@dataclass
class PartDamageResult:
    """
    Result of one damage application to a body part.

    Attributes:
        part_name: Name of the damaged part.
        layer_index: Layer the part sits in (0 = innermost).
        damage: Nominal damage applied, before resistances.
        integrity_before: Integrity before this application.
        integrity_after: Integrity after this application.
        overflow: True if this came from spreading leftover damage after
            full penetration.
    """
    part_name: str
    layer_index: int
    damage: BodyPartDamage
    integrity_before: float
    integrity_after: float
    overflow: bool = False

    @property
    def integrity_lost(self) -> float:
        return self.integrity_before - self.integrity_after

    @property
    def destroyed(self) -> bool:
        """Whether this application brought the part to zero integrity."""
        return self.integrity_before > 0 and self.integrity_after <= 0

    def __str__(self) -> str:
        tag = " (overflow)" if self.overflow else ""
        status = "DESTROYED" if self.destroyed else f"{self.integrity_after:.1f} remaining"
        return (
            f"L{self.layer_index} {self.part_name}{tag}: {self.damage} "
            f"({self.integrity_before:.1f} -> {self.integrity_after:.1f}), {status}"
        )
