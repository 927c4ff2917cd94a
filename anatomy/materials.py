"""
Material substances that body parts are built from.

A substance is an immutable template: density, how much integrity each liter
of it contributes, and four resistance factors. Body parts combine substances
by volume (see parts.py).

Resistances lie on [-1.0, 1.0]: 1.0 negates a damage type entirely, 0.0 lets
it through unchanged and -1.0 doubles it.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ValidationError


RESIST_MIN: float = -1.0
RESIST_MAX: float = 1.0


def _check_resist(label: str, value: float) -> None:
    if not RESIST_MIN <= value <= RESIST_MAX:
        raise ValidationError(
            f"{label} must be in range [{RESIST_MIN}, {RESIST_MAX}]; got {value}"
        )


@dataclass(frozen=True)
class Substance:
    """
    A physical substance, anything from flesh and bone to copper wiring.

    Attributes:
        name: Unique, non-empty name.
        density: Density in kg/m3 (equivalently g/L). Water is about 1000.
        integrity_per_liter: Integrity bestowed on a part per liter of this substance.
        impact_resist: Impact resistance in [-1, 1].
        shear_resist: Shear resistance in [-1, 1].
        corrosive_resist: Corrosive resistance in [-1, 1].
        energy_resist: Energy resistance in [-1, 1].
    """
    name: str
    density: float
    integrity_per_liter: float
    impact_resist: float = 0.0
    shear_resist: float = 0.0
    corrosive_resist: float = 0.0
    energy_resist: float = 0.0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValidationError("Substance name must not be empty")
        if not self.density > 0:
            raise ValidationError(
                f"density must be greater than zero kg/m3; got {self.density}"
            )
        if not self.integrity_per_liter > 0:
            raise ValidationError(
                f"integrity_per_liter must be greater than zero; got {self.integrity_per_liter}"
            )
        _check_resist("impact_resist", self.impact_resist)
        _check_resist("shear_resist", self.shear_resist)
        _check_resist("corrosive_resist", self.corrosive_resist)
        _check_resist("energy_resist", self.energy_resist)

    @classmethod
    def from_dict(cls, name: str, data: dict) -> Substance:
        """
        Create a substance from a JSON-style mapping.

        Args:
            name: Substance name.
            data: Mapping with density, integrity_per_liter and optional
                *_resist keys.

        Raises:
            KeyError: If density or integrity_per_liter is missing.
        """
        return cls(
            name=name,
            density=float(data["density"]),
            integrity_per_liter=float(data["integrity_per_liter"]),
            impact_resist=float(data.get("impact_resist", 0.0)),
            shear_resist=float(data.get("shear_resist", 0.0)),
            corrosive_resist=float(data.get("corrosive_resist", 0.0)),
            energy_resist=float(data.get("energy_resist", 0.0)),
        )

    def __str__(self) -> str:
        return (
            f"{self.name} ({self.density:.0f} g/L, {self.integrity_per_liter:g} int/L, "
            f"resist I{self.impact_resist:+.2f} S{self.shear_resist:+.2f} "
            f"C{self.corrosive_resist:+.2f} E{self.energy_resist:+.2f})"
        )


@dataclass(frozen=True)
class SubstanceVolume:
    """A quantity of one substance inside a body part, in liters."""
    substance: Substance
    volume: float

    def __post_init__(self) -> None:
        if not self.volume > 0:
            raise ValidationError(
                f"volume must be greater than zero; got {self.volume}"
            )


# =============================================================================
# STANDARD SUBSTANCES
# =============================================================================

FLESH = Substance(
    name="flesh",
    density=1010.0,
    integrity_per_liter=10.0,
    impact_resist=0.20,
    shear_resist=0.0,
    corrosive_resist=-0.15,
    energy_resist=0.15,
)

BONE = Substance(
    name="bone",
    density=1400.0,
    integrity_per_liter=15.0,
    impact_resist=-0.15,
    shear_resist=0.25,
    corrosive_resist=0.0,
    energy_resist=0.25,
)

MUSCLE = Substance(
    name="muscle",
    density=1060.0,
    integrity_per_liter=12.0,
    impact_resist=0.30,
    shear_resist=-0.10,
    corrosive_resist=-0.10,
    energy_resist=0.10,
)

GEL = Substance(
    name="gel",
    density=1100.0,
    integrity_per_liter=6.0,
    impact_resist=0.50,
    shear_resist=-0.25,
    corrosive_resist=0.20,
    energy_resist=-0.30,
)

STEEL = Substance(
    name="steel",
    density=7850.0,
    integrity_per_liter=60.0,
    impact_resist=0.60,
    shear_resist=0.70,
    corrosive_resist=-0.40,
    energy_resist=0.20,
)

CERAMIC = Substance(
    name="ceramic",
    density=3900.0,
    integrity_per_liter=40.0,
    impact_resist=-0.20,
    shear_resist=0.50,
    corrosive_resist=0.90,
    energy_resist=0.75,
)

STANDARD_SUBSTANCES: dict[str, Substance] = {
    s.name: s for s in (FLESH, BONE, MUSCLE, GEL, STEEL, CERAMIC)
}
