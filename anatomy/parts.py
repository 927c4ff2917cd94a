"""
Body parts, limbs and the joints between limbs.

A limb is an ordered stack of layers. Layer 0 is the innermost; higher
indices sit further out. Each layer holds zero or more body parts, and each
part is derived from a list of substances and their volumes.

Destroying a limb's innermost layer (its parts' integrities summing to zero)
destroys the whole limb.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from .damage import BodyPartDamage, DamageType, damage_part
from .errors import ValidationError
from .materials import SubstanceVolume


@dataclass(eq=False)
class BodyPart:
    """
    A single part of a larger body, with physical stats and integrity.

    Parts compare by identity: two parts with identical stats in the same
    layer are still distinct targets.

    Attributes:
        name: Display name.
        substances: Names of the constituent substances.
        volume: Total volume in liters.
        mass: Total mass in kg.
        max_integrity: Integrity at full health.
        integrity: Current integrity, in [0, max_integrity].
        impact_resist: Volume-weighted impact resistance.
        shear_resist: Volume-weighted shear resistance.
        corrosive_resist: Volume-weighted corrosive resistance.
        energy_resist: Volume-weighted energy resistance.
    """
    name: str
    substances: list[str]
    volume: float
    mass: float
    max_integrity: float
    integrity: float
    impact_resist: float = 0.0
    shear_resist: float = 0.0
    corrosive_resist: float = 0.0
    energy_resist: float = 0.0

    @classmethod
    def from_components(
        cls,
        name: str,
        components: Sequence[SubstanceVolume],
    ) -> BodyPart:
        """
        Build a part from substances and their volumes.

        Mass is density * volume / 1000 (volume is in liters, density in
        kg/m3). Max integrity is integrity_per_liter * volume. Resistances
        are volume-weighted averages of the substances' resistances.

        Args:
            name: Part name.
            components: At least one substance/volume pair.

        Returns:
            A part at full integrity.

        Raises:
            ValidationError: If components is empty.
        """
        if not components:
            raise ValidationError(f"Body part '{name}' needs at least one component")

        volume = sum(c.volume for c in components)
        mass = sum(c.substance.density * c.volume / 1000 for c in components)
        max_integrity = sum(c.substance.integrity_per_liter * c.volume for c in components)

        def weighted(attr: str) -> float:
            return sum(getattr(c.substance, attr) * c.volume for c in components) / volume

        return cls(
            name=name,
            substances=[c.substance.name for c in components],
            volume=volume,
            mass=mass,
            max_integrity=max_integrity,
            integrity=max_integrity,
            impact_resist=weighted("impact_resist"),
            shear_resist=weighted("shear_resist"),
            corrosive_resist=weighted("corrosive_resist"),
            energy_resist=weighted("energy_resist"),
        )

    def resistance(self, damage_type: DamageType) -> float:
        """Resistance factor against one damage type."""
        return getattr(self, f"{damage_type.value}_resist")

    @property
    def is_destroyed(self) -> bool:
        return self.integrity <= 0.0

    @property
    def integrity_fraction(self) -> float:
        """Current integrity as a fraction of maximum."""
        if self.max_integrity <= 0:
            return 0.0
        return self.integrity / self.max_integrity

    def take_damage(self, damage: BodyPartDamage) -> float:
        """
        Apply damage to this part.

        Returns:
            Integrity lost.
        """
        before = self.integrity
        damage_part(self, damage)
        return before - self.integrity

    def reset(self) -> None:
        """Restore integrity to maximum."""
        self.integrity = self.max_integrity

    def __str__(self) -> str:
        status = "DESTROYED" if self.is_destroyed else f"{self.integrity:.1f}/{self.max_integrity:.1f}"
        return f"{self.name} [{', '.join(self.substances)}] {self.volume:g}L: {status}"


@dataclass(eq=False)
class Limb:
    """
    A named stack of layers of body parts.

    Attributes:
        name: Unique name within the owning body.
        layers: Layers from innermost (index 0) outward.
    """
    name: str
    layers: list[list[BodyPart]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValidationError("Limb name must not be empty")
        if not self.layers:
            raise ValidationError(f"Limb '{self.name}' needs at least one layer")
        self.layers = [list(layer) for layer in self.layers]

    def parts(self) -> Iterator[tuple[int, BodyPart]]:
        """Iterate (layer_index, part) over every part, innermost first."""
        for layer_index, layer in enumerate(self.layers):
            for part in layer:
                yield layer_index, part

    def get_part(self, name: str) -> Optional[BodyPart]:
        """Find a part by name, or None."""
        for _, part in self.parts():
            if part.name == name:
                return part
        return None

    def layer_integrity(self, layer_index: int) -> float:
        """Sum of current integrity across one layer."""
        return sum(p.integrity for p in self.layers[layer_index])

    @property
    def volume(self) -> float:
        return sum(p.volume for _, p in self.parts())

    @property
    def mass(self) -> float:
        return sum(p.mass for _, p in self.parts())

    @property
    def integrity(self) -> float:
        return sum(p.integrity for _, p in self.parts())

    @property
    def max_integrity(self) -> float:
        return sum(p.max_integrity for _, p in self.parts())

    @property
    def is_destroyed(self) -> bool:
        """True once the innermost layer's integrity sums to zero."""
        return self.layer_integrity(0) == 0

    def __str__(self) -> str:
        lines = [f"Limb: {self.name} ({len(self.layers)} layers)"]
        for layer_index in range(len(self.layers) - 1, -1, -1):
            lines.append(f"  Layer {layer_index}:")
            for part in self.layers[layer_index]:
                lines.append(f"    - {part}")
        return "\n".join(lines)


@dataclass(frozen=True)
class LimbJoint:
    """
    A directed joint: destroying the origin limb destroys the extension.

    Attributes:
        origin: Name of the limb the extension hangs off.
        extension: Name of the dependent limb.
    """
    origin: str
    extension: str

    def __str__(self) -> str:
        return f"{self.origin} -> {self.extension}"
