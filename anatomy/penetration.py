"""
Layer penetration for a single limb.

An attack on a limb first picks a hypothetical full-penetration path: one
part per non-empty layer, drawn with part volume as weight. It then walks
that path from the outermost layer inward. At each target, every damage type
is resolved on its own:

    ratio = remaining / initial_integrity_of_target
    ratio >  threshold -> target takes remaining * threshold, the rest carries inward
    ratio <= threshold -> target takes all of it, nothing carries inward

The walk stops as soon as every damage type is exhausted. Damage still left
after the innermost target is spread evenly over every target on the path.

Key concepts:
- PenetrationTarget: one sampled part and its integrity at the start of the attack
- LimbDamageResult: everything that happened to the limb during one attack
- PenetrationEngine: performs the path draw and the walk
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional

from .damage import BodyPartDamage, DamageType, PartDamageResult, SpilloverThresholds
from .parts import BodyPart, Limb
from .sampler import WeightedSampler

logger = logging.getLogger(__name__)


@dataclass
class PenetrationTarget:
    """
    One part on a penetration path.

    Attributes:
        layer_index: Layer the part was drawn from.
        part: The drawn part (the same object that lives in the layer).
        initial_integrity: Integrity when the attack began; spillover ratios
            are measured against this.
    """
    layer_index: int
    part: BodyPart
    initial_integrity: float


@dataclass
class LimbDamageResult:
    """
    Outcome of resolving one attack against one limb.

    Attributes:
        limb_name: Name of the limb hit.
        damage: The incoming damage vector.
        targets: Penetration path, outermost first.
        applications: Every damage application, in order.
        overflow: Damage left after the innermost target and spread over
            the whole path (zero if the path absorbed everything).
        layers_reached: How many targets the walk touched before damage ran out.
    """
    limb_name: str
    damage: BodyPartDamage
    targets: list[PenetrationTarget] = field(default_factory=list)
    applications: list[PartDamageResult] = field(default_factory=list)
    overflow: BodyPartDamage = field(default_factory=BodyPartDamage)
    layers_reached: int = 0

    def applied_total(self) -> BodyPartDamage:
        """Nominal damage applied across all parts, per type."""
        total = BodyPartDamage()
        for application in self.applications:
            total = total + application.damage
        return total

    @property
    def destroyed_parts(self) -> list[str]:
        """Names of parts this attack brought to zero integrity."""
        return [a.part_name for a in self.applications if a.destroyed]

    @property
    def integrity_lost(self) -> float:
        return sum(a.integrity_lost for a in self.applications)

    def __str__(self) -> str:
        lines = [
            f"{self.limb_name}: {self.damage} over {len(self.targets)} layers, "
            f"reached {self.layers_reached}"
        ]
        for application in self.applications:
            lines.append(f"  {application}")
        return "\n".join(lines)


def _spill_ratio(remaining: float, initial_integrity: float) -> float:
    """Remaining damage relative to the target's starting integrity."""
    if initial_integrity <= 0:
        # An already-destroyed target passes everything it can't hold
        return math.inf if remaining > 0 else 0.0
    return remaining / initial_integrity


class PenetrationEngine:
    """
    Resolves damage vectors against limbs.

    Usage:
        engine = PenetrationEngine(SpilloverThresholds(), rng=random.Random(7))
        result = engine.resolve(limb, BodyPartDamage(impact=8))
    """

    def __init__(
        self,
        thresholds: Optional[SpilloverThresholds] = None,
        sampler: Optional[WeightedSampler] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            thresholds: Spillover points per damage type (defaults if None).
            sampler: Sampler to draw targets with. Takes precedence over rng.
            rng: Generator for a new sampler when none is given.
        """
        self.thresholds = thresholds or SpilloverThresholds()
        self.sampler = sampler or WeightedSampler(rng)

    def select_targets(self, limb: Limb) -> list[PenetrationTarget]:
        """
        Draw one part per non-empty layer, weighted by part volume.

        Returns:
            Targets from innermost to outermost. Empty layers contribute
            nothing.
        """
        targets = []
        for layer_index, layer in enumerate(limb.layers):
            if not layer:
                continue
            part = self.sampler.draw(layer, key=lambda p: p.volume)
            targets.append(PenetrationTarget(layer_index, part, part.integrity))
        return targets

    def resolve(self, limb: Limb, damage: BodyPartDamage) -> LimbDamageResult:
        """
        Apply an attack to a limb, including layer penetration and overflow.

        Parts are mutated in place in their layers.

        Args:
            limb: Limb to damage.
            damage: Incoming damage vector.

        Returns:
            LimbDamageResult describing every application.
        """
        path = self.select_targets(limb)
        result = LimbDamageResult(
            limb_name=limb.name,
            damage=damage,
            targets=list(reversed(path)),
        )

        remaining = {t: damage.get(t) for t in DamageType}

        for target in result.targets:
            amounts = {}
            for damage_type in DamageType:
                left = remaining[damage_type]
                threshold = self.thresholds.for_type(damage_type)
                if _spill_ratio(left, target.initial_integrity) > threshold:
                    amounts[damage_type] = left * threshold
                    remaining[damage_type] = left - amounts[damage_type]
                else:
                    amounts[damage_type] = left
                    remaining[damage_type] = 0.0

            self._apply(result, target, _as_damage(amounts), overflow=False)
            result.layers_reached += 1

            if all(v == 0 for v in remaining.values()):
                break
            logger.debug(
                "%s: %s carries past layer %d",
                limb.name, _as_damage(remaining), target.layer_index,
            )

        leftover = _as_damage(remaining)
        if not leftover.is_zero and result.targets:
            result.overflow = leftover
            share = leftover.scaled(1.0 / len(result.targets))
            logger.debug(
                "%s: spreading %s over %d targets",
                limb.name, leftover, len(result.targets),
            )
            for target in result.targets:
                self._apply(result, target, share, overflow=True)

        return result

    @staticmethod
    def _apply(
        result: LimbDamageResult,
        target: PenetrationTarget,
        damage: BodyPartDamage,
        overflow: bool,
    ) -> None:
        if damage.is_zero:
            return
        before = target.part.integrity
        target.part.take_damage(damage)
        result.applications.append(PartDamageResult(
            part_name=target.part.name,
            layer_index=target.layer_index,
            damage=damage,
            integrity_before=before,
            integrity_after=target.part.integrity,
            overflow=overflow,
        ))


def _as_damage(amounts: dict[DamageType, float]) -> BodyPartDamage:
    return BodyPartDamage(**{t.value: amounts[t] for t in DamageType})
