"""
The Body aggregate: limbs, joints and the top-level damage entry point.

Body.take_damage resolves one attack:
1. Draw a limb, weighted by the total volume of its parts.
2. Penetrate that limb's layers (penetration.py), mutating parts in place.
3. If the limb's innermost layer is now at zero integrity, destroy the limb
   and cascade along its joints (joints.py).

Whether the owning actor has died is left to the host, which can check
Body.is_empty or listen for BODY_EMPTIED events.

One Body must only take one attack at a time; callers serialize access.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .damage import BodyPartDamage, SpilloverThresholds
from .errors import ValidationError
from .events import BodyEvent, BodyEventType
from .joints import JointGraph
from .parts import Limb, LimbJoint
from .penetration import LimbDamageResult, PenetrationEngine
from .sampler import WeightedSampler

logger = logging.getLogger(__name__)


@dataclass
class DamageReport:
    """
    Result of one Body.take_damage call.

    Attributes:
        sequence: Running count of attacks taken by the body.
        limb_name: The limb that absorbed the attack.
        limb_result: Per-part detail of the penetration.
        destroyed_limbs: Limbs removed by the attack, dependents first.
    """
    sequence: int
    limb_name: str
    limb_result: LimbDamageResult
    destroyed_limbs: list[str] = field(default_factory=list)

    @property
    def limb_destroyed(self) -> bool:
        return self.limb_name in self.destroyed_limbs

    def __str__(self) -> str:
        text = f"Hit #{self.sequence} on {self.limb_name}"
        if self.destroyed_limbs:
            text += f", destroyed {', '.join(self.destroyed_limbs)}"
        return text


class Body:
    """
    A destructible, layered body made of limbs connected by joints.

    Limb names are the external identity (joints refer to them); internally
    the body keeps a name -> position map rebuilt whenever a limb is removed.

    Usage:
        body = Body(limbs, joints, rng=random.Random(42))
        report = body.take_damage(BodyPartDamage(impact=25))
        if body.is_empty:
            ...

    Attributes:
        name: Display name.
        limbs: Limbs in definition order.
        joints: Joint graph between limbs.
        thresholds: Spillover points used for every limb.
        events: Event log.
        hits_taken: Number of attacks resolved so far.
    """

    def __init__(
        self,
        limbs: Iterable[Limb] = (),
        joints: Iterable[LimbJoint] = (),
        thresholds: Optional[SpilloverThresholds] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        name: str = "body",
    ) -> None:
        """
        Initialize a body.

        Args:
            limbs: Limbs with unique names.
            joints: Joints between those limbs; must be acyclic.
            thresholds: Spillover points (defaults if None).
            rng: Random generator for limb and part draws.
            seed: Seed for a new generator when rng is not given.
            name: Display name.

        Raises:
            ValidationError: On duplicate limb names, joints naming unknown
                limbs, or cyclic joints.
        """
        self.name = name
        self.thresholds = thresholds or SpilloverThresholds()
        self.sampler = WeightedSampler(rng or random.Random(seed))
        self.engine = PenetrationEngine(self.thresholds, sampler=self.sampler)

        self.limbs: list[Limb] = list(limbs)
        self.joints = JointGraph(joints)
        self._limb_index: dict[str, int] = {}
        self._rebuild_index()
        self.joints.validate(self._limb_index)

        self.hits_taken = 0
        self.events: list[BodyEvent] = []
        self._event_callbacks: list[Callable[[BodyEvent], None]] = []

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    def _rebuild_index(self) -> None:
        index: dict[str, int] = {}
        for i, limb in enumerate(self.limbs):
            if limb.name in index:
                raise ValidationError(f"Duplicate limb name '{limb.name}'")
            index[limb.name] = i
        self._limb_index = index

    def add_limb(self, limb: Limb) -> None:
        """
        Add a limb to the body.

        Joints left over from a destroyed limb of the same name are dropped,
        so the new limb starts unattached.

        Raises:
            ValidationError: If a limb with that name already exists.
        """
        if limb.name in self._limb_index:
            raise ValidationError(f"Duplicate limb name '{limb.name}'")
        stale = self.joints.remove_extension(limb.name)
        if stale:
            logger.debug("%s: dropped stale joints %s", self.name, ", ".join(map(str, stale)))
        self.limbs.append(limb)
        self._limb_index[limb.name] = len(self.limbs) - 1

    def add_joint(self, joint: LimbJoint) -> None:
        """
        Add a joint, keeping the graph valid.

        Raises:
            ValidationError: If the joint names an unknown limb or closes a
                cycle. The body is left unchanged.
        """
        candidate = JointGraph(list(self.joints) + [joint])
        candidate.validate(self._limb_index)
        self.joints = candidate

    def get_limb(self, name: str) -> Optional[Limb]:
        """Find a limb by name, or None if it is not (or no longer) present."""
        index = self._limb_index.get(name)
        if index is None:
            return None
        return self.limbs[index]

    def has_limb(self, name: str) -> bool:
        return name in self._limb_index

    @property
    def limb_names(self) -> list[str]:
        return [limb.name for limb in self.limbs]

    @property
    def is_empty(self) -> bool:
        """True once every limb has been destroyed."""
        return not self.limbs

    @property
    def volume(self) -> float:
        return sum(limb.volume for limb in self.limbs)

    @property
    def mass(self) -> float:
        return sum(limb.mass for limb in self.limbs)

    @property
    def integrity(self) -> float:
        return sum(limb.integrity for limb in self.limbs)

    @property
    def max_integrity(self) -> float:
        return sum(limb.max_integrity for limb in self.limbs)

    @property
    def integrity_fraction(self) -> float:
        """Remaining integrity of the surviving limbs as a fraction of their maximum."""
        maximum = self.max_integrity
        if maximum <= 0:
            return 0.0
        return self.integrity / maximum

    def restore(self) -> None:
        """Reset every surviving part to full integrity."""
        for limb in self.limbs:
            for _, part in limb.parts():
                part.reset()

    # -------------------------------------------------------------------------
    # Damage
    # -------------------------------------------------------------------------

    def take_damage(self, damage: BodyPartDamage) -> Optional[DamageReport]:
        """
        Resolve one attack against this body.

        Args:
            damage: Incoming damage vector.

        Returns:
            DamageReport, or None if the body has no limbs left or none of
            them has any volume to hit.
        """
        if self.is_empty:
            logger.debug("%s: no limbs left, ignoring %s", self.name, damage)
            return None
        if not self.volume > 0:
            logger.debug("%s: no limb has volume left, ignoring %s", self.name, damage)
            return None

        self.hits_taken += 1
        index = self.sampler.draw_index([limb.volume for limb in self.limbs])
        limb = self.limbs[index]
        logger.debug("%s: hit #%d lands on %s (%s)", self.name, self.hits_taken, limb.name, damage)

        limb_result = self.engine.resolve(limb, damage)
        report = DamageReport(
            sequence=self.hits_taken,
            limb_name=limb.name,
            limb_result=limb_result,
        )

        self._log_event(
            BodyEventType.DAMAGE_TAKEN,
            limb_name=limb.name,
            data={
                "damage": damage.as_dict(),
                "integrity_lost": limb_result.integrity_lost,
                "layers_reached": limb_result.layers_reached,
            },
        )
        for part_name in limb_result.destroyed_parts:
            self._log_event(BodyEventType.PART_DESTROYED, limb_name=limb.name, part_name=part_name)

        if limb.is_destroyed:
            report.destroyed_limbs = self.destroy_limb(limb.name)

        return report

    def destroy_limb(self, limb_name: str) -> list[str]:
        """
        Destroy a limb and, first, every limb that depends on it.

        Removes each destroyed limb and every joint whose origin is that
        limb. Names that are not present are ignored, so repeated or
        overlapping cascades are safe.

        Args:
            limb_name: Limb to destroy.

        Returns:
            Names of removed limbs, dependents before their origins. Empty if
            limb_name was not present.
        """
        if limb_name not in self._limb_index:
            return []

        order = [n for n in self.joints.cascade_order(limb_name) if n in self._limb_index]
        doomed = set(order)
        self.limbs[:] = [limb for limb in self.limbs if limb.name not in doomed]
        self._rebuild_index()

        for name in order:
            self.joints.remove_origin(name)
            logger.debug("%s: limb %s destroyed", self.name, name)
            self._log_event(
                BodyEventType.LIMB_DESTROYED,
                limb_name=name,
                data={"cause": limb_name},
            )

        if self.is_empty:
            self._log_event(BodyEventType.BODY_EMPTIED)

        return order

    # -------------------------------------------------------------------------
    # Event Logging
    # -------------------------------------------------------------------------

    def add_event_callback(self, callback: Callable[[BodyEvent], None]) -> None:
        """
        Register a callback to be called for each body event.

        Args:
            callback: Function that takes a BodyEvent.
        """
        self._event_callbacks.append(callback)

    def remove_event_callback(self, callback: Callable[[BodyEvent], None]) -> None:
        """Remove an event callback."""
        if callback in self._event_callbacks:
            self._event_callbacks.remove(callback)

    def _log_event(
        self,
        event_type: BodyEventType,
        limb_name: Optional[str] = None,
        part_name: Optional[str] = None,
        data: Optional[dict] = None,
    ) -> BodyEvent:
        """Log a body event and notify callbacks."""
        event = BodyEvent(
            event_type=event_type,
            sequence=self.hits_taken,
            limb_name=limb_name,
            part_name=part_name,
            data=data or {},
        )
        self.events.append(event)

        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("%s: event callback failed for %s", self.name, event)

        return event

    def __str__(self) -> str:
        lines = [f"Body: {self.name} ({len(self.limbs)} limbs, joints: {self.joints})"]
        for limb in self.limbs:
            lines.append(str(limb))
        return "\n".join(lines)
