"""Layered anatomy and damage resolution for simulated actors."""

from .errors import (
    AnatomyError,
    PreconditionError,
    ValidationError,
)

from .sampler import (
    WeightedSampler,
    weighted_draw,
    weighted_index,
)

from .materials import (
    STANDARD_SUBSTANCES,
    Substance,
    SubstanceVolume,
)

from .damage import (
    # Enums
    DamageType,
    # Classes
    BodyPartDamage,
    PartDamageResult,
    SpilloverThresholds,
    # Damage model
    damage_part,
)

from .parts import (
    BodyPart,
    Limb,
    LimbJoint,
)

from .penetration import (
    LimbDamageResult,
    PenetrationEngine,
    PenetrationTarget,
)

from .joints import JointGraph

from .events import (
    BodyEvent,
    BodyEventType,
)

from .body import (
    Body,
    DamageReport,
)

from .loader import (
    create_body,
    create_body_from_data,
    get_template_names,
    load_body_data,
)

__all__ = [
    # Errors
    "AnatomyError",
    "PreconditionError",
    "ValidationError",
    # Sampler
    "WeightedSampler",
    "weighted_draw",
    "weighted_index",
    # Materials
    "STANDARD_SUBSTANCES",
    "Substance",
    "SubstanceVolume",
    # Damage
    "DamageType",
    "BodyPartDamage",
    "PartDamageResult",
    "SpilloverThresholds",
    "damage_part",
    # Parts
    "BodyPart",
    "Limb",
    "LimbJoint",
    # Penetration
    "LimbDamageResult",
    "PenetrationEngine",
    "PenetrationTarget",
    # Joints
    "JointGraph",
    # Events
    "BodyEvent",
    "BodyEventType",
    # Body
    "Body",
    "DamageReport",
    # Loader
    "create_body",
    "create_body_from_data",
    "get_template_names",
    "load_body_data",
]
