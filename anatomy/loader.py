"""
Body definitions from JSON-style data and built-in templates.

This is the content pipeline hosts use to build bodies; the damage code
itself never reads files. A body definition looks like:

    {
      "substances": {"flesh": {"density": 1010, "integrity_per_liter": 10, ...}},
      "spillover": {"impact": 0.3, "shear": 0.45, "corrosive": 0.8, "energy": 0.65},
      "limbs": [
        {"name": "Torso",
         "layers": [[{"name": "Spine",
                      "components": [{"substance": "bone", "volume": 4}]}]]}
      ],
      "joints": [{"origin": "Torso", "extension": "Pelvis"}]
    }

Substances not defined in the data come from STANDARD_SUBSTANCES.
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Callable, Optional

from .body import Body
from .damage import SpilloverThresholds
from .materials import STANDARD_SUBSTANCES, Substance, SubstanceVolume
from .parts import BodyPart, Limb, LimbJoint


def load_body_data(filepath: str | Path) -> dict:
    """
    Load a body definition from a JSON file.

    Args:
        filepath: Path to the JSON file.

    Returns:
        Dictionary containing the body definition.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    with open(filepath, "r") as f:
        return json.load(f)


def create_substances_from_data(data: dict) -> dict[str, Substance]:
    """
    Build the substance table for a body definition.

    Returns:
        STANDARD_SUBSTANCES overlaid with the definition's own substances.
    """
    substances = dict(STANDARD_SUBSTANCES)
    for name, props in data.get("substances", {}).items():
        substances[name] = Substance.from_dict(name, props)
    return substances


def create_part_from_data(part_data: dict, substances: dict[str, Substance]) -> BodyPart:
    """
    Build a body part from its definition.

    Raises:
        KeyError: If a component names an unknown substance.
    """
    components = []
    for component in part_data["components"]:
        substance_name = component["substance"]
        if substance_name not in substances:
            raise KeyError(f"Substance '{substance_name}' not found for part '{part_data['name']}'")
        components.append(SubstanceVolume(substances[substance_name], float(component["volume"])))
    return BodyPart.from_components(part_data["name"], components)


def create_limb_from_data(limb_data: dict, substances: dict[str, Substance]) -> Limb:
    """Build a limb, innermost layer first."""
    layers = [
        [create_part_from_data(part, substances) for part in layer]
        for layer in limb_data["layers"]
    ]
    return Limb(limb_data["name"], layers)


def create_body_from_data(
    data: dict,
    rng: Optional[random.Random] = None,
    thresholds: Optional[SpilloverThresholds] = None,
    name: Optional[str] = None,
) -> Body:
    """
    Create a Body from a definition dictionary.

    Args:
        data: Body definition (see module docstring).
        rng: Random generator for the body's draws.
        thresholds: Overrides the definition's "spillover" section.
        name: Overrides the definition's "name".

    Returns:
        A new Body at full integrity.
    """
    substances = create_substances_from_data(data)
    limbs = [create_limb_from_data(limb, substances) for limb in data.get("limbs", [])]
    joints = [LimbJoint(j["origin"], j["extension"]) for j in data.get("joints", [])]
    if thresholds is None:
        thresholds = SpilloverThresholds.from_dict(data.get("spillover"))
    return Body(
        limbs=limbs,
        joints=joints,
        thresholds=thresholds,
        rng=rng,
        name=name or data.get("name", "body"),
    )


# =============================================================================
# BUILT-IN TEMPLATES
# =============================================================================

def _part(name: str, *components: tuple[str, float]) -> dict:
    return {
        "name": name,
        "components": [{"substance": s, "volume": v} for s, v in components],
    }


def _test_dummy_data() -> dict:
    """
    Two-limb dummy: a torso and a pelvis hanging off it.

    Torso: spine inside, torso tissue and heart outside.
    Pelvis: pelvic bone inside, pelvic tissue and geldables outside.
    """
    return {
        "name": "test_dummy",
        "limbs": [
            {
                "name": "Torso",
                "layers": [
                    [_part("Spine", ("flesh", 1), ("bone", 4))],
                    [_part("Torso Tissue", ("flesh", 12), ("bone", 8)),
                     _part("Heart", ("flesh", 1))],
                ],
            },
            {
                "name": "Pelvis",
                "layers": [
                    [_part("Pelvic Bone", ("bone", 4))],
                    [_part("Pelvic Tissue", ("flesh", 8), ("bone", 1)),
                     _part("Geldables", ("flesh", 0.5))],
                ],
            },
        ],
        "joints": [{"origin": "Torso", "extension": "Pelvis"}],
    }


def _humanoid_limb(name: str, bone: float, muscle: float, skin: float) -> dict:
    return {
        "name": name,
        "layers": [
            [_part(f"{name} Bone", ("bone", bone), ("flesh", bone * 0.1))],
            [_part(f"{name} Muscle", ("muscle", muscle))],
            [_part(f"{name} Skin", ("flesh", skin))],
        ],
    }


def _humanoid_data() -> dict:
    """
    Humanoid with head, torso, pelvis, two arms and two legs.

    The head and arms hang off the torso, the legs off the pelvis, and the
    pelvis off the torso.
    """
    return {
        "name": "humanoid",
        "limbs": [
            {
                "name": "Head",
                "layers": [
                    [_part("Brain", ("flesh", 1.4))],
                    [_part("Skull", ("bone", 0.8)),
                     _part("Jaw", ("bone", 0.2), ("muscle", 0.1))],
                    [_part("Scalp", ("flesh", 0.4)),
                     _part("Face", ("flesh", 0.3), ("muscle", 0.2))],
                ],
            },
            {
                "name": "Torso",
                "layers": [
                    [_part("Heart", ("muscle", 0.3)),
                     _part("Spine", ("bone", 1.0), ("flesh", 0.2))],
                    [_part("Lungs", ("flesh", 5.0)),
                     _part("Ribcage", ("bone", 1.5))],
                    [_part("Chest Muscle", ("muscle", 6.0)),
                     _part("Back Muscle", ("muscle", 5.0))],
                    [_part("Torso Skin", ("flesh", 1.5))],
                ],
            },
            {
                "name": "Pelvis",
                "layers": [
                    [_part("Pelvic Bone", ("bone", 1.2))],
                    [_part("Gut", ("flesh", 6.0), ("gel", 0.5))],
                    [_part("Hip Muscle", ("muscle", 4.0))],
                ],
            },
            _humanoid_limb("Left Arm", bone=0.4, muscle=2.0, skin=0.4),
            _humanoid_limb("Right Arm", bone=0.4, muscle=2.0, skin=0.4),
            _humanoid_limb("Left Leg", bone=0.9, muscle=6.0, skin=0.9),
            _humanoid_limb("Right Leg", bone=0.9, muscle=6.0, skin=0.9),
        ],
        "joints": [
            {"origin": "Torso", "extension": "Head"},
            {"origin": "Torso", "extension": "Left Arm"},
            {"origin": "Torso", "extension": "Right Arm"},
            {"origin": "Torso", "extension": "Pelvis"},
            {"origin": "Pelvis", "extension": "Left Leg"},
            {"origin": "Pelvis", "extension": "Right Leg"},
        ],
    }


_BODY_TEMPLATES: dict[str, Callable[[], dict]] = {
    "test_dummy": _test_dummy_data,
    "humanoid": _humanoid_data,
}


def get_template_names() -> list[str]:
    """Names accepted by create_body."""
    return sorted(_BODY_TEMPLATES)


def get_template_data(template: str) -> dict:
    """
    Definition dictionary for a built-in template.

    Raises:
        KeyError: If the template is unknown.
    """
    if template not in _BODY_TEMPLATES:
        raise KeyError(f"Body template '{template}' not found")
    return _BODY_TEMPLATES[template]()


def create_body(
    template: str,
    rng: Optional[random.Random] = None,
    thresholds: Optional[SpilloverThresholds] = None,
) -> Body:
    """
    Create a fresh body from a built-in template.

    Args:
        template: One of get_template_names().
        rng: Random generator for the body's draws.
        thresholds: Spillover points (defaults if None).

    Raises:
        KeyError: If the template is unknown.
    """
    return create_body_from_data(get_template_data(template), rng=rng, thresholds=thresholds)
