#!/usr/bin/env python3
# /// script
# requires-python = ">=3.10"
# dependencies = ["numpy"]
# ///
"""
Hits-to-destroy trials for body templates.

Strikes fresh copies of a body with the same damage vector until every limb
is gone, then reports how many hits that took and which limbs tended to fall
first.

Example:
    python scripts/damage_trials.py --template humanoid --impact 20 --shear 10 --trials 500
"""

import sys
from pathlib import Path

# Add project root to path for proper imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging
import random
from collections import Counter
from dataclasses import dataclass, field

import numpy as np

from anatomy import BodyPartDamage, create_body_from_data, get_template_names, load_body_data
from anatomy.loader import get_template_data


@dataclass
class TrialResult:
    """Outcome of one body beaten to nothing."""
    hits: int
    fall_order: list[str] = field(default_factory=list)
    capped: bool = False


def run_trial(make_body, damage: BodyPartDamage, max_hits: int) -> TrialResult:
    """Strike a fresh body until it is empty or max_hits is reached."""
    body = make_body()
    result = TrialResult(hits=0)
    while not body.is_empty:
        if result.hits >= max_hits:
            result.capped = True
            break
        report = body.take_damage(damage)
        if report is None:
            # Only limbs without volume remain
            break
        result.hits += 1
        result.fall_order.extend(report.destroyed_limbs)
    return result


def summarize(results: list[TrialResult], damage: BodyPartDamage) -> None:
    hits = np.array([r.hits for r in results if not r.capped])
    capped = sum(1 for r in results if r.capped)

    print(f"\n{'='*60}")
    print(f"DAMAGE: {damage}")
    print(f"TRIALS: {len(results)} ({capped} hit the cap)")
    print(f"{'='*60}")

    if hits.size:
        print(f"  Hits to empty  mean {hits.mean():.2f}  median {np.median(hits):.1f}"
              f"  min {hits.min()}  max {hits.max()}  std {hits.std():.2f}")
    else:
        print("  No trial emptied the body")

    first_fallen = Counter(r.fall_order[0] for r in results if r.fall_order)
    if first_fallen:
        print("\n  First limb lost:")
        for name, count in first_fallen.most_common():
            print(f"    {name:<16} {count / len(results):6.1%}")

    # Mean position of each limb in the fall order
    positions: dict[str, list[int]] = {}
    for r in results:
        for i, name in enumerate(r.fall_order):
            positions.setdefault(name, []).append(i)
    if positions:
        print("\n  Mean fall position:")
        for name, pos in sorted(positions.items(), key=lambda kv: np.mean(kv[1])):
            print(f"    {name:<16} {np.mean(pos):5.2f}")


def main():
    parser = argparse.ArgumentParser(
        description="Monte Carlo hits-to-destroy trials over a body template"
    )
    parser.add_argument(
        "--template",
        choices=get_template_names(),
        default="test_dummy",
        help="Built-in body template (default: test_dummy)",
    )
    parser.add_argument(
        "--body",
        type=str,
        help="Path to a body definition JSON file (overrides --template)",
    )
    for damage_type in ("impact", "shear", "corrosive", "energy"):
        parser.add_argument(
            f"--{damage_type}",
            type=float,
            default=0.0,
            help=f"{damage_type.capitalize()} damage per hit (default: 0)",
        )
    parser.add_argument(
        "--trials",
        type=int,
        default=200,
        help="Number of bodies to destroy (default: 200)",
    )
    parser.add_argument(
        "--max-hits",
        type=int,
        default=10_000,
        help="Give up on a body after this many hits (default: 10000)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for reproducible trials",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every hit",
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    damage = BodyPartDamage(
        impact=args.impact,
        shear=args.shear,
        corrosive=args.corrosive,
        energy=args.energy,
    )
    if damage.is_zero:
        parser.error("at least one damage component must be positive")

    rng = random.Random(args.seed)
    data = load_body_data(args.body) if args.body else get_template_data(args.template)

    def make_body():
        return create_body_from_data(data, rng=rng)

    results = [run_trial(make_body, damage, args.max_hits) for _ in range(args.trials)]
    summarize(results, damage)


if __name__ == "__main__":
    main()
