"""
Dependency graph over limb names.

Each LimbJoint is a directed edge origin -> extension. Destroying a limb
destroys every limb reachable along outgoing edges, deepest dependents
first. The graph must be acyclic; cycles are rejected when a body is built.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .errors import ValidationError
from .parts import LimbJoint


class JointGraph:
    """
    Directed joint graph with cycle validation and cascade ordering.

    Attributes:
        joints: Joints in insertion order.
    """

    def __init__(self, joints: Iterable[LimbJoint] = ()) -> None:
        self.joints: list[LimbJoint] = list(joints)

    def __len__(self) -> int:
        return len(self.joints)

    def __iter__(self):
        return iter(self.joints)

    def __contains__(self, joint: LimbJoint) -> bool:
        return joint in self.joints

    def dependents_of(self, limb_name: str) -> list[str]:
        """Extensions of every joint whose origin is limb_name."""
        return [j.extension for j in self.joints if j.origin == limb_name]

    def names(self) -> set[str]:
        """Every limb name any joint mentions."""
        found = set()
        for joint in self.joints:
            found.add(joint.origin)
            found.add(joint.extension)
        return found

    def validate(self, limb_names: Optional[Iterable[str]] = None) -> None:
        """
        Check that the graph is acyclic and, optionally, that every joint
        refers to a known limb.

        Args:
            limb_names: Names the joints may refer to. Skipped if None.

        Raises:
            ValidationError: On an unknown name or a cycle.
        """
        if limb_names is not None:
            known = set(limb_names)
            for joint in self.joints:
                for name in (joint.origin, joint.extension):
                    if name not in known:
                        raise ValidationError(
                            f"Joint {joint} refers to unknown limb '{name}'"
                        )

        cycle = self.find_cycle()
        if cycle:
            raise ValidationError(f"Joint graph has a cycle: {' -> '.join(cycle)}")

    def find_cycle(self) -> list[str]:
        """
        Find one cycle in the graph.

        Returns:
            The names along the cycle, first name repeated at the end, or an
            empty list if the graph is acyclic.
        """
        visiting: list[str] = []
        done: set[str] = set()

        def visit(name: str) -> list[str]:
            if name in done:
                return []
            if name in visiting:
                return visiting[visiting.index(name):] + [name]
            visiting.append(name)
            for dependent in self.dependents_of(name):
                cycle = visit(dependent)
                if cycle:
                    return cycle
            visiting.pop()
            done.add(name)
            return []

        for joint in self.joints:
            cycle = visit(joint.origin)
            if cycle:
                return cycle
        return []

    def cascade_order(self, limb_name: str) -> list[str]:
        """
        Names to destroy when limb_name is destroyed.

        Dependents come before the limbs they hang off, depth-first in joint
        order, and limb_name itself is last. Each name appears once.
        """
        order: list[str] = []
        seen: set[str] = set()

        def visit(name: str) -> None:
            if name in seen:
                return
            seen.add(name)
            for dependent in self.dependents_of(name):
                visit(dependent)
            order.append(name)

        visit(limb_name)
        return order

    def remove_origin(self, limb_name: str) -> list[LimbJoint]:
        """
        Drop every joint whose origin is limb_name.

        Returns:
            The removed joints.
        """
        removed = [j for j in self.joints if j.origin == limb_name]
        self.joints = [j for j in self.joints if j.origin != limb_name]
        return removed

    def remove_extension(self, limb_name: str) -> list[LimbJoint]:
        """
        Drop every joint whose extension is limb_name.

        Returns:
            The removed joints.
        """
        removed = [j for j in self.joints if j.extension == limb_name]
        self.joints = [j for j in self.joints if j.extension != limb_name]
        return removed

    def __str__(self) -> str:
        return ", ".join(str(j) for j in self.joints) or "(no joints)"
