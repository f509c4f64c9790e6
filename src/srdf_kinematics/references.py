"""Existence checks for links and joints named by a semantic description."""

from typing import Iterable, Set

from .core import RobotModel, VirtualJoint


class ReferenceResolver:
    """Answers whether a link or joint name refers to something real.

    Links are looked up in the kinematic model. Joints are looked up in the
    kinematic model and, failing that, among the virtual joints accepted so
    far, which are kept in a separate table so the model itself is never
    modified. Names are stripped of surrounding whitespace; matching is
    exact and case-sensitive.
    """

    def __init__(self, robot: RobotModel, virtual_joints: Iterable[VirtualJoint] = ()):
        self.robot = robot
        self._virtual_joint_names: Set[str] = {vj.name for vj in virtual_joints}

    def add_virtual_joint(self, virtual_joint: VirtualJoint) -> None:
        self._virtual_joint_names.add(virtual_joint.name)

    def link_exists(self, link_name: str) -> bool:
        return self.robot.has_link(link_name.strip())

    def joint_exists(self, joint_name: str) -> bool:
        joint_name = joint_name.strip()
        return self.robot.has_joint(joint_name) or joint_name in self._virtual_joint_names
