"""Semantic robot description (SRDF) data structures.

The entity types are immutable value objects. ``SemanticModel`` is the
mutable aggregate that loaders append to; it never keeps a reference to the
kinematic model it was validated against.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class VirtualJointType(str, Enum):
    """Kinds of joints connecting a robot to a frame outside of it."""
    PLANAR = "planar"
    FLOATING = "floating"
    FIXED = "fixed"

    @classmethod
    def parse(cls, value: str) -> Optional["VirtualJointType"]:
        """Case-insensitive lookup of ``value``; None if it is not a known type."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class VirtualJoint:
    name: str
    child_link: str
    parent_frame: str
    type: VirtualJointType


@dataclass(frozen=True)
class Group:
    """A named set of links, joints, chains and subgroups.

    Attributes:
        name: Group name, unique among the groups of a model.
        links: Link names, in document order.
        joints: Joint names; kinematic-model joints or virtual joints.
        chains: (base_link, tip_link) pairs forming connected chains.
        subgroups: Names of other groups included in this one.
    """
    name: str
    links: Tuple[str, ...] = ()
    joints: Tuple[str, ...] = ()
    chains: Tuple[Tuple[str, str], ...] = ()
    subgroups: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.links or self.joints or self.chains or self.subgroups)


@dataclass(frozen=True)
class GroupState:
    """A named pose of a group.

    ``joint_values`` maps each joint to its values in document order; multi-DOF
    joints carry more than one value.
    """
    name: str
    group: str
    joint_values: Dict[str, Tuple[float, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class EndEffector:
    name: str
    component_group: str
    parent_link: str


@dataclass(frozen=True)
class VisualSensor:
    """A sensor viewing the scene from ``frame``.

    ``fov_angle`` is in radians; the ranges are measured along the Z axis
    of ``frame``.
    """
    name: str
    frame: str
    fov_angle: float
    min_range: float
    max_range: float


@dataclass(frozen=True)
class DisabledCollisionPair:
    link1: str
    link2: str

    def as_tuple(self) -> Tuple[str, str]:
        return (self.link1, self.link2)


@dataclass
class SemanticModel:
    """Semantic description of a robot, as loaded from an SRDF document.

    All collections keep the order in which elements appear in the document.
    """
    name: str = ""
    groups: List[Group] = field(default_factory=list)
    group_states: List[GroupState] = field(default_factory=list)
    virtual_joints: List[VirtualJoint] = field(default_factory=list)
    end_effectors: List[EndEffector] = field(default_factory=list)
    visual_sensors: List[VisualSensor] = field(default_factory=list)
    disabled_collision_pairs: List[DisabledCollisionPair] = field(default_factory=list)

    def clear(self) -> None:
        """Discard everything loaded so far."""
        self.name = ""
        self.groups.clear()
        self.group_states.clear()
        self.virtual_joints.clear()
        self.end_effectors.clear()
        self.visual_sensors.clear()
        self.disabled_collision_pairs.clear()

    def get_group(self, name: str) -> Optional[Group]:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def has_group(self, name: str) -> bool:
        return self.get_group(name) is not None

    def get_virtual_joint(self, name: str) -> Optional[VirtualJoint]:
        for virtual_joint in self.virtual_joints:
            if virtual_joint.name == name:
                return virtual_joint
        return None

    def get_end_effector(self, name: str) -> Optional[EndEffector]:
        for end_effector in self.end_effectors:
            if end_effector.name == name:
                return end_effector
        return None

    def get_group_states(self, group_name: str) -> List[GroupState]:
        """All named poses defined for ``group_name``."""
        return [state for state in self.group_states if state.group == group_name]
