"""Core robot model data structures for SRDF Kinematics.

This module provides the kinematic tree of a robot and the semantic
description layered on top of it.
"""

from .robot_model import RobotModel
from .semantic_model import (
    DisabledCollisionPair,
    EndEffector,
    Group,
    GroupState,
    SemanticModel,
    VirtualJoint,
    VirtualJointType,
    VisualSensor,
)

__all__ = [
    "RobotModel",
    "SemanticModel",
    "VirtualJoint",
    "VirtualJointType",
    "Group",
    "GroupState",
    "EndEffector",
    "VisualSensor",
    "DisabledCollisionPair",
]
