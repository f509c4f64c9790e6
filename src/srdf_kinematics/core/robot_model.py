"""RobotModel PyTree data structure for the kinematic side of a robot.

This module defines the kinematic model that semantic descriptions are
validated against. It is stateless and immutable, and only records the
topology of the robot: named links, named joints and the parent of each link.
"""

from typing import Optional, Tuple

import numpy as np
from jax import Array
from flax import struct


@struct.dataclass
class RobotModel:
    """Immutable PyTree representation of a robot's kinematic tree.

    Links are stored in breadth-first order from the root link, so index 0 is
    always the root. Parent relationships use integer indices into
    ``link_names``.

    Attributes:
        name: Robot name as declared in the URDF.
        link_names: Tuple of all link names. Index corresponds to link ID.
        joint_names: Tuple of all joint names, fixed joints included.
        actuated_joint_names: Tuple of the non-fixed joint names.
        parent_indices: Array of shape (num_links,) where parent_indices[i]
                       is the parent link index of link i. Root link parents itself.
    """
    name: str = struct.field(pytree_node=False)
    link_names: Tuple[str, ...] = struct.field(pytree_node=False)
    joint_names: Tuple[str, ...] = struct.field(pytree_node=False)
    actuated_joint_names: Tuple[str, ...] = struct.field(pytree_node=False)
    parent_indices: Array

    @property
    def num_links(self) -> int:
        return len(self.link_names)

    def link_index(self, link_name: str) -> Optional[int]:
        """Index of ``link_name`` in ``link_names``, or None if unknown."""
        try:
            return self.link_names.index(link_name)
        except ValueError:
            return None

    def has_link(self, link_name: str) -> bool:
        return link_name in self.link_names

    def has_joint(self, joint_name: str) -> bool:
        return joint_name in self.joint_names

    def parent_link(self, link_name: str) -> Optional[str]:
        """Name of the parent link of ``link_name``.

        Returns None for the root link and for links that are not part of
        the model.
        """
        idx = self.link_index(link_name)
        if idx is None:
            return None
        # Host-side lookup; the tree walk is plain Python, not traced.
        parent_idx = int(np.asarray(self.parent_indices)[idx])
        if parent_idx == idx:
            return None
        return self.link_names[parent_idx]
