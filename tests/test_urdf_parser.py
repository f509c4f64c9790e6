"""Tests for URDF parser functionality."""

import pytest
import jax
import numpy as np
from pathlib import Path

from srdf_kinematics.io import load_urdf, load_urdf_string
from srdf_kinematics.core import RobotModel


FIXTURES = Path(__file__).parent / "fixtures"


def test_load_two_arm_urdf():
    """Test loading the two-arm URDF and verify RobotModel structure."""
    robot = load_urdf(str(FIXTURES / "two_arm_robot.urdf"))

    assert isinstance(robot, RobotModel)
    assert robot.name == "two_arm_robot"

    # Links are ordered breadth-first from the root
    assert robot.link_names == (
        "base_link", "torso", "left_shoulder", "right_shoulder",
        "left_elbow", "right_elbow", "left_wrist", "right_hand", "left_hand",
    )
    assert robot.num_links == 9
    np.testing.assert_array_equal(
        np.asarray(robot.parent_indices), [0, 0, 1, 1, 2, 3, 4, 5, 6]
    )

    # Every joint is known, only non-fixed ones are actuated
    assert len(robot.joint_names) == 8
    assert "torso_joint" in robot.joint_names
    assert "torso_joint" not in robot.actuated_joint_names
    assert "right_hand_joint" not in robot.actuated_joint_names
    assert len(robot.actuated_joint_names) == 6


def test_parent_link_lookup():
    """Test parent-link walking on the loaded tree."""
    robot = load_urdf(str(FIXTURES / "two_arm_robot.urdf"))

    assert robot.parent_link("left_hand") == "left_wrist"
    assert robot.parent_link("torso") == "base_link"
    # The root and unknown links have no parent
    assert robot.parent_link("base_link") is None
    assert robot.parent_link("no_such_link") is None

    assert robot.has_link("left_elbow")
    assert not robot.has_link("left_elbow ")
    assert robot.has_joint("right_hand_joint")
    assert robot.link_index("base_link") == 0
    assert robot.link_index("nowhere") is None


def test_robot_model_is_pytree():
    """Test that RobotModel is a valid JAX PyTree."""
    robot = load_urdf(str(FIXTURES / "two_arm_robot.urdf"))

    flat_robot, tree_def = jax.tree_util.tree_flatten(robot)
    reconstructed_robot = jax.tree_util.tree_unflatten(tree_def, flat_robot)

    # Names are static, only the parent indices are leaves
    assert len(flat_robot) == 1
    assert reconstructed_robot.name == robot.name
    assert reconstructed_robot.link_names == robot.link_names
    assert reconstructed_robot.joint_names == robot.joint_names
    np.testing.assert_array_equal(reconstructed_robot.parent_indices, robot.parent_indices)


def test_load_urdf_string():
    """Test parsing URDF text directly."""
    robot = load_urdf_string(
        """<robot name="pendulum">
             <link name="base"/>
             <link name="bob"/>
             <joint name="swing" type="continuous">
               <parent link="base"/><child link=" bob "/>
             </joint>
           </robot>"""
    )
    assert robot.name == "pendulum"
    assert robot.link_names == ("base", "bob")
    assert robot.actuated_joint_names == ("swing",)
    assert robot.parent_link("bob") == "base"


def test_missing_urdf_file():
    """Test load_urdf raises for a missing file."""
    with pytest.raises(FileNotFoundError):
        load_urdf(str(FIXTURES / "does_not_exist.urdf"))


@pytest.mark.parametrize(
    "urdf_text",
    [
        # Two root links
        '<robot name="r"><link name="a"/><link name="b"/></robot>',
        # Joint to an undeclared link
        '<robot name="r"><link name="a"/>'
        '<joint name="j" type="fixed"><parent link="a"/><child link="b"/></joint></robot>',
        # Not a robot document
        '<model name="r"><link name="a"/></model>',
        # Not well-formed XML
        '<robot name="r"><link name="a">',
    ],
)
def test_invalid_urdf(urdf_text):
    """Documents that are not a single tree of links are rejected."""
    with pytest.raises(ValueError):
        load_urdf_string(urdf_text)


def test_malformed_urdf_file(tmp_path):
    """A URDF file that is not well-formed XML raises ValueError."""
    urdf_path = tmp_path / "broken.urdf"
    urdf_path.write_text('<robot name="r"><link name="a"></robot>')
    with pytest.raises(ValueError):
        load_urdf(str(urdf_path))
