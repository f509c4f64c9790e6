"""URDF parser for loading the kinematic tree of a robot.

This module parses URDF files and converts their link/joint topology into
a RobotModel PyTree, which semantic descriptions are validated against.
"""

import os
from collections import deque
from typing import Dict, List, Union

import jax.numpy as jnp
from lxml import etree

from srdf_kinematics.core.robot_model import RobotModel


def load_urdf(urdf_path: str) -> RobotModel:
    """Load a URDF file and convert it to a RobotModel PyTree.

    Args:
        urdf_path: Path to the URDF file to load.

    Returns:
        RobotModel: The kinematic tree of the robot.

    Raises:
        FileNotFoundError: The file does not exist.
        ValueError: The file is not well-formed XML or does not describe a
            single tree of links.
    """
    if not os.path.exists(urdf_path):
        raise FileNotFoundError(f"URDF file not found: {urdf_path}")
    try:
        tree = etree.parse(urdf_path)
    except etree.XMLSyntaxError as e:
        raise ValueError(f"Failed to parse URDF file: {e}") from e
    return _build_robot_model(tree.getroot())


def load_urdf_string(urdf_text: Union[str, bytes]) -> RobotModel:
    """Parse URDF text and convert it to a RobotModel PyTree.

    Args:
        urdf_text: URDF document as a string or raw bytes.

    Returns:
        RobotModel: The kinematic tree of the robot.

    Raises:
        ValueError: The text is not well-formed XML or does not describe a
            single tree of links.
    """
    if isinstance(urdf_text, str):
        urdf_text = urdf_text.encode("utf-8")
    try:
        root = etree.fromstring(urdf_text)
    except etree.XMLSyntaxError as e:
        raise ValueError(f"Failed to parse URDF text: {e}") from e
    return _build_robot_model(root)


def _build_robot_model(root: etree._Element) -> RobotModel:
    if root.tag != "robot":
        raise ValueError(f"Expected a 'robot' root element, found: '{root.tag}'")
    robot_name = (root.get("name") or "").strip()

    # First pass: Build topology mappings
    child_to_parent_map: Dict[str, str] = {}
    all_links: List[str] = []
    child_links = set()

    # Collect all links
    for link in root.findall("link"):
        link_name = link.get("name")
        if link_name is None:
            raise ValueError("Link without a name")
        all_links.append(link_name.strip())

    # Collect joints and build parent-child relationships
    joints_info = []
    for joint in root.findall("joint"):
        joint_name = joint.get("name")
        joint_type = joint.get("type")
        if joint_name is None:
            raise ValueError("Joint without a name")

        parent_elem = joint.find("parent")
        child_elem = joint.find("child")
        if parent_elem is None or child_elem is None:
            raise ValueError(f"Joint '{joint_name}' is missing its parent or child link")

        parent_name = (parent_elem.get("link") or "").strip()
        child_name = (child_elem.get("link") or "").strip()
        for name in (parent_name, child_name):
            if name not in all_links:
                raise ValueError(f"Joint '{joint_name}' refers to unknown link '{name}'")
        if child_name in child_links:
            raise ValueError(f"Link '{child_name}' has more than one parent")

        child_to_parent_map[child_name] = parent_name
        child_links.add(child_name)

        joints_info.append({
            "name": joint_name.strip(),
            "type": (joint_type or "").strip(),
            "parent": parent_name,
            "child": child_name,
        })

    # Find root link (not a child of any joint)
    root_links = [name for name in all_links if name not in child_links]
    if len(root_links) != 1:
        raise ValueError(f"Expected exactly one root link, found: {root_links}")
    root_link = root_links[0]

    # Order links using breadth-first traversal from root
    ordered_links = []
    queue = deque([root_link])
    visited = set()

    while queue:
        current_link = queue.popleft()
        if current_link in visited:
            continue

        visited.add(current_link)
        ordered_links.append(current_link)

        for joint_info in joints_info:
            if joint_info["parent"] == current_link:
                child = joint_info["child"]
                if child not in visited:
                    queue.append(child)

    if len(ordered_links) != len(all_links):
        unreachable = sorted(set(all_links) - visited)
        raise ValueError(f"Links not connected to root '{root_link}': {unreachable}")

    link_map = {link_name: i for i, link_name in enumerate(ordered_links)}

    parent_indices_list = []
    for i, link_name in enumerate(ordered_links):
        if link_name == root_link:
            parent_indices_list.append(i)  # Root parents itself
        else:
            parent_indices_list.append(link_map[child_to_parent_map[link_name]])

    joint_names = tuple(info["name"] for info in joints_info)
    actuated_joint_names = tuple(
        info["name"] for info in joints_info if info["type"] != "fixed"
    )

    return RobotModel(
        name=robot_name,
        link_names=tuple(ordered_links),
        joint_names=joint_names,
        actuated_joint_names=actuated_joint_names,
        parent_indices=jnp.array(parent_indices_list, dtype=jnp.int32),
    )
