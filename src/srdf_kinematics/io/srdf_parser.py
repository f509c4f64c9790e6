"""SRDF parser for loading the semantic description of a robot.

This module reads an SRDF document and populates a SemanticModel, checking
every reference it makes against a RobotModel. Malformed or unresolved
elements are reported through a Diagnostics channel and left out of the
model; only a missing root element or an unreadable source fails the load.
"""

import logging
import os
import re
from typing import Dict, List, Optional, Tuple, Union

from lxml import etree

from srdf_kinematics.chain import is_chain
from srdf_kinematics.core.robot_model import RobotModel
from srdf_kinematics.core.semantic_model import (
    DisabledCollisionPair,
    EndEffector,
    Group,
    GroupState,
    SemanticModel,
    VirtualJoint,
    VirtualJointType,
    VisualSensor,
)
from srdf_kinematics.diagnostics import Diagnostics
from srdf_kinematics.groups import resolve_group_dependencies
from srdf_kinematics.references import ReferenceResolver

logger = logging.getLogger(__name__)

ROBOT_TAG = "robot"

# Plain decimal or exponent literals, plus inf and nan; no digit grouping.
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)", re.IGNORECASE
)


def _children(element: etree._Element, tag: str):
    """Direct child elements of ``element`` named ``tag``, in document order."""
    return element.iterchildren(tag)


def _parse_float(text: str) -> float:
    """Parse a numeric literal, raising ValueError for anything else."""
    token = text.strip()
    if not _FLOAT_RE.fullmatch(token):
        raise ValueError(f"not a number: {text!r}")
    return float(token)


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


def _load_virtual_joints(
    model: SemanticModel,
    resolver: ReferenceResolver,
    robot_xml: etree._Element,
    diagnostics: Diagnostics,
) -> None:
    for vj_xml in _children(robot_xml, "virtual_joint"):
        name = vj_xml.get("name")
        child = vj_xml.get("child_link")
        parent = vj_xml.get("parent_frame")
        type_str = vj_xml.get("type")
        if name is None:
            diagnostics.error("Name of virtual joint is not specified")
            continue
        if child is None:
            diagnostics.error(f"Child link of virtual joint '{name}' is not specified")
            continue
        if not resolver.link_exists(child):
            diagnostics.error(
                f"Virtual joint '{name}' does not attach to a link on the robot "
                f"(link '{child}' is not known)"
            )
            continue
        if parent is None:
            diagnostics.error(f"Parent frame of virtual joint '{name}' is not specified")
            continue
        if type_str is None:
            diagnostics.error(f"Type of virtual joint '{name}' is not specified")
            continue

        joint_type = VirtualJointType.parse(type_str)
        if joint_type is None:
            diagnostics.error(
                f"Unknown type of joint: '{type_str}'. Assuming 'fixed' instead. "
                "Other known types are 'planar' and 'floating'."
            )
            joint_type = VirtualJointType.FIXED

        virtual_joint = VirtualJoint(
            name=name.strip(),
            child_link=child.strip(),
            parent_frame=parent.strip(),
            type=joint_type,
        )
        model.virtual_joints.append(virtual_joint)
        resolver.add_virtual_joint(virtual_joint)


def _parse_group(
    group_xml: etree._Element,
    name: str,
    resolver: ReferenceResolver,
    diagnostics: Diagnostics,
) -> Group:
    links: List[str] = []
    for link_xml in _children(group_xml, "link"):
        link_name = _strip(link_xml.get("name"))
        if link_name is None:
            diagnostics.error(f"Link name not specified in group '{name}'")
            continue
        if not resolver.link_exists(link_name):
            diagnostics.error(
                f"Link '{link_name}' declared as part of group '{name}' is not known to the URDF"
            )
            continue
        links.append(link_name)

    joints: List[str] = []
    for joint_xml in _children(group_xml, "joint"):
        joint_name = _strip(joint_xml.get("name"))
        if joint_name is None:
            diagnostics.error(f"Joint name not specified in group '{name}'")
            continue
        if not resolver.joint_exists(joint_name):
            diagnostics.error(
                f"Joint '{joint_name}' declared as part of group '{name}' is not known to the URDF"
            )
            continue
        joints.append(joint_name)

    chains: List[Tuple[str, str]] = []
    for chain_xml in _children(group_xml, "chain"):
        base = _strip(chain_xml.get("base_link"))
        tip = _strip(chain_xml.get("tip_link"))
        if base is None:
            diagnostics.error(f"Base link name not specified for chain in group '{name}'")
            continue
        if tip is None:
            diagnostics.error(f"Tip link name not specified for chain in group '{name}'")
            continue
        unknown = [link for link in (base, tip) if not resolver.link_exists(link)]
        if unknown:
            diagnostics.error(
                f"Link '{unknown[0]}' declared as part of a chain in group '{name}' "
                "is not known to the URDF"
            )
            continue
        if not is_chain(resolver.robot, base, tip):
            diagnostics.error(
                f"Links '{base}' and '{tip}' do not form a chain. Not included in group '{name}'"
            )
            continue
        chains.append((base, tip))

    # Subgroup names are checked later, once every group has been read.
    subgroups: List[str] = []
    for subgroup_xml in _children(group_xml, "group"):
        subgroup_name = _strip(subgroup_xml.get("name"))
        if subgroup_name is None:
            diagnostics.error(
                f"Group name not specified when included as subgroup of '{name}'"
            )
            continue
        subgroups.append(subgroup_name)

    return Group(
        name=name,
        links=tuple(links),
        joints=tuple(joints),
        chains=tuple(chains),
        subgroups=tuple(subgroups),
    )


def _load_groups(
    model: SemanticModel,
    resolver: ReferenceResolver,
    robot_xml: etree._Element,
    diagnostics: Diagnostics,
) -> None:
    groups: List[Group] = []
    for group_xml in _children(robot_xml, "group"):
        name = _strip(group_xml.get("name"))
        if name is None:
            diagnostics.error("Group name not specified")
            continue
        if any(g.name == name for g in groups):
            diagnostics.error(f"Group '{name}' is declared more than once. Ignoring redefinition")
            continue
        group = _parse_group(group_xml, name, resolver, diagnostics)
        if group.is_empty:
            diagnostics.warning(f"Group '{name}' is empty.")
        groups.append(group)

    model.groups.extend(resolve_group_dependencies(groups, diagnostics))


def _parse_joint_values(
    value: str, joint_name: str, state_name: str, diagnostics: Diagnostics
) -> Tuple[float, ...]:
    values = []
    for token in value.split():
        try:
            values.append(_parse_float(token))
        except ValueError:
            diagnostics.error(
                f"Unable to parse joint value '{token}' for joint '{joint_name}' "
                f"in group state '{state_name}'"
            )
    return tuple(values)


def _load_group_states(
    model: SemanticModel,
    resolver: ReferenceResolver,
    robot_xml: etree._Element,
    diagnostics: Diagnostics,
) -> None:
    for state_xml in _children(robot_xml, "group_state"):
        name = _strip(state_xml.get("name"))
        group_name = _strip(state_xml.get("group"))
        if name is None:
            diagnostics.error("Name of group state is not specified")
            continue
        if group_name is None:
            diagnostics.error(f"Name of group for state '{name}' is not specified")
            continue
        if not model.has_group(group_name):
            diagnostics.error(
                f"Group state '{name}' specified for group '{group_name}', "
                "but that group is not known"
            )
            continue

        joint_values: Dict[str, Tuple[float, ...]] = {}
        for joint_xml in _children(state_xml, "joint"):
            joint_name = _strip(joint_xml.get("name"))
            value = joint_xml.get("value")
            if joint_name is None:
                diagnostics.error(f"Joint name not specified in group state '{name}'")
                continue
            if value is None:
                diagnostics.error(
                    f"Joint value not specified for joint '{joint_name}' in group state '{name}'"
                )
                continue
            if not resolver.joint_exists(joint_name):
                diagnostics.error(
                    f"Joint '{joint_name}' declared as part of group state '{name}' "
                    "is not known to the URDF"
                )
                continue
            values = _parse_joint_values(value, joint_name, name, diagnostics)
            if not values:
                diagnostics.error(
                    f"Unable to parse joint value ('{value}') for joint '{joint_name}' "
                    f"in group state '{name}'"
                )
                continue
            joint_values[joint_name] = joint_values.get(joint_name, ()) + values

        model.group_states.append(
            GroupState(name=name, group=group_name, joint_values=joint_values)
        )


def _load_end_effectors(
    model: SemanticModel,
    resolver: ReferenceResolver,
    robot_xml: etree._Element,
    diagnostics: Diagnostics,
) -> None:
    for eef_xml in _children(robot_xml, "end_effector"):
        name = _strip(eef_xml.get("name"))
        group_name = _strip(eef_xml.get("group"))
        parent = _strip(eef_xml.get("parent_link"))
        if name is None:
            diagnostics.error("Name of end effector is not specified")
            continue
        if group_name is None:
            diagnostics.error(f"Group not specified for end effector '{name}'")
            continue
        if not model.has_group(group_name):
            diagnostics.error(
                f"End effector '{name}' specified for group '{group_name}', "
                "but that group is not known"
            )
            continue
        if parent is None:
            diagnostics.error(f"Parent link not specified for end effector '{name}'")
            continue
        if not resolver.link_exists(parent):
            diagnostics.error(
                f"Link '{parent}' specified as parent for end effector '{name}' "
                "is not known to the URDF"
            )
            continue
        model.end_effectors.append(
            EndEffector(name=name, component_group=group_name, parent_link=parent)
        )


# Required numeric attributes of a visual sensor and how they are reported.
_SENSOR_FIELDS = (
    ("fov_angle", "field of view angle"),
    ("min_range", "minimum range along Z axis"),
    ("max_range", "maximum range along Z axis"),
)


def _load_visual_sensors(
    model: SemanticModel,
    resolver: ReferenceResolver,
    robot_xml: etree._Element,
    diagnostics: Diagnostics,
) -> None:
    for sensor_xml in _children(robot_xml, "visual_sensor"):
        name = _strip(sensor_xml.get("name"))
        frame = _strip(sensor_xml.get("frame"))
        if name is None:
            diagnostics.error("Name of visual sensor is not specified")
            continue
        if frame is None:
            diagnostics.error(f"No frame specified for visual sensor '{name}'")
            continue

        raw = {attr: sensor_xml.get(attr) for attr, _ in _SENSOR_FIELDS}
        missing = [label for attr, label in _SENSOR_FIELDS if raw[attr] is None]
        if missing:
            diagnostics.error(f"No {missing[0]} specified for visual sensor '{name}'")
            continue

        numbers: Dict[str, float] = {}
        for attr, label in _SENSOR_FIELDS:
            try:
                numbers[attr] = _parse_float(raw[attr])
            except ValueError:
                diagnostics.error(f"Unable to parse {label} ('{raw[attr]}') for sensor '{name}'")
                break
        else:
            model.visual_sensors.append(VisualSensor(name=name, frame=frame, **numbers))


def _load_disabled_collisions(
    model: SemanticModel,
    resolver: ReferenceResolver,
    robot_xml: etree._Element,
    diagnostics: Diagnostics,
) -> None:
    for pair_xml in _children(robot_xml, "disable_collisions"):
        link1 = _strip(pair_xml.get("link1"))
        link2 = _strip(pair_xml.get("link2"))
        if link1 is None or link2 is None:
            diagnostics.error("A pair of links needs to be specified to disable collisions")
            continue
        unknown = [link for link in (link1, link2) if not resolver.link_exists(link)]
        if unknown:
            diagnostics.error(
                f"Link '{unknown[0]}' is not known to URDF. Cannot disable collisions."
            )
            continue
        model.disabled_collision_pairs.append(DisabledCollisionPair(link1, link2))


# Loaders run in this order; later ones refer to groups and virtual joints
# accepted by earlier ones.
_LOADERS = (
    _load_virtual_joints,
    _load_groups,
    _load_group_states,
    _load_end_effectors,
    _load_visual_sensors,
    _load_disabled_collisions,
)


def load_srdf_element(
    model: SemanticModel,
    robot: RobotModel,
    robot_xml: Optional[etree._Element],
    diagnostics: Optional[Diagnostics] = None,
) -> bool:
    """Populate ``model`` from the root element of an SRDF document.

    The model is cleared first, so loading twice gives the same result as
    loading once.

    Args:
        model: Semantic model to populate.
        robot: Kinematic model every reference is checked against.
        robot_xml: The ``robot`` element of the document.
        diagnostics: Receives the warnings and errors found while loading.

    Returns:
        False if the element is missing or is not a ``robot`` element,
        True otherwise, including when individual elements were skipped.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    model.clear()
    if robot_xml is None or robot_xml.tag != ROBOT_TAG:
        diagnostics.error(f"Could not find the '{ROBOT_TAG}' element in the xml file")
        return False

    name = robot_xml.get("name")
    if name is None:
        diagnostics.error("No name given for the robot.")
    else:
        model.name = name.strip()
        if model.name != robot.name:
            diagnostics.error(
                f"Semantic description is not specified for the same robot as the URDF "
                f"('{model.name}' != '{robot.name}')"
            )

    resolver = ReferenceResolver(robot)
    for loader in _LOADERS:
        loader(model, resolver, robot_xml, diagnostics)

    logger.debug(
        "Loaded semantic description of '%s': %d groups, %d group states, "
        "%d virtual joints, %d end effectors, %d visual sensors, "
        "%d disabled collision pairs",
        model.name,
        len(model.groups),
        len(model.group_states),
        len(model.virtual_joints),
        len(model.end_effectors),
        len(model.visual_sensors),
        len(model.disabled_collision_pairs),
    )
    return True


def load_srdf_document(
    model: SemanticModel,
    robot: RobotModel,
    document: Optional[etree._ElementTree],
    diagnostics: Optional[Diagnostics] = None,
) -> bool:
    """Populate ``model`` from a parsed SRDF document."""
    robot_xml = document.getroot() if document is not None else None
    return load_srdf_element(model, robot, robot_xml, diagnostics)


def load_srdf_string(
    model: SemanticModel,
    robot: RobotModel,
    srdf_text: Union[str, bytes],
    diagnostics: Optional[Diagnostics] = None,
) -> bool:
    """Populate ``model`` from SRDF text. Malformed XML fails the load."""
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    if isinstance(srdf_text, str):
        srdf_text = srdf_text.encode("utf-8")
    try:
        robot_xml = etree.fromstring(srdf_text)
    except etree.XMLSyntaxError as e:
        model.clear()
        diagnostics.error(f"Unable to parse the semantic description: {e}")
        return False
    return load_srdf_element(model, robot, robot_xml, diagnostics)


def load_srdf_file(
    model: SemanticModel,
    robot: RobotModel,
    srdf_path: str,
    diagnostics: Optional[Diagnostics] = None,
) -> bool:
    """Populate ``model`` from an SRDF file. An unreadable file fails the load."""
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    try:
        with open(srdf_path, "rb") as f:
            srdf_text = f.read()
    except OSError as e:
        model.clear()
        diagnostics.error(f"Could not open file [{srdf_path}] for parsing: {e}")
        return False
    return load_srdf_string(model, robot, srdf_text, diagnostics)


def load_srdf(robot: RobotModel, srdf_path: str) -> SemanticModel:
    """Load an SRDF file into a new SemanticModel.

    Args:
        robot: Kinematic model the description refers to.
        srdf_path: Path to the SRDF file to load.

    Returns:
        SemanticModel: The validated semantic description.

    Raises:
        FileNotFoundError: The file does not exist.
        ValueError: The file has no ``robot`` root element or is not valid XML.
    """
    if not os.path.exists(srdf_path):
        raise FileNotFoundError(f"SRDF file not found: {srdf_path}")
    model = SemanticModel()
    diagnostics = Diagnostics()
    if not load_srdf_file(model, robot, srdf_path, diagnostics):
        raise ValueError(f"Failed to parse SRDF file: {'; '.join(diagnostics.errors)}")
    return model
