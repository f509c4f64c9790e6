"""Chain connectivity check over the kinematic tree.

A chain is declared by a base link and a tip link. It is accepted when the
two links are connected by walking up the parent relation of the tree.
"""

from typing import Set

from .core import RobotModel


def is_chain(robot: RobotModel, base_link: str, tip_link: str) -> bool:
    """Check whether ``base_link`` and ``tip_link`` form a chain.

    The tip is walked up to the root first, stopping early if the base is
    found on the way. Otherwise the base is walked up to the root, and the
    chain is accepted as soon as that walk meets a link seen from the tip,
    i.e. the two links share an ancestor.

    Args:
        robot: Kinematic model both links belong to.
        base_link: Name of the base link of the chain.
        tip_link: Name of the tip link of the chain.

    Returns:
        True if the links are connected as described above.
    """
    seen: Set[str] = set()
    link = tip_link if robot.has_link(tip_link) else None
    while link is not None:
        seen.add(link)
        if link == base_link:
            return True
        link = robot.parent_link(link)

    link = base_link if robot.has_link(base_link) else None
    while link is not None:
        if link in seen:
            return True
        link = robot.parent_link(link)
    return False
