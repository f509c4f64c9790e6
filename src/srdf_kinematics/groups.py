"""Validation of the group-to-subgroup relation."""

from typing import List, Optional, Sequence, Set

from .core import Group
from .diagnostics import Diagnostics


def known_group_names(groups: Sequence[Group]) -> Set[str]:
    """Names of the groups whose subgroups can all be resolved.

    A group is known once every one of its subgroups is known; groups without
    subgroups are known immediately. The scan repeats until nothing changes,
    so groups on a cycle or depending on an undeclared group never qualify.
    """
    known: Set[str] = set()
    updated = True
    while updated:
        updated = False
        for group in groups:
            if group.name in known:
                continue
            if all(subgroup in known for subgroup in group.subgroups):
                known.add(group.name)
                updated = True
    return known


def resolve_group_dependencies(
    groups: Sequence[Group], diagnostics: Optional[Diagnostics] = None
) -> List[Group]:
    """Drop the groups whose subgroups cannot be satisfied.

    Args:
        groups: Parsed groups, in document order.
        diagnostics: Receives one error per dropped group.

    Returns:
        The surviving groups, in their original order.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    known = known_group_names(groups)

    resolved = []
    for group in groups:
        if group.name in known:
            resolved.append(group)
            continue
        missing = [s for s in group.subgroups if s not in known]
        diagnostics.error(
            f"Group '{group.name}' has unsatisfied subgroups: {', '.join(missing)}"
        )
    return resolved
