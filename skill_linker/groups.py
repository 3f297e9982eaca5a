from typing import Iterable

from skill_linker.constants import GROUP_SEPARATOR, UNGROUPED


def group_of(name: str) -> str:
    """Prefix before the first separator, or ``UNGROUPED``.

    Names without a separator or with an empty prefix (``-foo``) are ungrouped.
    A literal ``_other-x`` prefix is the sentinel itself, so it joins the
    ungrouped bucket and sorts last with it.
    """
    prefix, separator, _ = name.partition(GROUP_SEPARATOR)
    if not separator or not prefix:
        return UNGROUPED
    return prefix


def group_rank(group: str) -> tuple[bool, str]:
    # UNGROUPED always sorts after named groups.
    return (group == UNGROUPED, group)


def group_sort_key(name: str) -> tuple[bool, str, str]:
    group = group_of(name)
    return (group == UNGROUPED, group, name)


def group_members(names: Iterable[str]) -> dict[str, list[str]]:
    members: dict[str, set[str]] = {}
    for name in names:
        members.setdefault(group_of(name), set()).add(name)
    return {group: sorted(members[group]) for group in sorted(members, key=group_rank)}


def display_name(name: str) -> str:
    """Skill name without its group prefix, for grouped listings."""
    group = group_of(name)
    if group == UNGROUPED:
        return name
    return name[len(group) + len(GROUP_SEPARATOR) :] or name
