import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional

from skill_linker.groups import group_sort_key
from skill_linker.models import ActionKind, LinkAction, LinkPlan, LinkStatus


logger = logging.getLogger(__name__)


_TRANSITIONS: dict[tuple[LinkStatus, bool], tuple[ActionKind, str]] = {
    (LinkStatus.ABSENT, True): (ActionKind.CREATE_LINK, "create symlink"),
    (LinkStatus.ABSENT, False): (ActionKind.NOOP, "not linked"),
    (LinkStatus.MANAGED, True): (ActionKind.NOOP, "already linked"),
    (LinkStatus.MANAGED, False): (ActionKind.REMOVE_LINK, "remove managed symlink"),
    (LinkStatus.FOREIGN, True): (ActionKind.SKIP_CONFLICT, "foreign entry exists"),
    (LinkStatus.FOREIGN, False): (ActionKind.NOOP, "foreign entry left untouched"),
}


def plan_action(
    current: LinkStatus, desired: Optional[bool], in_store: bool
) -> tuple[ActionKind, str]:
    if desired is None:
        return ActionKind.NOOP, "unchanged (not in selection)"
    if desired and current == LinkStatus.ABSENT and not in_store:
        return ActionKind.SKIP_MISSING, "skill not in central store"
    return _TRANSITIONS[(current, desired)]


def plan_links(
    provider: str,
    provider_dir: Path,
    store_dir: Path,
    current: Mapping[str, LinkStatus],
    selection: Mapping[str, bool],
    inventory: Iterable[str],
) -> LinkPlan:
    """Compute the ordered link plan for one provider without touching disk.

    Covers every inventory skill, every selected name and every managed link
    already present. Foreign entries nobody asked about are left out.
    """
    inventory_set = set(inventory)
    managed = {
        name for name, status in current.items() if status == LinkStatus.MANAGED
    }
    names = inventory_set | set(selection) | managed

    actions: list[LinkAction] = []
    for name in sorted(names, key=group_sort_key):
        status = current.get(name, LinkStatus.ABSENT)
        kind, detail = plan_action(status, selection.get(name), name in inventory_set)
        actions.append(
            LinkAction(
                skill=name,
                kind=kind,
                current=status,
                path=provider_dir / name,
                source=store_dir / name,
                detail=detail,
            )
        )

    plan = LinkPlan(
        provider=provider,
        provider_dir=provider_dir,
        store_dir=store_dir,
        actions=tuple(actions),
    )
    logger.debug("planned %s for %s", plan.summary(), provider)
    return plan


def selection_from_state(current: Mapping[str, LinkStatus]) -> dict[str, bool]:
    return {name: status == LinkStatus.MANAGED for name, status in current.items()}


def drift(
    current: Mapping[str, LinkStatus], selection: Mapping[str, bool]
) -> tuple[list[str], list[str]]:
    """Return (linked but unwanted, wanted but missing) names."""
    unwanted = sorted(
        name
        for name, status in current.items()
        if status == LinkStatus.MANAGED and selection.get(name) is False
    )
    missing = sorted(
        name
        for name, wanted in selection.items()
        if wanted and current.get(name, LinkStatus.ABSENT) == LinkStatus.ABSENT
    )
    return unwanted, missing
