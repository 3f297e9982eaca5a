from pathlib import Path

import pytest

from skill_linker.models import ActionKind, LinkStatus
from skill_linker.planner import drift, plan_action, plan_links, selection_from_state


PROVIDER_DIR = Path("/home/user/.claude/skills")
STORE_DIR = Path("/home/user/.agents/skills")


def _plan(current, selection, inventory):
    return plan_links(
        provider="claude",
        provider_dir=PROVIDER_DIR,
        store_dir=STORE_DIR,
        current=current,
        selection=selection,
        inventory=inventory,
    )


@pytest.mark.parametrize(
    "current,desired,expected",
    [
        (LinkStatus.ABSENT, True, ActionKind.CREATE_LINK),
        (LinkStatus.ABSENT, False, ActionKind.NOOP),
        (LinkStatus.MANAGED, True, ActionKind.NOOP),
        (LinkStatus.MANAGED, False, ActionKind.REMOVE_LINK),
        (LinkStatus.FOREIGN, True, ActionKind.SKIP_CONFLICT),
        (LinkStatus.FOREIGN, False, ActionKind.NOOP),
    ],
)
def test_transition_table(
    current: LinkStatus, desired: bool, expected: ActionKind
) -> None:
    kind, _ = plan_action(current, desired, in_store=True)

    assert kind == expected


def test_unselected_name_is_noop() -> None:
    kind, detail = plan_action(LinkStatus.MANAGED, None, in_store=True)

    assert kind == ActionKind.NOOP
    assert "not in selection" in detail


def test_scenario_link_one_more_skill() -> None:
    inventory = {"react-best-practices", "vue-testing", "auth-jwt"}
    current = {
        "react-best-practices": LinkStatus.MANAGED,
        "vue-testing": LinkStatus.ABSENT,
        "auth-jwt": LinkStatus.ABSENT,
    }
    selection = {
        "react-best-practices": True,
        "vue-testing": True,
        "auth-jwt": False,
    }

    plan = _plan(current, selection, inventory)

    assert [(action.skill, action.kind) for action in plan.actions] == [
        ("auth-jwt", ActionKind.NOOP),
        ("react-best-practices", ActionKind.NOOP),
        ("vue-testing", ActionKind.CREATE_LINK),
    ]
    vue = plan.action_for("vue-testing")
    assert vue is not None
    assert vue.path == PROVIDER_DIR / "vue-testing"
    assert vue.source == STORE_DIR / "vue-testing"
    assert plan.summary()["create_link"] == 1
    assert [action.skill for action in plan.changes()] == ["vue-testing"]


def test_plan_is_deterministic_for_same_input() -> None:
    inventory = {"b-two", "a-one", "solo", "a-zero"}
    current = {"a-one": LinkStatus.MANAGED, "handmade": LinkStatus.FOREIGN}
    selection = {"a-one": False, "b-two": True, "solo": True}

    first = _plan(current, selection, inventory)
    second = _plan(dict(reversed(list(current.items()))), selection, inventory)

    assert first == second


def test_plan_orders_by_group_then_name() -> None:
    inventory = {"vue-testing", "solo", "auth-oauth", "auth-jwt"}

    plan = _plan({}, {name: True for name in inventory}, inventory)

    assert [action.skill for action in plan.actions] == [
        "auth-jwt",
        "auth-oauth",
        "vue-testing",
        "solo",
    ]


def test_foreign_entries_never_mutated() -> None:
    inventory = {"react-best-practices", "vue-testing"}
    current = {
        "react-best-practices": LinkStatus.FOREIGN,
        "vue-testing": LinkStatus.FOREIGN,
        "handmade": LinkStatus.FOREIGN,
    }

    for selection in (
        {"react-best-practices": True, "vue-testing": False, "handmade": True},
        {"react-best-practices": False, "vue-testing": True, "handmade": False},
    ):
        plan = _plan(current, selection, inventory)
        for action in plan.actions:
            assert action.kind not in (ActionKind.CREATE_LINK, ActionKind.REMOVE_LINK)


def test_real_file_blocks_link_with_conflict() -> None:
    plan = _plan(
        {"react-best-practices": LinkStatus.FOREIGN},
        {"react-best-practices": True},
        {"react-best-practices"},
    )

    assert plan.action_for("react-best-practices").kind == ActionKind.SKIP_CONFLICT


def test_foreign_entry_outside_inventory_is_left_out() -> None:
    plan = _plan({"handmade": LinkStatus.FOREIGN}, {}, {"auth-jwt"})

    assert [action.skill for action in plan.actions] == ["auth-jwt"]


def test_selected_skill_missing_from_store_is_skipped() -> None:
    plan = _plan({}, {"ghost-skill": True}, {"auth-jwt"})

    assert plan.action_for("ghost-skill").kind == ActionKind.SKIP_MISSING
    assert plan.action_for("auth-jwt").kind == ActionKind.NOOP


def test_orphaned_managed_link_can_be_removed() -> None:
    plan = _plan({"gone-skill": LinkStatus.MANAGED}, {"gone-skill": False}, set())

    assert plan.action_for("gone-skill").kind == ActionKind.REMOVE_LINK


def test_replanning_after_applied_state_is_all_noop() -> None:
    inventory = {"a-one", "b-two", "c-three"}
    selection = {"a-one": True, "b-two": False, "c-three": True}
    current = {"a-one": LinkStatus.ABSENT, "b-two": LinkStatus.MANAGED}

    first = _plan(current, selection, inventory)
    applied = {
        action.skill: LinkStatus.MANAGED
        if action.kind == ActionKind.CREATE_LINK
        else LinkStatus.ABSENT
        if action.kind == ActionKind.REMOVE_LINK
        else current.get(action.skill, LinkStatus.ABSENT)
        for action in first.actions
    }

    assert _plan(applied, selection, inventory).is_noop()


def test_selection_from_state_and_drift() -> None:
    current = {
        "a-one": LinkStatus.MANAGED,
        "b-two": LinkStatus.ABSENT,
        "c-three": LinkStatus.FOREIGN,
    }

    assert selection_from_state(current) == {
        "a-one": True,
        "b-two": False,
        "c-three": False,
    }
    unwanted, missing = drift(current, {"a-one": False, "b-two": True})
    assert unwanted == ["a-one"]
    assert missing == ["b-two"]
