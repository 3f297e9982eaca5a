"""Interactive Textual-based selector for a provider's linked skills."""

from __future__ import annotations

from typing import Iterable, Mapping

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, SelectionList, Static
from textual.widgets.selection_list import Selection

from skill_linker.groups import (
    display_name,
    group_members,
    group_of,
    group_sort_key,
)
from skill_linker.models import LinkStatus


def selection_label(name: str, status: LinkStatus, in_store: bool) -> str:
    label = f"{group_of(name)} / {display_name(name)}"
    if status == LinkStatus.FOREIGN:
        return f"{label} (foreign, not managed)"
    if not in_store:
        return f"{label} (missing from store)"
    return label


class SkillSelectorApp(App[dict[str, bool] | None]):
    """Checkbox list of skills; exits with a selection or ``None`` on quit."""

    TITLE = "Manage Skills"
    CSS_DEFAULT = """
    Screen {
        layout: vertical;
    }
    #info {
        height: 3;
        content-align: center middle;
        background: $primary-darken-2;
        color: $text;
        padding: 0 1;
    }
    SelectionList {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("a", "select_all", "Select All"),
        Binding("n", "select_none", "Select None"),
        Binding("g", "toggle_group", "Toggle Group"),
        Binding("enter", "confirm", "Apply"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(
        self,
        provider: str,
        current: Mapping[str, LinkStatus],
        inventory: Iterable[str],
    ) -> None:
        super().__init__()
        self._provider = provider
        self._current = dict(current)
        self._inventory = set(inventory)
        self._names = sorted(
            set(self._current) | self._inventory, key=group_sort_key
        )

    @property
    def choices(self) -> list[str]:
        return [
            name
            for name in self._names
            if self._current.get(name, LinkStatus.ABSENT) != LinkStatus.FOREIGN
        ]

    def compose(self) -> ComposeResult:
        linked = sum(
            1 for status in self._current.values() if status == LinkStatus.MANAGED
        )
        yield Header()
        yield Static(
            f"Provider: {self._provider} | "
            f"Linked: {linked} of {len(self._inventory)} | "
            f"Use [a] all, [n] none, [g] group, [enter] apply",
            id="info",
        )

        selections: list[Selection[str]] = []
        for name in self._names:
            status = self._current.get(name, LinkStatus.ABSENT)
            selections.append(
                Selection(
                    selection_label(name, status, name in self._inventory),
                    name,
                    status == LinkStatus.MANAGED,
                    disabled=status == LinkStatus.FOREIGN,
                )
            )

        yield SelectionList[str](*selections)
        yield Footer()

    def action_select_all(self) -> None:
        self.query_one(SelectionList).select_all()

    def action_select_none(self) -> None:
        self.query_one(SelectionList).deselect_all()

    def action_toggle_group(self) -> None:
        sel = self.query_one(SelectionList)
        if sel.highlighted is None:
            return
        name = sel.get_option_at_index(sel.highlighted).value
        members = group_members(self.choices).get(group_of(name), [])
        if not members:
            return
        selected = set(sel.selected)
        if all(member in selected for member in members):
            for member in members:
                sel.deselect(member)
        else:
            for member in members:
                sel.select(member)

    def action_confirm(self) -> None:
        sel = self.query_one(SelectionList)
        self.exit(build_selection(self.choices, sel.selected))

    def action_quit_app(self) -> None:
        self.exit(None)


def build_selection(choices: Iterable[str], selected: Iterable[str]) -> dict[str, bool]:
    """Turn checked values into a full selection over ``choices``."""
    selected_set = set(selected)
    return {name: name in selected_set for name in choices}
