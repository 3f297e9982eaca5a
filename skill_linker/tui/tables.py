from collections import Counter

from rich.console import Group
from rich.padding import Padding
from rich.panel import Panel
from rich.table import Column, Table
from rich.text import Text

from skill_linker.groups import display_name
from skill_linker.lock import LockEntry
from skill_linker.models import (
    ApplyResult,
    LinkAction,
    LinkPlan,
    ProviderStatusRow,
    ProviderToggleRow,
    ProviderToggleStatus,
)
from skill_linker.tui.enums import (
    ACTION_KIND_STYLE,
    OUTCOME_STYLE,
    PROVIDER_STATUS_STYLE,
    UIStyle,
)


def _styled(value: str, style: str) -> str:
    return f"[{style}]{value}[/{style}]"


class PlanTable:
    @staticmethod
    def summary_block(plan: LinkPlan, mode: str, provider_path: str):
        counts = Counter(action.kind.value for action in plan.actions)
        chips = [f"{key}={value}" for key, value in sorted(counts.items()) if value > 0]
        if not chips:
            chips = ["none"]

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Mode", mode)
        table.add_row("Provider", f"{plan.provider} ({provider_path})")
        table.add_row("Skills", str(len(plan.actions)))
        table.add_row("Actions", "  ".join(chips))
        return table

    @staticmethod
    def actions_table(actions: list[LinkAction]) -> Table:
        table = Table(
            Column(header="Skill", overflow="ellipsis", max_width=42),
            Column(header="Current", width=9),
            Column(header="Action", width=14),
            Column(header="Reason", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for action in actions:
            style = ACTION_KIND_STYLE.get(action.kind, UIStyle.WHITE.value)
            table.add_row(
                action.skill,
                action.current.value,
                _styled(action.kind.value, style),
                action.detail,
            )
        return table


class ApplyTable:
    @staticmethod
    def stats_panel(result: ApplyResult) -> Panel:
        table = Table(show_header=False, box=None)
        table.add_row("[bold]changed[/bold]", str(result.applied))
        for status, count in result.counts().items():
            table.add_row(f"[bold]{status}[/bold]", str(count))
        return Panel(
            table,
            title=f"apply: {result.provider}",
            border_style=UIStyle.GREEN.value if result.failed == 0 else UIStyle.RED.value,
        )

    @staticmethod
    def outcomes_table(result: ApplyResult) -> Table:
        table = Table(
            Column(header="Skill", overflow="ellipsis", max_width=42),
            Column(header="Action", width=14),
            Column(header="Outcome", width=10),
            Column(header="Detail", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for item in result.outcomes:
            style = OUTCOME_STYLE.get(item.status, UIStyle.WHITE.value)
            table.add_row(
                item.skill,
                item.action.kind.value,
                _styled(item.status.value, style),
                item.detail,
            )
        return table


class StatusTable:
    @staticmethod
    def provider_table(items: list[ProviderStatusRow]) -> Table:
        table = Table(
            Column(header="Provider", width=10),
            Column(header="Status", width=13),
            Column(header="Sync", width=4),
            Column(header="Linked", width=6, justify="right"),
            Column(header="Foreign", width=7, justify="right"),
            Column(header="Path", overflow="ellipsis"),
            Column(header="Detail", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            style = PROVIDER_STATUS_STYLE.get(item.status, UIStyle.WHITE.value)
            table.add_row(
                item.name,
                _styled(item.status.value, style),
                "on" if item.enabled else "off",
                str(item.managed),
                str(item.foreign),
                item.path,
                item.detail,
            )
        return table


class ProvidersTable:
    @staticmethod
    def providers_table(items: list[ProviderToggleRow]) -> Table:
        table = Table(
            Column(header="Provider", width=10),
            Column(header="Sync", width=10),
            Column(header="Path", overflow="ellipsis"),
            Column(header="Detail", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            style = (
                UIStyle.GREEN.value
                if item.status == ProviderToggleStatus.ENABLED
                else UIStyle.YELLOW.value
            )
            table.add_row(
                item.name, _styled(item.status.value, style), item.path, item.detail
            )
        return table


class SkillsTable:
    @staticmethod
    def grouped(
        groups: dict[str, list[str]],
        link_counts: dict[str, int],
        lock_entries: dict[str, LockEntry],
        installed: set[str],
    ):
        blocks = []
        for group, names in groups.items():
            heading = Text(f"{group} ({len(names)})", style="bold magenta")
            table = Table(
                Column(header="Skill", width=32, overflow="ellipsis"),
                Column(header="Links", width=5, justify="right"),
                Column(header="SKILL.md", width=8),
                Column(header="Source", overflow="ellipsis"),
                expand=True,
                header_style="bold",
                show_edge=False,
            )
            for name in names:
                entry = lock_entries.get(name)
                source = entry.source if entry is not None and entry.source else ""
                table.add_row(
                    display_name(name),
                    str(link_counts.get(name, 0)),
                    "ok"
                    if name in installed
                    else _styled("missing", UIStyle.YELLOW.value),
                    source,
                )
            blocks.append(Group(heading, Padding(table, (0, 0, 0, 2))))
        return Group(*blocks)


class LockTable:
    @staticmethod
    def entries_table(entries: dict[str, LockEntry]) -> Table:
        table = Table(
            Column(header="Skill", overflow="ellipsis", max_width=36),
            Column(header="Source", overflow="ellipsis"),
            Column(header="Type", width=8),
            Column(header="Installed", width=20),
            Column(header="Updated", width=20),
            expand=True,
            header_style="bold",
        )
        for name in sorted(entries):
            entry = entries[name]
            table.add_row(
                name,
                entry.source or "",
                entry.source_type or "",
                entry.installed_at or "",
                entry.updated_at or "",
            )
        return table
