from pathlib import Path

from rich.console import Console

from skill_linker.lock import LockEntry
from skill_linker.models import ActionKind, ApplyResult, LinkPlan, ProviderStatusRow, ProviderToggleRow
from skill_linker.tui.enums import UIStyle
from skill_linker.tui.sections import UISection
from skill_linker.tui.tables import (
    ApplyTable,
    LockTable,
    PlanTable,
    ProvidersTable,
    SkillsTable,
    StatusTable,
)
from skill_linker.utils import compact_home_path, compact_home_paths_in_text


class SkillConsoleUI:
    def __init__(self, console: Console | None = None, home: Path | None = None) -> None:
        self.console = console or Console()
        self.home = home

    def render_plan(self, plan: LinkPlan, mode: str) -> None:
        self.console.print(
            UISection.wrap(
                "plan overview",
                PlanTable.summary_block(
                    plan, mode=mode, provider_path=self._compact(plan.provider_dir)
                ),
                style=UIStyle.BLUE.value,
            )
        )

        changes = [action for action in plan.actions if action.kind != ActionKind.NOOP]
        if changes:
            self.console.print(
                UISection.wrap(
                    "link changes",
                    PlanTable.actions_table(changes),
                    style=UIStyle.CYAN.value,
                )
            )
        else:
            self.console.print(
                UISection.note("actions", "No actions required.", style=UIStyle.DIM.value)
            )

        conflicts = [
            self._compact(action.path)
            for action in plan.actions
            if action.kind == ActionKind.SKIP_CONFLICT
        ]
        if conflicts:
            self.console.print(
                UISection.bullets("conflicts", conflicts, style=UIStyle.RED.value)
            )

    def render_apply_result(self, result: ApplyResult) -> None:
        if result.outcomes:
            self.console.print(ApplyTable.outcomes_table(result))
        self.console.print(ApplyTable.stats_panel(result))
        failures = [
            compact_home_paths_in_text(f"{item.skill}: {item.detail}", self.home)
            for item in result.failures()
        ]
        if failures:
            self.console.print(
                UISection.bullets("failures", failures, style=UIStyle.RED.value)
            )

    def render_status(self, store_path: Path, skill_count: int, rows: list[ProviderStatusRow]) -> None:
        self.console.print(
            UISection.note(
                "central store",
                f"{self._compact(store_path)}\n{skill_count} skill(s)",
                style=UIStyle.BLUE.value,
            )
        )
        self.console.print(
            UISection.wrap(
                "providers", StatusTable.provider_table(rows), style=UIStyle.CYAN.value
            )
        )

    def render_providers(self, rows: list[ProviderToggleRow]) -> None:
        self.console.print(
            UISection.wrap(
                "providers",
                ProvidersTable.providers_table(rows),
                style=UIStyle.CYAN.value,
            )
        )

    def render_provider_configured(self, name: str, path: Path) -> None:
        self.console.print(
            UISection.note(
                "provider",
                f"Configured [bold]{name}[/bold]\n{self._compact(path)}",
                style=UIStyle.GREEN.value,
            )
        )

    def render_skills(
        self,
        store_path: Path,
        groups: dict[str, list[str]],
        link_counts: dict[str, int],
        lock_entries: dict[str, LockEntry],
        installed: set[str],
    ) -> None:
        if not groups:
            self.console.print(
                UISection.note(
                    "skills",
                    f"No skills in {self._compact(store_path)}.",
                    style=UIStyle.YELLOW.value,
                )
            )
            return
        total = sum(len(names) for names in groups.values())
        self.console.print(
            UISection.wrap(
                "skills",
                SkillsTable.grouped(groups, link_counts, lock_entries, installed),
                style=UIStyle.BLUE.value,
                subtitle=f"{total} in {self._compact(store_path)}",
            )
        )

    def render_lock(self, entries: dict[str, LockEntry]) -> None:
        if not entries:
            self.console.print(
                UISection.note("lock", "No lock entries.", style=UIStyle.YELLOW.value)
            )
            return
        self.console.print(
            UISection.wrap("lock", LockTable.entries_table(entries), style=UIStyle.BLUE.value)
        )

    def render_lock_recorded(self, name: str, entry: LockEntry) -> None:
        self.console.print(
            UISection.note(
                "lock",
                f"Recorded [bold]{name}[/bold] from {entry.source}\n"
                f"installed {entry.installed_at}, updated {entry.updated_at}",
                style=UIStyle.GREEN.value,
            )
        )

    def render_errors(self, errors: list[str]) -> None:
        self.console.print(
            UISection.bullets(
                "errors",
                [compact_home_paths_in_text(item, self.home) for item in errors],
                style=UIStyle.RED.value,
            )
        )

    def _compact(self, path: Path) -> str:
        return compact_home_path(path, self.home)
