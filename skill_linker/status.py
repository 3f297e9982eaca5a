from skill_linker.errors import ProviderDirUnavailableError
from skill_linker.links import LinkStateReader
from skill_linker.models import (
    LinkStatus,
    ProviderState,
    ProviderStatusRow,
    ProviderSyncStatus,
)
from skill_linker.providers import ProviderRegistry
from skill_linker.store import SkillStore
from skill_linker.utils import compact_home_path


class StatusService:
    def __init__(
        self,
        store: SkillStore,
        registry: ProviderRegistry,
        reader: LinkStateReader | None = None,
    ) -> None:
        self.store = store
        self.registry = registry
        self.reader = reader or LinkStateReader(store)

    def build_provider_status(
        self, enabled: list[str] | None = None
    ) -> list[ProviderStatusRow]:
        inventory = self.store.list_skills()
        enabled_set = set(enabled or [])
        return [
            self._row(state, inventory, state.name in enabled_set)
            for state in self.registry.probe_all()
        ]

    def _row(
        self, state: ProviderState, inventory: set[str], enabled: bool
    ) -> ProviderStatusRow:
        path = compact_home_path(state.path, self.registry.home)

        if state.error is not None:
            return self._empty_row(
                state, path, enabled, ProviderSyncStatus.ERROR, str(state.error)
            )
        if not state.configured:
            return self._empty_row(
                state, path, enabled, ProviderSyncStatus.UNCONFIGURED, "directory missing"
            )

        try:
            links = self.reader.read_links(state.path, inventory)
        except ProviderDirUnavailableError as exc:
            return self._empty_row(
                state, path, enabled, ProviderSyncStatus.ERROR, str(exc)
            )

        managed = {name for name, status in links.items() if status == LinkStatus.MANAGED}
        foreign = [name for name, status in links.items() if status == LinkStatus.FOREIGN]
        orphaned = managed - inventory
        missing = sorted(inventory - managed) if enabled else []

        issues: list[str] = []
        if missing:
            issues.append(f"{len(missing)} skill(s) not linked")
        if orphaned:
            issues.append(f"{len(orphaned)} link(s) to removed skills")

        return ProviderStatusRow(
            name=state.name,
            path=path,
            status=ProviderSyncStatus.DRIFT if issues else ProviderSyncStatus.SYNCED,
            enabled=enabled,
            managed=len(managed),
            foreign=len(foreign),
            missing=len(missing),
            orphaned=len(orphaned),
            detail="; ".join(issues) if issues else "in sync",
        )

    @staticmethod
    def _empty_row(
        state: ProviderState,
        path: str,
        enabled: bool,
        status: ProviderSyncStatus,
        detail: str,
    ) -> ProviderStatusRow:
        return ProviderStatusRow(
            name=state.name,
            path=path,
            status=status,
            enabled=enabled,
            managed=0,
            foreign=0,
            missing=0,
            orphaned=0,
            detail=detail,
        )
