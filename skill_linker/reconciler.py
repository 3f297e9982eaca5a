import logging
from typing import Mapping, Optional

from skill_linker.errors import ProviderDirUnavailableError
from skill_linker.executor import LinkExecutor
from skill_linker.links import LinkStateReader
from skill_linker.models import ApplyResult, LinkPlan, LinkStatus
from skill_linker.planner import plan_links
from skill_linker.providers import ProviderRegistry
from skill_linker.store import SkillStore


logger = logging.getLogger(__name__)


class LinkReconciler:
    """Brings a provider directory in line with a selection.

    Each call re-reads the store and the provider directory; nothing is cached
    between passes. ``StoreUnavailableError`` from the store aborts the pass.
    """

    def __init__(
        self,
        store: SkillStore,
        registry: ProviderRegistry,
        reader: Optional[LinkStateReader] = None,
        executor: Optional[LinkExecutor] = None,
    ) -> None:
        self.store = store
        self.registry = registry
        self.reader = reader or LinkStateReader(store)
        self.executor = executor or LinkExecutor(self.reader)

    def current_state(
        self, provider: str, inventory: Optional[set[str]] = None
    ) -> dict[str, LinkStatus]:
        if inventory is None:
            inventory = self.store.list_skills()
        provider_dir = self.registry.path_for(provider)
        try:
            return self.reader.read_links(provider_dir, inventory)
        except ProviderDirUnavailableError as exc:
            logger.warning("%s; treating %s as empty", exc, provider)
            return {name: LinkStatus.ABSENT for name in inventory}

    def preview(self, provider: str, selection: Mapping[str, bool]) -> LinkPlan:
        inventory = self.store.list_skills()
        current = self.current_state(provider, inventory)
        return plan_links(
            provider=self.registry.get(provider).name,
            provider_dir=self.registry.path_for(provider),
            store_dir=self.store.root,
            current=current,
            selection=selection,
            inventory=inventory,
        )

    def apply(self, plan: LinkPlan) -> ApplyResult:
        return self.executor.execute(plan)

    def reconcile(
        self, provider: str, selection: Mapping[str, bool]
    ) -> tuple[LinkPlan, ApplyResult]:
        plan = self.preview(provider, selection)
        return plan, self.apply(plan)

    def full_selection(self) -> dict[str, bool]:
        return {name: True for name in self.store.list_skills()}

    def sync(self, provider: str) -> tuple[LinkPlan, ApplyResult]:
        return self.reconcile(provider, self.full_selection())
