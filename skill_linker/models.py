from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class LinkStatus(str, Enum):
    ABSENT = "absent"
    MANAGED = "managed"
    FOREIGN = "foreign"


class ActionKind(str, Enum):
    CREATE_LINK = "create_link"
    REMOVE_LINK = "remove_link"
    SKIP_CONFLICT = "skip_conflict"
    SKIP_MISSING = "skip_missing"
    NOOP = "noop"


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


class ProviderSyncStatus(str, Enum):
    SYNCED = "synced"
    DRIFT = "drift"
    UNCONFIGURED = "unconfigured"
    ERROR = "error"


class ProviderToggleStatus(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


Selection = dict[str, bool]


@dataclass(frozen=True)
class LinkAction:
    skill: str
    kind: ActionKind
    current: LinkStatus
    path: Path
    source: Path
    detail: str

    @property
    def mutates(self) -> bool:
        return self.kind in (ActionKind.CREATE_LINK, ActionKind.REMOVE_LINK)


@dataclass(frozen=True)
class LinkPlan:
    provider: str
    provider_dir: Path
    store_dir: Path
    actions: tuple[LinkAction, ...]

    def summary(self) -> dict[str, int]:
        counts = {kind.value: 0 for kind in ActionKind}
        for action in self.actions:
            counts[action.kind.value] += 1
        counts["actions"] = len(self.actions)
        return counts

    def changes(self) -> list[LinkAction]:
        return [action for action in self.actions if action.mutates]

    def is_noop(self) -> bool:
        return all(action.kind == ActionKind.NOOP for action in self.actions)

    def action_for(self, skill: str) -> Optional[LinkAction]:
        for action in self.actions:
            if action.skill == skill:
                return action
        return None


@dataclass(frozen=True)
class ItemOutcome:
    action: LinkAction
    status: OutcomeStatus
    changed: bool
    detail: str
    error: Optional[Exception] = None

    @property
    def skill(self) -> str:
        return self.action.skill

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCEEDED


@dataclass
class ApplyResult:
    provider: str
    outcomes: list[ItemOutcome] = field(default_factory=list)

    @property
    def applied(self) -> int:
        return sum(1 for item in self.outcomes if item.changed)

    @property
    def failed(self) -> int:
        return sum(1 for item in self.outcomes if item.status == OutcomeStatus.FAILED)

    @property
    def skipped(self) -> int:
        return sum(1 for item in self.outcomes if item.status == OutcomeStatus.SKIPPED)

    def failures(self) -> list[ItemOutcome]:
        return [item for item in self.outcomes if item.status == OutcomeStatus.FAILED]

    def outcome_for(self, skill: str) -> Optional[ItemOutcome]:
        for item in self.outcomes:
            if item.skill == skill:
                return item
        return None

    def counts(self) -> dict[str, int]:
        counter = Counter(item.status.value for item in self.outcomes)
        return {status.value: counter.get(status.value, 0) for status in OutcomeStatus}


@dataclass(frozen=True)
class ProviderState:
    name: str
    label: str
    path: Path
    configured: bool
    link_count: int
    error: Optional[Exception] = None


@dataclass(frozen=True)
class ProviderStatusRow:
    name: str
    path: str
    status: ProviderSyncStatus
    enabled: bool
    managed: int
    foreign: int
    missing: int
    orphaned: int
    detail: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "status": self.status.value,
            "enabled": self.enabled,
            "managed": self.managed,
            "foreign": self.foreign,
            "missing": self.missing,
            "orphaned": self.orphaned,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class ProviderToggleRow:
    name: str
    status: ProviderToggleStatus
    path: str
    detail: str
