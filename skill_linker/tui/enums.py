from enum import Enum

from skill_linker.models import ActionKind, OutcomeStatus, ProviderSyncStatus


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


ACTION_KIND_STYLE = {
    ActionKind.CREATE_LINK: UIStyle.GREEN.value,
    ActionKind.REMOVE_LINK: UIStyle.MAGENTA.value,
    ActionKind.SKIP_CONFLICT: UIStyle.RED.value,
    ActionKind.SKIP_MISSING: UIStyle.YELLOW.value,
    ActionKind.NOOP: UIStyle.DIM.value,
}

OUTCOME_STYLE = {
    OutcomeStatus.SUCCEEDED: UIStyle.GREEN.value,
    OutcomeStatus.SKIPPED: UIStyle.YELLOW.value,
    OutcomeStatus.FAILED: UIStyle.RED.value,
}

PROVIDER_STATUS_STYLE = {
    ProviderSyncStatus.SYNCED: UIStyle.GREEN.value,
    ProviderSyncStatus.DRIFT: UIStyle.YELLOW.value,
    ProviderSyncStatus.UNCONFIGURED: UIStyle.DIM.value,
    ProviderSyncStatus.ERROR: UIStyle.RED.value,
}
