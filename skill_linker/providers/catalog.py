from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from skill_linker.constants import PROVIDER_SKILLS_DIRNAME
from skill_linker.errors import UnknownProviderError


class ProviderId(str, Enum):
    CLAUDE = "claude"
    CODEX = "codex"
    COPILOT = "copilot"
    CURSOR = "cursor"
    GEMINI = "gemini"
    KIRO = "kiro"
    OPENCODE = "opencode"
    QODER = "qoder"
    WINDSURF = "windsurf"


@dataclass(frozen=True)
class ProviderMetadata:
    provider_id: ProviderId
    label: str
    home_dir_name: str
    enabled_by_default: bool

    def default_path(self, home: Path) -> Path:
        return home / self.home_dir_name / PROVIDER_SKILLS_DIRNAME


PROVIDER_CATALOG: dict[ProviderId, ProviderMetadata] = {
    ProviderId.CLAUDE: ProviderMetadata(
        provider_id=ProviderId.CLAUDE,
        label="Claude",
        home_dir_name=".claude",
        enabled_by_default=True,
    ),
    ProviderId.CODEX: ProviderMetadata(
        provider_id=ProviderId.CODEX,
        label="Codex",
        home_dir_name=".codex",
        enabled_by_default=False,
    ),
    ProviderId.COPILOT: ProviderMetadata(
        provider_id=ProviderId.COPILOT,
        label="GitHub Copilot",
        home_dir_name=".copilot",
        enabled_by_default=False,
    ),
    ProviderId.CURSOR: ProviderMetadata(
        provider_id=ProviderId.CURSOR,
        label="Cursor",
        home_dir_name=".cursor",
        enabled_by_default=True,
    ),
    ProviderId.GEMINI: ProviderMetadata(
        provider_id=ProviderId.GEMINI,
        label="Gemini CLI",
        home_dir_name=".gemini",
        enabled_by_default=False,
    ),
    ProviderId.KIRO: ProviderMetadata(
        provider_id=ProviderId.KIRO,
        label="Kiro",
        home_dir_name=".kiro",
        enabled_by_default=False,
    ),
    ProviderId.OPENCODE: ProviderMetadata(
        provider_id=ProviderId.OPENCODE,
        label="OpenCode",
        home_dir_name=".opencode",
        enabled_by_default=False,
    ),
    ProviderId.QODER: ProviderMetadata(
        provider_id=ProviderId.QODER,
        label="Qoder",
        home_dir_name=".qoder",
        enabled_by_default=True,
    ),
    ProviderId.WINDSURF: ProviderMetadata(
        provider_id=ProviderId.WINDSURF,
        label="Windsurf",
        home_dir_name=".windsurf",
        enabled_by_default=False,
    ),
}


def provider_metadata(provider: ProviderId | str) -> ProviderMetadata:
    if isinstance(provider, ProviderId):
        return PROVIDER_CATALOG[provider]
    try:
        provider_id = ProviderId(provider.lower())
    except ValueError:
        raise UnknownProviderError(provider) from None
    return PROVIDER_CATALOG[provider_id]


def provider_label(provider: ProviderId | str) -> str:
    return provider_metadata(provider).label


def provider_names() -> list[str]:
    return [provider_id.value for provider_id in PROVIDER_CATALOG]
