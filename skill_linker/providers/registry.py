import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from skill_linker.errors import ProviderDirUnavailableError
from skill_linker.models import ProviderState
from skill_linker.providers.catalog import (
    PROVIDER_CATALOG,
    ProviderMetadata,
    provider_metadata,
)
from skill_linker.utils import is_platform_artifact


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderDefinition:
    name: str
    label: str
    path: Path


class ProviderRegistry:
    """Closed set of providers with paths resolved against an injected home.

    ``overrides`` maps provider names to replacement directories (from the user
    config). Paths are recomputed on every call.
    """

    def __init__(
        self, home: Path, overrides: Optional[dict[str, Path]] = None
    ) -> None:
        self.home = home
        self.overrides = dict(overrides or {})

    def definitions(self) -> list[ProviderDefinition]:
        return [self._definition(metadata) for metadata in PROVIDER_CATALOG.values()]

    def get(self, name: str) -> ProviderDefinition:
        return self._definition(provider_metadata(name))

    def path_for(self, name: str) -> Path:
        return self.get(name).path

    def probe(self, name: str) -> ProviderState:
        definition = self.get(name)
        path = definition.path
        if not path.is_dir():
            return ProviderState(
                name=definition.name,
                label=definition.label,
                path=path,
                configured=False,
                link_count=0,
            )

        try:
            link_count = sum(
                1 for child in path.iterdir() if not is_platform_artifact(child.name)
            )
        except OSError as exc:
            error = ProviderDirUnavailableError(path, exc.strerror or str(exc))
            logger.warning("%s", error)
            return ProviderState(
                name=definition.name,
                label=definition.label,
                path=path,
                configured=False,
                link_count=0,
                error=error,
            )

        return ProviderState(
            name=definition.name,
            label=definition.label,
            path=path,
            configured=True,
            link_count=link_count,
        )

    def probe_all(self) -> list[ProviderState]:
        return [self.probe(definition.name) for definition in self.definitions()]

    def configured(self) -> list[ProviderState]:
        return [state for state in self.probe_all() if state.configured]

    def configure(self, name: str) -> Path:
        path = self.path_for(name)
        path.mkdir(parents=True, exist_ok=True)
        logger.info("configured provider %s at %s", name, path)
        return path

    def _definition(self, metadata: ProviderMetadata) -> ProviderDefinition:
        name = metadata.provider_id.value
        path = self.overrides.get(name) or metadata.default_path(self.home)
        return ProviderDefinition(name=name, label=metadata.label, path=path)
