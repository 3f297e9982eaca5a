from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from skill_linker.constants import APP_NAME, CONFIG_FILENAME
from skill_linker.errors import InvalidConfigSchemaError, InvalidJsonFormatError
from skill_linker.models import ProviderToggleRow, ProviderToggleStatus
from skill_linker.providers import (
    PROVIDER_CATALOG,
    ProviderRegistry,
    provider_metadata,
    provider_names,
)
from skill_linker.utils import compact_home_path, read_json_safe, write_json


CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "providers": {
            "type": "object",
            "propertyNames": {"enum": provider_names()},
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "enabled": {"type": "boolean"},
                    "path": {"type": "string", "minLength": 1},
                },
                "additionalProperties": False,
            },
        },
    },
}


class SettingsService:
    """User settings: which providers take part in ``sync`` and path overrides."""

    def __init__(self, home: Path) -> None:
        self.home = home
        self._validator = Draft202012Validator(CONFIG_SCHEMA)

    @property
    def config_path(self) -> Path:
        return self.home / ".config" / APP_NAME / CONFIG_FILENAME

    def load(self) -> dict[str, Any]:
        payload, error = read_json_safe(self.config_path)
        if error is not None:
            raise InvalidJsonFormatError(self.config_path, error)
        if payload is None:
            return {"providers": {}}
        schema_error = next(iter(self._validator.iter_errors(payload)), None)
        if schema_error is not None:
            raise InvalidConfigSchemaError(self.config_path, schema_error.message)
        payload.setdefault("providers", {})
        return payload

    def save(self, payload: dict[str, Any]) -> None:
        write_json(self.config_path, payload)

    def provider_settings(self, name: str) -> dict[str, Any]:
        name = provider_metadata(name).provider_id.value
        return dict(self.load()["providers"].get(name, {}))

    def is_enabled(self, name: str) -> bool:
        value = self.provider_settings(name).get("enabled")
        if isinstance(value, bool):
            return value
        return provider_metadata(name).enabled_by_default

    def set_enabled(self, name: str, enabled: bool) -> None:
        self._update_provider(name, {"enabled": enabled})

    def enable(self, name: str) -> None:
        self.set_enabled(name, True)

    def disable(self, name: str) -> None:
        self.set_enabled(name, False)

    def set_path(self, name: str, path: Path) -> None:
        self._update_provider(name, {"path": str(path.expanduser())})

    def overrides(self) -> dict[str, Path]:
        providers = self.load()["providers"]
        return {
            name: Path(item["path"]).expanduser()
            for name, item in providers.items()
            if "path" in item
        }

    def registry(self) -> ProviderRegistry:
        return ProviderRegistry(self.home, overrides=self.overrides())

    def enabled_providers(self) -> list[str]:
        return [name for name in provider_names() if self.is_enabled(name)]

    def list_status_rows(self) -> list[ProviderToggleRow]:
        registry = self.registry()
        overrides = self.overrides()
        rows: list[ProviderToggleRow] = []
        for provider_id in PROVIDER_CATALOG:
            name = provider_id.value
            enabled = self.is_enabled(name)
            explicit = "enabled" in self.provider_settings(name)
            detail = "set by user" if explicit else "default"
            if name in overrides:
                detail += ", custom path"
            rows.append(
                ProviderToggleRow(
                    name=name,
                    status=ProviderToggleStatus.ENABLED
                    if enabled
                    else ProviderToggleStatus.DISABLED,
                    path=compact_home_path(registry.path_for(name), self.home),
                    detail=detail,
                )
            )
        return rows

    def _update_provider(self, name: str, values: dict[str, Any]) -> None:
        name = provider_metadata(name).provider_id.value
        payload = self.load()
        current = dict(payload["providers"].get(name, {}))
        current.update(values)
        payload["providers"][name] = current
        self.save(payload)
