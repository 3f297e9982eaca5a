"""Installation provenance ledger (``~/.agents/.skill-lock.json``).

Entries are keyed by skill name and carry where the skill came from plus
install/update timestamps. Fields this module does not know about (for example
``skillPath`` or ``skillFolderHash``) are kept as-is so rewriting the document
never drops them. Concurrent writers are not supported.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from jsonschema import Draft202012Validator

from skill_linker.constants import (
    AGENTS_DIRNAME,
    DEFAULT_SOURCE_TYPE,
    LOCK_FILENAME,
    LOCK_VERSION,
)
from skill_linker.errors import InvalidConfigSchemaError, InvalidJsonFormatError
from skill_linker.utils import read_json, utc_stamp, write_json


logger = logging.getLogger(__name__)


LOCK_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "version": {"type": "integer"},
        "skills": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "source": {"type": "string"},
                    "sourceType": {"type": "string"},
                    "sourceUrl": {"type": "string"},
                    "installedAt": {"type": "string"},
                    "updatedAt": {"type": "string"},
                },
            },
        },
    },
}

_ENTRY_FIELDS = ("source", "sourceType", "sourceUrl", "installedAt", "updatedAt")


def default_source_url(source: str, source_type: str) -> Optional[str]:
    if source_type == DEFAULT_SOURCE_TYPE:
        return f"https://github.com/{source}.git"
    return None


@dataclass
class LockEntry:
    source: Optional[str] = None
    source_type: Optional[str] = None
    source_url: Optional[str] = None
    installed_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "LockEntry":
        return cls(
            source=raw.get("source"),
            source_type=raw.get("sourceType"),
            source_url=raw.get("sourceUrl"),
            installed_at=raw.get("installedAt"),
            updated_at=raw.get("updatedAt"),
            extra={key: value for key, value in raw.items() if key not in _ENTRY_FIELDS},
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for key, value in (
            ("source", self.source),
            ("sourceType", self.source_type),
            ("sourceUrl", self.source_url),
        ):
            if value is not None:
                payload[key] = value
        payload.update(self.extra)
        for key, value in (
            ("installedAt", self.installed_at),
            ("updatedAt", self.updated_at),
        ):
            if value is not None:
                payload[key] = value
        return payload


@dataclass
class LockDocument:
    version: int = LOCK_VERSION
    skills: dict[str, LockEntry] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "LockDocument":
        skills = raw.get("skills") or {}
        return cls(
            version=raw.get("version", LOCK_VERSION),
            skills={name: LockEntry.from_dict(entry) for name, entry in skills.items()},
            extra={
                key: value
                for key, value in raw.items()
                if key not in ("version", "skills")
            },
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"version": self.version}
        payload["skills"] = {
            name: entry.to_dict() for name, entry in self.skills.items()
        }
        payload.update(self.extra)
        return payload


class LockLedger:
    def __init__(self, path: Path) -> None:
        self.path = path
        self._validator = Draft202012Validator(LOCK_SCHEMA)

    @classmethod
    def for_home(cls, home: Path) -> "LockLedger":
        return cls(home / AGENTS_DIRNAME / LOCK_FILENAME)

    def load(self) -> LockDocument:
        if not self.path.exists() or self.path.stat().st_size == 0:
            return LockDocument()
        try:
            payload = read_json(self.path)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidJsonFormatError(self.path, str(exc)) from exc

        error = next(iter(self._validator.iter_errors(payload)), None)
        if error is not None:
            raise InvalidConfigSchemaError(self.path, error.message)
        return LockDocument.from_dict(payload)

    def persist(self, document: LockDocument) -> None:
        write_json(self.path, document.to_dict())

    def get(self, name: str) -> Optional[LockEntry]:
        return self.load().skills.get(name)

    def record(
        self,
        name: str,
        source: str,
        source_type: str = DEFAULT_SOURCE_TYPE,
        source_url: Optional[str] = None,
        now: Optional[str] = None,
    ) -> LockEntry:
        document = self.load()
        stamp = now or utc_stamp()
        existing = document.skills.get(name)
        entry = LockEntry(
            source=source,
            source_type=source_type,
            source_url=source_url or default_source_url(source, source_type),
            installed_at=stamp,
            updated_at=stamp,
        )
        if existing is not None:
            entry.installed_at = existing.installed_at or stamp
            entry.extra = dict(existing.extra)
        document.skills[name] = entry
        self.persist(document)
        logger.info("recorded %s from %s in %s", name, source, self.path)
        return entry
