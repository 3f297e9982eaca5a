import json
from pathlib import Path

import pytest

from skill_linker.errors import InvalidConfigSchemaError, InvalidJsonFormatError
from skill_linker.lock import LockDocument, LockEntry, LockLedger, default_source_url


@pytest.fixture
def ledger(home: Path) -> LockLedger:
    return LockLedger.for_home(home)


def test_ledger_path_sits_next_to_store(ledger: LockLedger, home: Path) -> None:
    assert ledger.path == home / ".agents" / ".skill-lock.json"


def test_load_missing_file_returns_empty_document(ledger: LockLedger) -> None:
    document = ledger.load()

    assert document.version == 3
    assert document.skills == {}


def test_load_empty_file_returns_empty_document(ledger: LockLedger) -> None:
    ledger.path.parent.mkdir(parents=True)
    ledger.path.write_text("", encoding="utf-8")

    assert ledger.load().skills == {}


def test_load_invalid_json_raises(ledger: LockLedger) -> None:
    ledger.path.parent.mkdir(parents=True)
    ledger.path.write_text("{not json", encoding="utf-8")

    with pytest.raises(InvalidJsonFormatError):
        ledger.load()


def test_load_wrong_shape_raises(ledger: LockLedger, write_json) -> None:
    write_json(ledger.path, {"version": "three", "skills": {}})

    with pytest.raises(InvalidConfigSchemaError):
        ledger.load()


def test_record_new_entry(ledger: LockLedger) -> None:
    entry = ledger.record(
        "react-best-practices",
        "vercel-labs/agent-skills",
        now="2025-01-02T03:04:05Z",
    )

    assert entry.source_url == "https://github.com/vercel-labs/agent-skills.git"
    assert entry.installed_at == entry.updated_at == "2025-01-02T03:04:05Z"
    payload = json.loads(ledger.path.read_text(encoding="utf-8"))
    assert payload == {
        "version": 3,
        "skills": {
            "react-best-practices": {
                "source": "vercel-labs/agent-skills",
                "sourceType": "github",
                "sourceUrl": "https://github.com/vercel-labs/agent-skills.git",
                "installedAt": "2025-01-02T03:04:05Z",
                "updatedAt": "2025-01-02T03:04:05Z",
            }
        },
    }


def test_record_again_keeps_installed_at_and_unknown_fields(
    ledger: LockLedger, write_json
) -> None:
    write_json(
        ledger.path,
        {
            "version": 3,
            "skills": {
                "auth-jwt": {
                    "source": "acme/skills",
                    "sourceType": "github",
                    "sourceUrl": "https://github.com/acme/skills.git",
                    "skillPath": "skills/auth-jwt/SKILL.md",
                    "skillFolderHash": "abc123",
                    "installedAt": "2024-06-01T00:00:00Z",
                    "updatedAt": "2024-06-01T00:00:00Z",
                }
            },
        },
    )

    ledger.record("auth-jwt", "acme/skills-v2", now="2025-03-01T12:00:00Z")

    entry = ledger.get("auth-jwt")
    assert entry is not None
    assert entry.source == "acme/skills-v2"
    assert entry.installed_at == "2024-06-01T00:00:00Z"
    assert entry.updated_at == "2025-03-01T12:00:00Z"
    assert entry.extra == {
        "skillPath": "skills/auth-jwt/SKILL.md",
        "skillFolderHash": "abc123",
    }


def test_round_trip_is_byte_stable(ledger: LockLedger) -> None:
    ledger.record("vue-testing", "acme/skills", now="2025-01-01T00:00:00Z")
    ledger.record(
        "local-notes",
        "/srv/skills/local-notes",
        source_type="local",
        now="2025-01-01T00:00:00Z",
    )
    before = ledger.path.read_bytes()

    ledger.persist(ledger.load())

    assert ledger.path.read_bytes() == before


def test_unknown_top_level_fields_survive(ledger: LockLedger, write_json) -> None:
    write_json(ledger.path, {"version": 3, "skills": {}, "lastSelectedAgents": ["claude"]})

    ledger.record("auth-jwt", "acme/skills", now="2025-01-01T00:00:00Z")

    payload = json.loads(ledger.path.read_text(encoding="utf-8"))
    assert payload["lastSelectedAgents"] == ["claude"]


def test_non_github_source_has_no_default_url() -> None:
    assert default_source_url("/tmp/skill", "local") is None
    assert LockEntry(source="x", source_type="local").to_dict() == {
        "source": "x",
        "sourceType": "local",
    }


def test_document_from_dict_defaults_version() -> None:
    document = LockDocument.from_dict({"skills": {"a-b": {"source": "s"}}})

    assert document.version == 3
    assert document.skills["a-b"].source == "s"


def test_load_non_utf8_file_raises(ledger: LockLedger) -> None:
    ledger.path.parent.mkdir(parents=True)
    ledger.path.write_bytes(b"\xff\xfe{\x00")

    with pytest.raises(InvalidJsonFormatError):
        ledger.load()
