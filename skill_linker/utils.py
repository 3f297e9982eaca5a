import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from skill_linker.constants import PLATFORM_ARTIFACTS


def utc_stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def read_json_safe(path: Path) -> tuple[Any | None, str | None]:
    if not path.exists():
        return None, None
    if path.stat().st_size == 0:
        return None, None
    try:
        return read_json(path), None
    except Exception as exc:
        return None, str(exc)


def dump_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, sort_keys=False) + "\n"


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        handle.write(dump_json(payload))


def is_platform_artifact(name: str) -> bool:
    return name in PLATFORM_ARTIFACTS


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def compact_home_path(path: str | Path, home: Path | None = None) -> str:
    text = str(path)
    home_text = str(home if home is not None else Path.home())
    if text == home_text:
        return "~"
    home_prefix = f"{home_text}/"
    if text.startswith(home_prefix):
        return f"~/{text[len(home_prefix):]}"
    return text


def compact_home_paths_in_text(text: str, home: Path | None = None) -> str:
    home_text = str(home if home is not None else Path.home())
    if text == home_text:
        return "~"
    return text.replace(f"{home_text}/", "~/")
