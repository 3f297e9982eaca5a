import sys
import json
from pathlib import Path
from typing import Any, Callable

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("SKILL_LINKER_HOME", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def store_root(home: Path) -> Path:
    return home / ".agents" / "skills"


@pytest.fixture
def claude_dir(home: Path) -> Path:
    return home / ".claude" / "skills"


@pytest.fixture
def write_json():
    def _write(path: Path, payload: dict) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")

    return _write


@pytest.fixture
def make_skill(store_root: Path) -> Callable[..., Path]:
    def _make(name: str, content: str = "skill") -> Path:
        skill_dir = store_root / name
        skill_dir.mkdir(parents=True, exist_ok=True)
        (skill_dir / "SKILL.md").write_text(content, encoding="utf-8")
        return skill_dir

    return _make


@pytest.fixture
def store(store_root: Path):
    from skill_linker.store import SkillStore

    return SkillStore(store_root)


@pytest.fixture
def registry(home: Path):
    from skill_linker.providers import ProviderRegistry

    return ProviderRegistry(home)


@pytest.fixture
def reconciler(store, registry):
    from skill_linker.reconciler import LinkReconciler

    return LinkReconciler(store=store, registry=registry)


@pytest.fixture
def link_managed(store_root: Path):
    """Create a relative managed symlink the way the executor does."""
    import os

    def _link(provider_dir: Path, name: str) -> Path:
        provider_dir.mkdir(parents=True, exist_ok=True)
        target = provider_dir / name
        os.symlink(os.path.relpath(store_root / name, provider_dir), target)
        return target

    return _link


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("SKILL_LINKER_HOME", str(tmp_path))
            env.setdefault("COLUMNS", "200")
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
