import logging
from pathlib import Path

from skill_linker.constants import (
    AGENTS_DIRNAME,
    SKILL_FILENAME,
    STORE_DIRNAME,
)
from skill_linker.errors import StoreUnavailableError
from skill_linker.utils import is_hidden, is_platform_artifact


logger = logging.getLogger(__name__)


class SkillStore:
    """Central skill store: one subdirectory per skill under ``~/.agents/skills``."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @classmethod
    def for_home(cls, home: Path) -> "SkillStore":
        return cls(home / AGENTS_DIRNAME / STORE_DIRNAME)

    @property
    def root(self) -> Path:
        return self._root

    def list_skills(self) -> set[str]:
        try:
            entries = list(self._root.iterdir())
        except FileNotFoundError:
            logger.debug("skill store %s does not exist yet", self._root)
            return set()
        except OSError as exc:
            raise StoreUnavailableError(self._root, exc.strerror or str(exc)) from exc

        names: set[str] = set()
        for entry in entries:
            if is_platform_artifact(entry.name) or is_hidden(entry.name):
                continue
            if entry.is_dir():
                names.add(entry.name)
        logger.debug("found %d skills in %s", len(names), self._root)
        return names

    def skill_path(self, name: str) -> Path:
        return self._root / name

    def is_installed(self, name: str) -> bool:
        return (self.skill_path(name) / SKILL_FILENAME).is_file()
