import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from skill_linker.errors import ProviderDirUnavailableError
from skill_linker.models import LinkStatus
from skill_linker.store import SkillStore
from skill_linker.utils import is_platform_artifact


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntrySnapshot:
    """One provider directory entry as seen at read time.

    ``link_target`` is the raw link text joined onto the provider directory and
    normalized; ``resolved_target`` is the fully resolved real path. Both are
    ``None`` for anything that is not a symlink.
    """

    name: str
    is_symlink: bool
    link_target: Optional[str] = None
    resolved_target: Optional[str] = None


def classify_entry(entry: EntrySnapshot, store_dir: Path) -> LinkStatus:
    if not entry.is_symlink:
        return LinkStatus.FOREIGN
    expected = os.path.normpath(str(store_dir / entry.name))
    if expected in (entry.link_target, entry.resolved_target):
        return LinkStatus.MANAGED
    return LinkStatus.FOREIGN


def classify_snapshot(
    entries: Iterable[EntrySnapshot],
    store_dir: Path,
    inventory: Iterable[str] = (),
) -> dict[str, LinkStatus]:
    state = {name: LinkStatus.ABSENT for name in inventory}
    for entry in entries:
        state[entry.name] = classify_entry(entry, store_dir)
    return state


def snapshot_entry(path: Path, provider_real: str) -> EntrySnapshot:
    if not path.is_symlink():
        return EntrySnapshot(name=path.name, is_symlink=False)
    raw = os.readlink(path)
    return EntrySnapshot(
        name=path.name,
        is_symlink=True,
        link_target=os.path.normpath(os.path.join(provider_real, raw)),
        resolved_target=os.path.realpath(path),
    )


class LinkStateReader:
    def __init__(self, store: SkillStore) -> None:
        self.store = store

    def store_dir(self) -> Path:
        return Path(os.path.realpath(self.store.root))

    def snapshot(self, provider_dir: Path) -> list[EntrySnapshot]:
        try:
            children = sorted(provider_dir.iterdir(), key=lambda item: item.name)
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise ProviderDirUnavailableError(
                provider_dir, exc.strerror or str(exc)
            ) from exc

        provider_real = os.path.realpath(provider_dir)
        entries: list[EntrySnapshot] = []
        for child in children:
            if is_platform_artifact(child.name):
                continue
            try:
                entries.append(snapshot_entry(child, provider_real))
            except FileNotFoundError:
                # Removed between listing and readlink.
                continue
        return entries

    def read_links(
        self, provider_dir: Path, inventory: Optional[Iterable[str]] = None
    ) -> dict[str, LinkStatus]:
        if inventory is None:
            inventory = self.store.list_skills()
        state = classify_snapshot(
            self.snapshot(provider_dir), self.store_dir(), inventory
        )
        logger.debug(
            "read %d entries for %s (%d managed)",
            len(state),
            provider_dir,
            sum(1 for status in state.values() if status == LinkStatus.MANAGED),
        )
        return state

    def classify_path(self, provider_dir: Path, name: str) -> LinkStatus:
        path = provider_dir / name
        if not os.path.lexists(path):
            return LinkStatus.ABSENT
        try:
            entry = snapshot_entry(path, os.path.realpath(provider_dir))
        except FileNotFoundError:
            return LinkStatus.ABSENT
        return classify_entry(entry, self.store_dir())
