from typing import Final


APP_NAME: Final[str] = "skill-linker"

SKILL_FILENAME: Final[str] = "SKILL.md"

AGENTS_DIRNAME: Final[str] = ".agents"
STORE_DIRNAME: Final[str] = "skills"
LOCK_FILENAME: Final[str] = ".skill-lock.json"
PROVIDER_SKILLS_DIRNAME: Final[str] = "skills"

CONFIG_FILENAME: Final[str] = "config.json"

LOCK_VERSION: Final[int] = 3
DEFAULT_SOURCE_TYPE: Final[str] = "github"

GROUP_SEPARATOR: Final[str] = "-"
UNGROUPED: Final[str] = "_other"

PLATFORM_ARTIFACTS: Final[frozenset[str]] = frozenset(
    {
        ".DS_Store",
        "Thumbs.db",
        "desktop.ini",
    }
)

HOME_ENV_VAR: Final[str] = "SKILL_LINKER_HOME"
