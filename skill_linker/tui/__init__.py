from skill_linker.tui.renderers import SkillConsoleUI

__all__ = ["SkillConsoleUI"]
