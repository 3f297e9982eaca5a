from pathlib import Path


class SkillLinkerError(Exception):
    """Base user-facing application error."""


class SkillFileError(SkillLinkerError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class StoreUnavailableError(SkillFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Central skill store unreadable ({detail})")


class ProviderDirUnavailableError(SkillFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Provider directory unreadable ({detail})")


class LinkConflictError(SkillFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Foreign entry blocks link (not overwritten)")


class LinkOperationFailedError(SkillFileError):
    def __init__(self, path: Path, operation: str, cause: OSError) -> None:
        self.operation = operation
        self.cause = cause
        detail = cause.strerror or str(cause)
        super().__init__(path=path, message=f"{operation} failed ({detail})")


class InvalidJsonFormatError(SkillFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidConfigSchemaError(SkillFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")


class UnknownProviderError(SkillLinkerError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown provider: {name}")
