import errno
import logging
import os
from typing import Optional, Protocol

from skill_linker.errors import (
    LinkConflictError,
    LinkOperationFailedError,
    SkillLinkerError,
)
from skill_linker.links import LinkStateReader
from skill_linker.models import (
    ActionKind,
    ApplyResult,
    ItemOutcome,
    LinkAction,
    LinkPlan,
    LinkStatus,
    OutcomeStatus,
)


logger = logging.getLogger(__name__)


def _succeeded(action: LinkAction, detail: str, changed: bool = False) -> ItemOutcome:
    return ItemOutcome(action, OutcomeStatus.SUCCEEDED, changed, detail)


def _skipped(
    action: LinkAction, detail: str, error: Optional[Exception] = None
) -> ItemOutcome:
    return ItemOutcome(action, OutcomeStatus.SKIPPED, False, detail, error)


class ActionHandler(Protocol):
    def handle(self, action: LinkAction, plan: LinkPlan) -> ItemOutcome: ...


class CreateLinkHandler:
    def __init__(self, reader: LinkStateReader) -> None:
        self.reader = reader

    def handle(self, action: LinkAction, plan: LinkPlan) -> ItemOutcome:
        # Re-check right before mutating; the plan may be stale.
        status = self.reader.classify_path(plan.provider_dir, action.skill)
        if status == LinkStatus.MANAGED:
            return _succeeded(action, "already linked")
        if status == LinkStatus.FOREIGN:
            return _skipped(
                action,
                "foreign entry appeared since planning",
                LinkConflictError(action.path),
            )
        if not action.source.is_dir():
            raise LinkOperationFailedError(
                action.source,
                "create symlink",
                FileNotFoundError(errno.ENOENT, "skill missing from central store"),
            )

        try:
            plan.provider_dir.mkdir(parents=True, exist_ok=True)
            # Point at <store>/<name> itself; the entry may be a symlink too.
            relative = os.path.relpath(
                os.path.join(self.reader.store_dir(), action.skill),
                os.path.realpath(plan.provider_dir),
            )
            os.symlink(relative, action.path)
        except OSError as exc:
            raise LinkOperationFailedError(action.path, "create symlink", exc) from exc
        logger.info("linked %s -> %s", action.path, relative)
        return _succeeded(action, f"linked -> {relative}", changed=True)


class RemoveLinkHandler:
    def __init__(self, reader: LinkStateReader) -> None:
        self.reader = reader

    def handle(self, action: LinkAction, plan: LinkPlan) -> ItemOutcome:
        status = self.reader.classify_path(plan.provider_dir, action.skill)
        if status == LinkStatus.ABSENT:
            return _succeeded(action, "already absent")
        if status == LinkStatus.FOREIGN:
            return _skipped(
                action,
                "not a managed link, left untouched",
                LinkConflictError(action.path),
            )

        try:
            action.path.unlink()
        except OSError as exc:
            raise LinkOperationFailedError(action.path, "remove symlink", exc) from exc
        logger.info("unlinked %s", action.path)
        return _succeeded(action, "unlinked", changed=True)


class SkipConflictHandler:
    def handle(self, action: LinkAction, plan: LinkPlan) -> ItemOutcome:
        return _skipped(
            action, "conflict (not overwritten)", LinkConflictError(action.path)
        )


class SkipMissingHandler:
    def handle(self, action: LinkAction, plan: LinkPlan) -> ItemOutcome:
        return _skipped(action, "skill not in central store")


class NoopHandler:
    def handle(self, action: LinkAction, plan: LinkPlan) -> ItemOutcome:
        return _succeeded(action, action.detail)


class LinkExecutor:
    """Runs a plan item by item; one failing item never stops the rest."""

    def __init__(self, reader: LinkStateReader) -> None:
        self.reader = reader
        self.handlers: dict[ActionKind, ActionHandler] = {
            ActionKind.CREATE_LINK: CreateLinkHandler(reader),
            ActionKind.REMOVE_LINK: RemoveLinkHandler(reader),
            ActionKind.SKIP_CONFLICT: SkipConflictHandler(),
            ActionKind.SKIP_MISSING: SkipMissingHandler(),
            ActionKind.NOOP: NoopHandler(),
        }

    def execute(self, plan: LinkPlan) -> ApplyResult:
        result = ApplyResult(provider=plan.provider)
        for action in plan.actions:
            result.outcomes.append(self._run(action, plan))

        if result.failed:
            logger.warning(
                "%d of %d items failed for %s",
                result.failed,
                len(result.outcomes),
                plan.provider,
            )
        return result

    def _run(self, action: LinkAction, plan: LinkPlan) -> ItemOutcome:
        handler = self.handlers.get(action.kind)
        if handler is None:
            return ItemOutcome(
                action,
                OutcomeStatus.FAILED,
                False,
                f"Unknown action kind: {action.kind.value}",
            )
        try:
            return handler.handle(action, plan)
        except (SkillLinkerError, OSError) as exc:
            logger.warning("%s failed for %s: %s", action.kind.value, action.path, exc)
            return ItemOutcome(action, OutcomeStatus.FAILED, False, str(exc), exc)
