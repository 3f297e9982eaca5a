import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from skill_linker import __version__
from skill_linker.constants import APP_NAME, HOME_ENV_VAR
from skill_linker.errors import SkillLinkerError
from skill_linker.groups import group_members
from skill_linker.lock import LockLedger
from skill_linker.models import ApplyResult, LinkStatus, Selection
from skill_linker.providers import ProviderRegistry, provider_names
from skill_linker.reconciler import LinkReconciler
from skill_linker.settings import SettingsService
from skill_linker.status import StatusService
from skill_linker.store import SkillStore
from skill_linker.tui import SkillConsoleUI


PROVIDER_VALUES = provider_names()


@dataclass
class AppContext:
    home: Path
    settings: SettingsService
    registry: ProviderRegistry
    store: SkillStore
    ledger: LockLedger
    reconciler: LinkReconciler
    ui: SkillConsoleUI


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("skill_linker")
    if not verbose:
        package_logger.setLevel(logging.WARNING)
        return
    if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        package_logger.addHandler(
            RichHandler(
                console=Console(stderr=True), show_time=False, show_path=False
            )
        )
    package_logger.setLevel(logging.DEBUG)


def _provider_argument(required: bool = True) -> Callable:
    return click.argument(
        "provider",
        required=required,
        type=click.Choice(PROVIDER_VALUES, case_sensitive=False),
    )


def _selection_options(func: Callable) -> Callable:
    options = [
        click.option(
            "--link",
            "-l",
            "link",
            multiple=True,
            metavar="SKILL",
            help="Skill to link (repeatable).",
        ),
        click.option(
            "--unlink",
            "-u",
            "unlink",
            multiple=True,
            metavar="SKILL",
            help="Skill to unlink (repeatable).",
        ),
        click.option(
            "--all", "select_all", is_flag=True, help="Link every skill in the store."
        ),
        click.option(
            "--none",
            "select_none",
            is_flag=True,
            help="Unlink every managed skill.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _context(obj: Dict[str, Any]) -> AppContext:
    home: Path = obj["home"]
    settings = SettingsService(home)
    try:
        registry = settings.registry()
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))
    store = SkillStore.for_home(home)
    return AppContext(
        home=home,
        settings=settings,
        registry=registry,
        store=store,
        ledger=LockLedger.for_home(home),
        reconciler=LinkReconciler(store=store, registry=registry),
        ui=SkillConsoleUI(Console(), home=home),
    )


def _build_selection(
    ctx: AppContext,
    provider: str,
    link: tuple[str, ...],
    unlink: tuple[str, ...],
    select_all: bool,
    select_none: bool,
) -> Selection:
    if select_all and select_none:
        raise click.UsageError("--all and --none are mutually exclusive.")
    if not (link or unlink or select_all or select_none):
        raise click.UsageError("Nothing selected: use --link, --unlink, --all or --none.")

    selection: Selection = {}
    if select_all:
        selection.update(ctx.reconciler.full_selection())
    if select_none:
        current = ctx.reconciler.current_state(provider)
        selection.update(
            {
                name: False
                for name, status in current.items()
                if status == LinkStatus.MANAGED
            }
        )
    for name in link:
        selection[name] = True
    for name in unlink:
        selection[name] = False
    return selection


def _finish(result: ApplyResult) -> None:
    if result.failed:
        raise click.exceptions.Exit(1)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--home",
    type=click.Path(path_type=Path, file_okay=False),
    envvar=HOME_ENV_VAR,
    default=None,
    help="Home directory that holds the skill store and provider directories.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log engine activity to stderr.")
@click.version_option(__version__, prog_name=APP_NAME)
@click.pass_context
def cli(ctx: click.Context, home: Optional[Path], verbose: bool) -> None:
    """Link one central skill library into every agent's skills directory."""
    _configure_logging(verbose)
    ctx.obj = {"home": (home or Path.home()).expanduser()}


@cli.command("list", help="List skills in the central store by group.")
@click.pass_obj
def list_skills(obj: Dict[str, Any]) -> None:
    ctx = _context(obj)
    try:
        inventory = ctx.store.list_skills()
        lock_entries = ctx.ledger.load().skills
        link_counts: dict[str, int] = {name: 0 for name in inventory}
        for state in ctx.registry.configured():
            links = ctx.reconciler.current_state(state.name, inventory)
            for name, status in links.items():
                if status == LinkStatus.MANAGED and name in link_counts:
                    link_counts[name] += 1
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))

    installed = {name for name in inventory if ctx.store.is_installed(name)}
    ctx.ui.render_skills(
        ctx.store.root, group_members(inventory), link_counts, lock_entries, installed
    )


@cli.command(help="Show link status for every provider.")
@click.pass_obj
def status(obj: Dict[str, Any]) -> None:
    ctx = _context(obj)
    try:
        inventory = ctx.store.list_skills()
        rows = StatusService(ctx.store, ctx.registry).build_provider_status(
            ctx.settings.enabled_providers()
        )
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))
    ctx.ui.render_status(ctx.store.root, len(inventory), rows)


@cli.command(help="Build and print a dry-run link plan for one provider.")
@_provider_argument()
@_selection_options
@click.pass_obj
def plan(
    obj: Dict[str, Any],
    provider: str,
    link: tuple[str, ...],
    unlink: tuple[str, ...],
    select_all: bool,
    select_none: bool,
) -> None:
    ctx = _context(obj)
    try:
        selection = _build_selection(ctx, provider, link, unlink, select_all, select_none)
        plan_result = ctx.reconciler.preview(provider, selection)
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))
    ctx.ui.render_plan(plan_result, mode=f"plan:{plan_result.provider}")


@cli.command(help="Apply a link selection to one provider.")
@_provider_argument()
@_selection_options
@click.pass_obj
def apply(
    obj: Dict[str, Any],
    provider: str,
    link: tuple[str, ...],
    unlink: tuple[str, ...],
    select_all: bool,
    select_none: bool,
) -> None:
    ctx = _context(obj)
    try:
        selection = _build_selection(ctx, provider, link, unlink, select_all, select_none)
        plan_result, result = ctx.reconciler.reconcile(provider, selection)
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))

    ctx.ui.render_plan(plan_result, mode=f"apply:{plan_result.provider}")
    ctx.ui.render_apply_result(result)
    _finish(result)


@cli.command(help="Link every skill into a provider, or into all enabled providers.")
@_provider_argument(required=False)
@click.pass_obj
def sync(obj: Dict[str, Any], provider: Optional[str]) -> None:
    ctx = _context(obj)
    if provider is not None:
        targets = [provider.lower()]
    else:
        configured = {state.name for state in ctx.registry.configured()}
        enabled = ctx.settings.enabled_providers()
        targets = [name for name in enabled if name in configured]
        skipped = [name for name in enabled if name not in configured]
        if skipped:
            ctx.ui.render_errors(
                [f"{name}: directory missing, run 'providers configure {name}'" for name in skipped]
            )

    failed = False
    for target in targets:
        try:
            plan_result, result = ctx.reconciler.sync(target)
        except SkillLinkerError as exc:
            raise click.ClickException(str(exc))
        ctx.ui.render_plan(plan_result, mode=f"sync:{plan_result.provider}")
        ctx.ui.render_apply_result(result)
        failed = failed or bool(result.failed)

    if failed:
        raise click.exceptions.Exit(1)


@cli.command(help="Pick a provider's linked skills interactively.")
@_provider_argument()
@click.pass_obj
def manage(obj: Dict[str, Any], provider: str) -> None:
    from skill_linker.tui.skill_selector import SkillSelectorApp

    ctx = _context(obj)
    try:
        inventory = ctx.store.list_skills()
        current = ctx.reconciler.current_state(provider, inventory)
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))

    selection = SkillSelectorApp(provider, current, inventory).run()
    if selection is None:
        ctx.ui.console.print("No changes applied.")
        return

    try:
        plan_result, result = ctx.reconciler.reconcile(provider, selection)
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))
    ctx.ui.render_plan(plan_result, mode=f"manage:{plan_result.provider}")
    ctx.ui.render_apply_result(result)
    _finish(result)


@cli.group(help="Inspect and configure provider directories.")
def providers() -> None:
    pass


@providers.command("list", help="List providers, sync flag and directory.")
@click.pass_obj
def providers_list(obj: Dict[str, Any]) -> None:
    ctx = _context(obj)
    try:
        rows = ctx.settings.list_status_rows()
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))
    ctx.ui.render_providers(rows)


@providers.command("enable", help="Include a provider in 'sync'.")
@_provider_argument()
@click.pass_obj
def providers_enable(obj: Dict[str, Any], provider: str) -> None:
    ctx = _context(obj)
    try:
        ctx.settings.enable(provider)
        rows = ctx.settings.list_status_rows()
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))
    ctx.ui.render_providers(rows)


@providers.command("disable", help="Exclude a provider from 'sync'.")
@_provider_argument()
@click.pass_obj
def providers_disable(obj: Dict[str, Any], provider: str) -> None:
    ctx = _context(obj)
    try:
        ctx.settings.disable(provider)
        rows = ctx.settings.list_status_rows()
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))
    ctx.ui.render_providers(rows)


@providers.command("configure", help="Create a provider's skills directory.")
@_provider_argument()
@click.pass_obj
def providers_configure(obj: Dict[str, Any], provider: str) -> None:
    ctx = _context(obj)
    try:
        path = ctx.registry.configure(provider)
    except OSError as exc:
        raise click.ClickException(f"Cannot create directory: {exc}")
    ctx.ui.render_provider_configured(provider.lower(), path)


@providers.command("path", help="Override a provider's skills directory.")
@_provider_argument()
@click.argument("path", type=click.Path(path_type=Path, file_okay=False))
@click.pass_obj
def providers_path(obj: Dict[str, Any], provider: str, path: Path) -> None:
    ctx = _context(obj)
    try:
        ctx.settings.set_path(provider, path)
        rows = ctx.settings.list_status_rows()
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))
    ctx.ui.render_providers(rows)


@cli.group(help="Inspect the installation lock file.")
def lock() -> None:
    pass


@lock.command("list", help="List recorded skill sources.")
@click.pass_obj
def lock_list(obj: Dict[str, Any]) -> None:
    ctx = _context(obj)
    try:
        document = ctx.ledger.load()
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))
    ctx.ui.render_lock(document.skills)


@lock.command("record", help="Record where a skill was installed from.")
@click.argument("name")
@click.argument("source")
@click.option("--source-type", default="github", show_default=True)
@click.option("--source-url", default=None)
@click.pass_obj
def lock_record(
    obj: Dict[str, Any],
    name: str,
    source: str,
    source_type: str,
    source_url: Optional[str],
) -> None:
    ctx = _context(obj)
    try:
        entry = ctx.ledger.record(
            name, source, source_type=source_type, source_url=source_url
        )
    except SkillLinkerError as exc:
        raise click.ClickException(str(exc))
    ctx.ui.render_lock_recorded(name, entry)


def main() -> int:
    try:
        rv = cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    except click.exceptions.Abort:
        return 1
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
