import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import click

from trackstat import git_ops, settings, ui
from trackstat.models import ALL_BRANCHES, AheadBehindData
from trackstat.provider import AheadBehindDataProvider


@dataclass
class AppContext:
    repo_root: Path
    provider: AheadBehindDataProvider


def _make_provider(repo_root: Path) -> AheadBehindDataProvider:
    executable = git_ops.Executable(repo_root)
    return AheadBehindDataProvider(
        lambda: executable,
        lambda: settings.load_settings(repo_root).show_ahead_behind_data,
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]}, invoke_without_command=True)
@click.option(
    "-C",
    "repo_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Run as if started in this directory.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, repo_path: Path | None, verbose: bool) -> None:
    """trackstat: ahead/behind counts of local branches."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    try:
        repo_root = git_ops.get_repo_root(repo_path or Path.cwd())
    except git_ops.GitError:
        click.echo("trackstat: not inside a git repository", err=True)
        raise SystemExit(1)

    ctx.obj = AppContext(repo_root=repo_root, provider=_make_provider(repo_root))
    if ctx.invoked_subcommand is None:
        ctx.invoke(show)


def _get_data(app: AppContext, branch: str) -> Iterable[AheadBehindData] | None:
    try:
        data = app.provider.get_data(branch)
    except settings.SettingsError as exc:
        raise click.ClickException(str(exc)) from exc
    return None if data is None else data.values()


@main.command("show")
@click.argument("branch", required=False, default=ALL_BRANCHES)
@click.option("--current", is_flag=True, help="Only show the checked out branch.")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table.")
@click.pass_obj
def show(app: AppContext, branch: str = ALL_BRANCHES, current: bool = False, as_json: bool = False) -> None:
    """Show ahead/behind counts for BRANCH, or for all local branches."""
    if current:
        branch = git_ops.current_branch(app.repo_root)
    elif branch and branch not in git_ops.list_local_branches(app.repo_root):
        raise click.ClickException(f"no such branch: {branch}")

    records = _get_data(app, branch)
    if records is None:
        click.echo("No ahead/behind data available.", err=True)
        return
    if branch:
        # refs/heads/<branch> also matches branches nested below it
        records = [r for r in records if r.branch == branch]
    if as_json:
        click.echo(ui.render_json(records))
    else:
        click.echo(ui.render_table(records, color=sys.stdout.isatty()))


@main.command("status")
@click.pass_obj
def status(app: AppContext) -> None:
    """Print a one-line summary for the checked out branch."""
    branch = git_ops.current_branch(app.repo_root)
    records = _get_data(app, branch)
    record = next((r for r in records or () if r.branch == branch), None)
    if record is None:
        return
    click.echo(f"{record.remote_ref} {ui.format_status(record)}")


@main.group("config")
def config() -> None:
    """Read or change repository settings."""


@config.command("show-ahead-behind")
@click.argument("value", required=False, type=click.Choice(["on", "off"]))
@click.pass_obj
def show_ahead_behind(app: AppContext, value: str | None) -> None:
    """Print or set whether ahead/behind data is computed."""
    if value is None:
        try:
            enabled = settings.load_settings(app.repo_root).show_ahead_behind_data
        except settings.SettingsError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo("on" if enabled else "off")
        return
    try:
        settings.save_repo_setting(app.repo_root, settings.SHOW_AHEAD_BEHIND_DATA, value == "on")
    except settings.SettingsError as exc:
        raise click.ClickException(str(exc)) from exc
    app.provider.reset_cache()


if __name__ == "__main__":
    main()
