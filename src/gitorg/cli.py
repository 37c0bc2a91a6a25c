"""CLI entrypoint for gitorg."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable, Coroutine
from typing import Any

import click
from rich.logging import RichHandler

from . import __version__, orchestrator, renderer
from .config import Config, load_config
from .errors import GitorgError

TOKEN_URL = (
    "https://github.com/settings/tokens/new?scopes=repo,read:org&description=gitorg"
)

SORT_CHOICES = ["activity", "stars", "staleness", "name"]

org_option = click.option(
    "--org", default=None, help="Filter to a specific organization"
)
json_option = click.option(
    "--json", "as_json", is_flag=True, default=False, help="Output results as JSON"
)
verbose_option = click.option(
    "--verbose",
    is_flag=True,
    default=False,
    help="Show verbose output (rate limits, debug info)",
)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=renderer.err_console, show_path=False)],
    )
    logging.getLogger("gitorg").setLevel(logging.DEBUG)


def _run(coro: Coroutine[Any, Any, None]) -> None:
    try:
        asyncio.run(coro)
    except GitorgError as exc:
        renderer.error(str(exc))
        sys.exit(1)
    except Exception as exc:
        renderer.error(str(exc) or exc.__class__.__name__)
        sys.exit(1)


def _run_with_config(
    ctx: click.Context,
    command: Callable[..., Coroutine[Any, Any, None]],
    as_json: bool = False,
    verbose: bool = False,
    **kwargs: Any,
) -> None:
    """Load the config, then run ``command`` with it and the global flags.

    ``--json`` and ``--verbose`` are accepted before or after the subcommand
    name; either position turns the flag on.
    """
    opts = ctx.obj
    if verbose and not opts["verbose"]:
        _configure_logging(verbose)
    try:
        config: Config = load_config()
    except GitorgError as exc:
        renderer.error(str(exc))
        sys.exit(1)
    _run(
        command(
            config,
            as_json=as_json or opts["json"],
            verbose=verbose or opts["verbose"],
            api_url=opts["api_url"],
            **kwargs,
        )
    )


@click.group()
@json_option
@verbose_option
@click.option(
    "--api-url",
    envvar="GITORG_API_URL",
    default=None,
    show_envvar=True,
    help="GitHub Enterprise API base URL",
)
@click.version_option(version=__version__, prog_name="gitorg")
@click.pass_context
def main(ctx: click.Context, as_json: bool, verbose: bool, api_url: str | None) -> None:
    """Manage and monitor multiple GitHub organizations.

    \b
    Examples:
      gitorg auth
      gitorg repos --sort stars
      gitorg stale --org myorg --days 180
      gitorg --json overview
    """
    _configure_logging(verbose)
    ctx.obj = {"json": as_json, "verbose": verbose, "api_url": api_url}


@main.command()
@click.option("--token", default=None, help="Token to use (if omitted, prompts interactively)")
@click.pass_context
def auth(ctx: click.Context, token: str | None) -> None:
    """Authenticate with a GitHub personal access token."""
    if token is None:
        click.echo(f"Create a token at: {TOKEN_URL}", err=True)
        if click.confirm("Open this page in your browser?", default=False, err=True):
            click.launch(TOKEN_URL)
        token = click.prompt(
            "Enter your GitHub personal access token", hide_input=True, err=True
        )
    _run(orchestrator.run_auth(token, api_url=ctx.obj["api_url"]))


@main.command()
@json_option
@verbose_option
@click.pass_context
def orgs(ctx: click.Context, as_json: bool, verbose: bool) -> None:
    """List your GitHub organizations."""
    _run_with_config(ctx, orchestrator.run_orgs, as_json=as_json, verbose=verbose)


@main.command()
@org_option
@click.option(
    "--sort",
    type=click.Choice(SORT_CHOICES, case_sensitive=False),
    default="activity",
    show_default=True,
    help="Sort by: activity, stars, staleness, name",
)
@json_option
@verbose_option
@click.pass_context
def repos(
    ctx: click.Context, org: str | None, sort: str, as_json: bool, verbose: bool
) -> None:
    """List repositories across organizations."""
    _run_with_config(
        ctx,
        orchestrator.run_repos,
        as_json=as_json,
        verbose=verbose,
        org=org,
        sort=sort.lower(),
    )


@main.command()
@org_option
@click.option(
    "--days",
    type=click.IntRange(min=0),
    default=90,
    show_default=True,
    help="Number of days without a push to consider stale",
)
@json_option
@verbose_option
@click.pass_context
def stale(
    ctx: click.Context, org: str | None, days: int, as_json: bool, verbose: bool
) -> None:
    """Find stale repositories with no recent pushes."""
    _run_with_config(
        ctx, orchestrator.run_stale, as_json=as_json, verbose=verbose, org=org, days=days
    )


@main.command()
@org_option
@json_option
@verbose_option
@click.pass_context
def issues(ctx: click.Context, org: str | None, as_json: bool, verbose: bool) -> None:
    """List open issues across organizations."""
    _run_with_config(ctx, orchestrator.run_issues, as_json=as_json, verbose=verbose, org=org)


@main.command()
@org_option
@json_option
@verbose_option
@click.pass_context
def stats(ctx: click.Context, org: str | None, as_json: bool, verbose: bool) -> None:
    """Show aggregate statistics across organizations."""
    _run_with_config(ctx, orchestrator.run_stats, as_json=as_json, verbose=verbose, org=org)


@main.command()
@org_option
@click.option(
    "--days",
    type=click.IntRange(min=0),
    default=90,
    show_default=True,
    help="Days threshold for stale repos in overview",
)
@json_option
@verbose_option
@click.pass_context
def overview(
    ctx: click.Context, org: str | None, days: int, as_json: bool, verbose: bool
) -> None:
    """Show a full dashboard overview."""
    _run_with_config(
        ctx,
        orchestrator.run_overview,
        as_json=as_json,
        verbose=verbose,
        org=org,
        days=days,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
