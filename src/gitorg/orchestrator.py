"""Orchestrator: wires together config, client, aggregator, and renderer."""

from __future__ import annotations

import logging
from pathlib import Path

from . import aggregator, renderer
from .config import Config, load_config, save_config
from .errors import ConfigError, RemoteAPIError
from .github.client import GitHubClient

logger = logging.getLogger(__name__)


def _client(config: Config, verbose: bool, api_url: str | None) -> GitHubClient:
    return GitHubClient(token=config.token(), verbose=verbose, base_url=api_url)


async def _advise_rate_limit(client: GitHubClient) -> None:
    try:
        await client.warn_if_rate_limited()
    except RemoteAPIError as exc:
        logger.debug("rate limit check failed: %s", exc)


async def run_auth(
    token: str,
    config_path: Path | None = None,
    api_url: str | None = None,
) -> None:
    """Validate ``token`` against GitHub and store it."""
    token = token.strip()
    if not token:
        raise ConfigError("token must not be empty")

    async with GitHubClient(token=token, base_url=api_url) as client:
        user = await client.validate_token()

    config = load_config(config_path)
    config.auth.token = token
    save_config(config, config_path)

    renderer.success(
        f"Authenticated as {user.login} ({user.name or 'no name set'})"
    )


async def run_orgs(
    config: Config, as_json: bool = False, verbose: bool = False, api_url: str | None = None
) -> None:
    async with _client(config, verbose, api_url) as client:
        orgs = await aggregator.collect_orgs(client)
        renderer.output(as_json, orgs, renderer.render_orgs)
        await client.check_rate_limit_if_verbose()


async def run_repos(
    config: Config,
    org: str | None = None,
    sort: str = "activity",
    as_json: bool = False,
    verbose: bool = False,
    api_url: str | None = None,
) -> None:
    async with _client(config, verbose, api_url) as client:
        repos = await aggregator.collect_repos(client, config, org=org, sort=sort)
        renderer.output(as_json, repos, renderer.render_repos)
        await client.check_rate_limit_if_verbose()


async def run_stale(
    config: Config,
    org: str | None = None,
    days: int = 90,
    as_json: bool = False,
    verbose: bool = False,
    api_url: str | None = None,
) -> None:
    async with _client(config, verbose, api_url) as client:
        repos = await aggregator.collect_stale(client, config, org=org, days=days)
        renderer.output(as_json, repos, lambda data: renderer.render_stale(data, days))
        await client.check_rate_limit_if_verbose()


async def run_issues(
    config: Config,
    org: str | None = None,
    as_json: bool = False,
    verbose: bool = False,
    api_url: str | None = None,
) -> None:
    async with _client(config, verbose, api_url) as client:
        await _advise_rate_limit(client)
        issues = await aggregator.collect_issues(client, config, org=org)
        renderer.output(as_json, issues, renderer.render_issues)
        await client.check_rate_limit_if_verbose()


async def run_stats(
    config: Config,
    org: str | None = None,
    as_json: bool = False,
    verbose: bool = False,
    api_url: str | None = None,
) -> None:
    async with _client(config, verbose, api_url) as client:
        stats = await aggregator.collect_stats(client, config, org=org)
        renderer.output(as_json, stats, renderer.render_stats)
        await client.check_rate_limit_if_verbose()


async def run_overview(
    config: Config,
    org: str | None = None,
    days: int = 90,
    as_json: bool = False,
    verbose: bool = False,
    api_url: str | None = None,
) -> None:
    async with _client(config, verbose, api_url) as client:
        await _advise_rate_limit(client)
        overview = await aggregator.collect_overview(client, config, org=org, days=days)
        renderer.output(as_json, overview, renderer.render_overview)
        await client.check_rate_limit_if_verbose()
