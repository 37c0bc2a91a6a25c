"""Data aggregation: walk orgs, repos and issues and fold them into summaries.

Every command resolves its organization set, fetches each organization's
repositories one at a time and keeps going when an organization fails: the
failure becomes a warning and the summary is built from whatever succeeded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from . import renderer
from .config import Config
from .errors import RemoteAPIError
from .github.client import GitHubClient
from .models import (
    NEVER_PUSHED_DAYS,
    NEVER_PUSHED_STATUS_DAYS,
    STALE_AFTER_DAYS,
    IssueEntry,
    IssueSummary,
    LanguageCount,
    OrgStats,
    OrgSummary,
    OverviewData,
    RepoEntry,
    RepoRecord,
    RepoRef,
    RepoSummary,
    StaleRepo,
)

logger = logging.getLogger(__name__)

Warn = Callable[[str], None]

PROFILE_URL = "https://github.com/{login}"
OVERVIEW_TOP_LANGUAGES = 5
OVERVIEW_MAX_REPOS = 10
OVERVIEW_MAX_ISSUES = 10
OVERVIEW_ISSUES_PER_REPO = 3


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def format_date(dt: datetime | None) -> str:
    """Format a timestamp as ``YYYY-MM-DD``, or ``never`` when absent."""
    return dt.strftime("%Y-%m-%d") if dt is not None else "never"


def days_since(dt: datetime | None, now: datetime, default: int = NEVER_PUSHED_DAYS) -> int:
    """Whole days elapsed since ``dt``; ``default`` if it never happened."""
    if dt is None:
        return default
    return (now - dt).days


def repo_status(repo: RepoRecord, now: datetime) -> str:
    if repo.archived:
        return "archived"
    if days_since(repo.pushed_at, now, NEVER_PUSHED_STATUS_DAYS) > STALE_AFTER_DAYS:
        return "stale"
    return "active"


def to_repo_summary(repo: RepoRecord, now: datetime) -> RepoSummary:
    return RepoSummary(
        org=repo.org,
        name=repo.name,
        language=repo.language or "-",
        stars=repo.stars,
        forks=repo.forks,
        open_issues=repo.open_issues,
        last_push=format_date(repo.pushed_at),
        status=repo_status(repo, now),
    )


def sort_repos(repos: list[RepoSummary], sort: str) -> None:
    """Sort in place.

    ``staleness`` and ``activity`` compare the formatted ``last_push`` strings,
    which order correctly because they are fixed-width ``YYYY-MM-DD``.
    """
    if sort == "stars":
        repos.sort(key=lambda r: r.stars, reverse=True)
    elif sort == "name":
        repos.sort(key=lambda r: r.name.lower())
    elif sort == "staleness":
        repos.sort(key=lambda r: r.last_push)
    else:  # activity (most recent first)
        repos.sort(key=lambda r: r.last_push, reverse=True)


def filter_stale(repos: Iterable[RepoRecord], days: int, now: datetime) -> list[StaleRepo]:
    """Non-archived repos idle for at least ``days`` days, most stale first."""
    stale: list[StaleRepo] = []
    for repo in repos:
        if repo.archived:
            continue
        idle = days_since(repo.pushed_at, now)
        if idle >= days:
            stale.append(
                StaleRepo(
                    org=repo.org,
                    name=repo.name,
                    last_push=format_date(repo.pushed_at),
                    days_stale=idle,
                    stars=repo.stars,
                    language=repo.language or "-",
                )
            )
    stale.sort(key=lambda r: r.days_stale, reverse=True)
    return stale


def language_histogram(repos: Iterable[RepoRecord]) -> list[LanguageCount]:
    """Repo count per primary language, most common first."""
    counts: dict[str, int] = {}
    for repo in repos:
        language = repo.language or "Unknown"
        counts[language] = counts.get(language, 0) + 1
    languages = [LanguageCount(language=lang, count=n) for lang, n in counts.items()]
    languages.sort(key=lambda lang: lang.count, reverse=True)
    return languages


def _top_repo(current: RepoRef | None, repo: RepoRecord, value: int) -> RepoRef | None:
    # Ties keep the first repo seen; zero never qualifies.
    if value > 0 and (current is None or value > current.count):
        return RepoRef(org=repo.org, name=repo.name, count=value)
    return current


async def resolve_orgs(org: str | None, config: Config, client: GitHubClient) -> list[str]:
    """Explicit org, else configured defaults, else every org the user can see."""
    if org is not None:
        return [org]
    if config.defaults.orgs:
        return list(config.defaults.orgs)
    orgs = await client.list_user_orgs()
    return [o.login for o in orgs]


async def _fetch_repos(
    client: GitHubClient, orgs: Iterable[str], warn: Warn
) -> list[RepoRecord]:
    """Repositories of every org, in org order; failed orgs are warned about."""
    repos: list[RepoRecord] = []
    for org_name in orgs:
        try:
            repos.extend(await client.list_org_repos(org_name))
        except RemoteAPIError as exc:
            warn(f"Failed to fetch repos for {org_name}: {exc}")
    return repos


async def collect_orgs(client: GitHubClient) -> list[OrgSummary]:
    orgs = await client.list_user_orgs()
    return [
        OrgSummary(
            name=o.login,
            description=o.description or "",
            url=PROFILE_URL.format(login=o.login),
        )
        for o in orgs
    ]


async def collect_repos(
    client: GitHubClient,
    config: Config,
    org: str | None = None,
    sort: str = "activity",
    warn: Warn = renderer.warn,
    now: datetime | None = None,
) -> list[RepoSummary]:
    now = _now(now)
    orgs = await resolve_orgs(org, config, client)
    repos = await _fetch_repos(client, orgs, warn)
    summaries = [to_repo_summary(r, now) for r in repos]
    sort_repos(summaries, sort)
    return summaries


async def collect_stale(
    client: GitHubClient,
    config: Config,
    org: str | None = None,
    days: int = 90,
    warn: Warn = renderer.warn,
    now: datetime | None = None,
) -> list[StaleRepo]:
    now = _now(now)
    orgs = await resolve_orgs(org, config, client)
    repos = await _fetch_repos(client, orgs, warn)
    return filter_stale(repos, days, now)


async def collect_issues(
    client: GitHubClient,
    config: Config,
    org: str | None = None,
    warn: Warn = renderer.warn,
) -> list[IssueSummary]:
    """Open issues of every live repo that reports any, in fetch order."""
    orgs = await resolve_orgs(org, config, client)

    issues: list[IssueSummary] = []
    for org_name in orgs:
        try:
            repos = await client.list_org_repos(org_name)
        except RemoteAPIError as exc:
            warn(f"Failed to fetch repos for {org_name}: {exc}")
            continue

        for repo in repos:
            if repo.archived or repo.open_issues == 0:
                continue
            try:
                repo_issues = await client.list_repo_issues(org_name, repo.name)
            except RemoteAPIError as exc:
                warn(f"Failed to fetch issues for {org_name}/{repo.name}: {exc}")
                continue

            for issue in repo_issues:
                issues.append(
                    IssueSummary(
                        org=org_name,
                        repo=repo.name,
                        number=issue.number,
                        title=issue.title,
                        author=issue.author,
                        labels=", ".join(issue.labels) if issue.labels else "-",
                        updated=format_date(issue.updated_at),
                    )
                )
    return issues


async def collect_stats(
    client: GitHubClient,
    config: Config,
    org: str | None = None,
    warn: Warn = renderer.warn,
) -> OrgStats:
    orgs = await resolve_orgs(org, config, client)
    repos = await _fetch_repos(client, orgs, warn)

    stats = OrgStats(languages=language_histogram(repos))
    for repo in repos:
        stats.total_repos += 1
        stats.total_stars += repo.stars
        stats.total_forks += repo.forks
        stats.total_open_issues += repo.open_issues
        stats.most_starred = _top_repo(stats.most_starred, repo, repo.stars)
        stats.most_forked = _top_repo(stats.most_forked, repo, repo.forks)
    return stats


async def collect_overview(
    client: GitHubClient,
    config: Config,
    org: str | None = None,
    days: int = 90,
    warn: Warn = renderer.warn,
    now: datetime | None = None,
) -> OverviewData:
    """Dashboard: totals, top languages, active and stale repos, recent issues.

    Issue fetch failures are secondary here and are skipped without a warning.
    """
    now = _now(now)
    orgs = await resolve_orgs(org, config, client)

    data = OverviewData()
    all_repos: list[RepoRecord] = []
    entries: list[RepoEntry] = []
    recent_issues: list[IssueEntry] = []

    for org_name in orgs:
        try:
            repos = await client.list_org_repos(org_name)
        except RemoteAPIError as exc:
            warn(f"Failed to fetch repos for {org_name}: {exc}")
            continue

        for repo in repos:
            all_repos.append(repo)
            data.total_repos += 1
            data.total_stars += repo.stars
            data.total_forks += repo.forks
            data.total_open_issues += repo.open_issues
            entries.append(
                RepoEntry(
                    org=org_name,
                    name=repo.name,
                    stars=repo.stars,
                    last_push=format_date(repo.pushed_at),
                    days_since_push=days_since(repo.pushed_at, now),
                )
            )

            if repo.archived or repo.open_issues == 0:
                continue
            try:
                repo_issues = await client.list_repo_issues(org_name, repo.name)
            except RemoteAPIError as exc:
                logger.debug("skipping issues for %s/%s: %s", org_name, repo.name, exc)
                continue
            for issue in repo_issues[:OVERVIEW_ISSUES_PER_REPO]:
                recent_issues.append(
                    IssueEntry(
                        org=org_name,
                        repo=repo.name,
                        number=issue.number,
                        title=issue.title,
                        updated=format_date(issue.updated_at),
                    )
                )

    entries.sort(key=lambda e: e.days_since_push)
    data.recently_active = [e for e in entries if e.days_since_push < days][
        :OVERVIEW_MAX_REPOS
    ]
    data.stale_repos = [e for e in reversed(entries) if e.days_since_push >= days][
        :OVERVIEW_MAX_REPOS
    ]

    recent_issues.sort(key=lambda i: i.updated, reverse=True)
    data.recent_issues = recent_issues[:OVERVIEW_MAX_ISSUES]
    data.top_languages = language_histogram(all_repos)[:OVERVIEW_TOP_LANGUAGES]
    return data
