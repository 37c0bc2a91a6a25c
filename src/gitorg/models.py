"""Data models for gitorg."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

# Days-since-push used when a repository has never been pushed to.
NEVER_PUSHED_DAYS = 99999
# Same idea for the repos status column, which only needs to exceed STALE_AFTER_DAYS.
NEVER_PUSHED_STATUS_DAYS = 999
STALE_AFTER_DAYS = 365


@dataclass
class AuthenticatedUser:
    login: str
    name: str | None = None


@dataclass
class OrgRef:
    login: str
    description: str | None = None


@dataclass
class RateLimitInfo:
    """The ``core`` bucket of ``GET /rate_limit``."""

    limit: int
    remaining: int
    reset: int


@dataclass
class RepoRecord:
    org: str
    name: str
    language: str | None = None
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    archived: bool = False
    pushed_at: datetime | None = None


@dataclass
class IssueRecord:
    org: str
    repo: str
    number: int
    title: str
    author: str
    updated_at: datetime
    labels: list[str] = field(default_factory=list)


# Summary structures. Field names and nesting are the JSON output format.


@dataclass
class OrgSummary:
    name: str
    description: str
    url: str


@dataclass
class RepoSummary:
    org: str
    name: str
    language: str
    stars: int
    forks: int
    open_issues: int
    last_push: str
    status: str


@dataclass
class StaleRepo:
    org: str
    name: str
    last_push: str
    days_stale: int
    stars: int
    language: str


@dataclass
class IssueSummary:
    org: str
    repo: str
    number: int
    title: str
    author: str
    labels: str
    updated: str


@dataclass
class LanguageCount:
    language: str
    count: int


@dataclass
class RepoRef:
    org: str
    name: str
    count: int


@dataclass
class OrgStats:
    total_repos: int = 0
    total_stars: int = 0
    total_forks: int = 0
    total_open_issues: int = 0
    languages: list[LanguageCount] = field(default_factory=list)
    most_starred: RepoRef | None = None
    most_forked: RepoRef | None = None


@dataclass
class RepoEntry:
    org: str
    name: str
    stars: int
    last_push: str
    days_since_push: int


@dataclass
class IssueEntry:
    org: str
    repo: str
    number: int
    title: str
    updated: str


@dataclass
class OverviewData:
    total_repos: int = 0
    total_stars: int = 0
    total_forks: int = 0
    total_open_issues: int = 0
    top_languages: list[LanguageCount] = field(default_factory=list)
    recently_active: list[RepoEntry] = field(default_factory=list)
    stale_repos: list[RepoEntry] = field(default_factory=list)
    recent_issues: list[IssueEntry] = field(default_factory=list)
