"""GitHub REST API client."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

import httpx

from .. import renderer
from ..errors import RateLimited, RemoteAPIError
from ..models import AuthenticatedUser, IssueRecord, OrgRef, RateLimitInfo, RepoRecord
from .rate_limit import RateLimitMonitor, format_reset, is_rate_limited, reset_label

logger = logging.getLogger(__name__)

T = TypeVar("T")

BASE_URL = "https://api.github.com"
PER_PAGE = 100
MAX_PAGES = 1000
LOW_RATE_LIMIT = 100


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO 8601 timestamp (``2024-01-01T00:00:00Z``)."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _has_next_page(response: httpx.Response) -> bool:
    link_header = response.headers.get("Link", "")
    return any('rel="next"' in part for part in link_header.split(","))


def _describe_status(exc: httpx.HTTPStatusError) -> str:
    status = exc.response.status_code
    path = exc.request.url.path
    if status == 401:
        return "authentication failed (bad credentials)"
    if status == 403:
        return f"access forbidden: {path}"
    if status == 404:
        return f"not found: {path}"
    return f"GitHub returned {status} for {path}"


def _to_repo(org: str, data: dict[str, Any]) -> RepoRecord:
    return RepoRecord(
        org=org,
        name=data["name"],
        language=data.get("language"),
        stars=data.get("stargazers_count") or 0,
        forks=data.get("forks_count") or 0,
        open_issues=data.get("open_issues_count") or 0,
        archived=bool(data.get("archived")),
        pushed_at=parse_timestamp(data.get("pushed_at")),
    )


def _to_issue(owner: str, repo: str, data: dict[str, Any]) -> IssueRecord:
    user = data.get("user") or {}
    return IssueRecord(
        org=owner,
        repo=repo,
        number=data["number"],
        title=data.get("title") or "",
        author=user.get("login") or "ghost",
        labels=[label["name"] for label in data.get("labels") or []],
        updated_at=parse_timestamp(data["updated_at"]),
    )


class GitHubClient:
    """Async GitHub REST API client with page-based pagination.

    Calls are made one at a time; every failure surfaces as RemoteAPIError.
    """

    def __init__(
        self,
        token: str,
        verbose: bool = False,
        base_url: str | None = None,
        max_pages: int = MAX_PAGES,
        warn: Callable[[str], None] | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self._client = httpx.AsyncClient(
            base_url=base_url or BASE_URL,
            headers=headers,
            timeout=30.0,
        )
        self._rate_limit = RateLimitMonitor(threshold=LOW_RATE_LIMIT)
        self._verbose = verbose
        self._max_pages = max_pages
        self._warn = warn or renderer.warn

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        logger.debug("GET %s %s", url, params or "")
        try:
            response = await self._client.get(url, params=params)
            self._rate_limit.update(response)
            if is_rate_limited(response):
                raise RateLimited(reset_label(response))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteAPIError(_describe_status(exc)) from exc
        except httpx.HTTPError as exc:
            raise RemoteAPIError(f"could not connect to GitHub API: {exc}") from exc
        return response

    @staticmethod
    def _decode(response: httpx.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteAPIError(f"invalid JSON from {url}") from exc

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._get(url, params)
        return self._decode(response, url)

    async def _paginate(
        self, url: str, params: dict[str, Any] | None = None
    ) -> list[Any]:
        """Fetch every page of a list endpoint.

        Stops on an empty page or when the Link header carries no ``rel="next"``.
        """
        results: list[Any] = []
        page = 1
        while True:
            if page > self._max_pages:
                raise RemoteAPIError(
                    f"pagination of {url} exceeded {self._max_pages} pages; aborting"
                )
            page_params = dict(params or {})
            page_params.update({"per_page": PER_PAGE, "page": page})
            response = await self._get(url, page_params)
            data = self._decode(response, url)
            if not isinstance(data, list):
                raise RemoteAPIError(f"expected a list from {url}")
            if not data:
                break
            results.extend(data)
            if not _has_next_page(response):
                break
            page += 1
        return results

    async def _list(
        self,
        url: str,
        convert: Callable[[Any], T],
        params: dict[str, Any] | None = None,
    ) -> list[T]:
        """Paginate ``url`` and convert each item; malformed items are API errors."""
        items = await self._paginate(url, params)
        try:
            return [convert(item) for item in items]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise RemoteAPIError(f"unexpected payload from {url}: {exc!r}") from exc

    async def validate_token(self) -> AuthenticatedUser:
        """Confirm the token is accepted and return who it belongs to."""
        try:
            data = await self._get_json("/user")
            return AuthenticatedUser(login=data["login"], name=data.get("name"))
        except RemoteAPIError as exc:
            raise RemoteAPIError(f"Token validation failed: {exc.message}") from exc
        except (KeyError, TypeError, AttributeError) as exc:
            raise RemoteAPIError("Token validation failed: unexpected /user response") from exc

    async def list_user_orgs(self) -> list[OrgRef]:
        """List organizations the authenticated user belongs to."""
        return await self._list(
            "/user/orgs",
            lambda o: OrgRef(login=o["login"], description=o.get("description")),
        )

    async def list_org_repos(self, org: str) -> list[RepoRecord]:
        """List all repositories (every type) of an organization."""
        return await self._list(
            f"/orgs/{org}/repos", lambda r: _to_repo(org, r), params={"type": "all"}
        )

    async def list_repo_issues(self, owner: str, repo: str) -> list[IssueRecord]:
        """List open issues (excluding pull requests) for a repository."""
        issues = await self._list(
            f"/repos/{owner}/{repo}/issues",
            lambda i: None if i.get("pull_request") is not None else _to_issue(owner, repo, i),
            params={"state": "open"},
        )
        # GitHub issues API includes PRs; filter them out
        return [i for i in issues if i is not None]

    async def get_rate_limit(self) -> RateLimitInfo:
        data = await self._get_json("/rate_limit")
        try:
            core = data["resources"]["core"]
            return RateLimitInfo(
                limit=int(core["limit"]),
                remaining=int(core["remaining"]),
                reset=int(core["reset"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RemoteAPIError("unexpected /rate_limit response") from exc

    async def check_rate_limit_if_verbose(self) -> None:
        """Print rate limit diagnostics to stderr when running verbose."""
        if not self._verbose:
            return
        try:
            rl = await self.get_rate_limit()
        except RemoteAPIError as exc:
            renderer.err_console.print(f"Could not check rate limit: {exc}", markup=False)
            return
        renderer.err_console.print(
            f"Rate limit: {rl.remaining}/{rl.limit} remaining "
            f"(resets at {format_reset(rl.reset)})",
            markup=False,
        )

    async def warn_if_rate_limited(self) -> None:
        """Warn when fewer than LOW_RATE_LIMIT calls remain."""
        rl = await self.get_rate_limit()
        if rl.remaining < LOW_RATE_LIMIT:
            self._warn(
                f"Only {rl.remaining} API calls remaining "
                f"(resets at {format_reset(rl.reset)})"
            )
