"""Tests for the renderer module."""

from __future__ import annotations

import json

from gitorg.models import (
    IssueEntry,
    IssueSummary,
    LanguageCount,
    OrgStats,
    OrgSummary,
    OverviewData,
    RepoEntry,
    RepoRef,
    RepoSummary,
    StaleRepo,
)
from gitorg.renderer import (
    error,
    output,
    render_issues,
    render_orgs,
    render_overview,
    render_repos,
    render_stale,
    render_stats,
    success,
    warn,
)


def _repo(**kwargs) -> RepoSummary:
    defaults = dict(
        org="acme",
        name="widget",
        language="Go",
        stars=42,
        forks=3,
        open_issues=1,
        last_push="2024-06-01",
        status="active",
    )
    defaults.update(kwargs)
    return RepoSummary(**defaults)


def _stats(**kwargs) -> OrgStats:
    defaults = dict(
        total_repos=5,
        total_stars=100,
        total_forks=20,
        total_open_issues=10,
        languages=[LanguageCount("Rust", 3)],
        most_starred=RepoRef(org="myorg", name="best-repo", count=50),
        most_forked=None,
    )
    defaults.update(kwargs)
    return OrgStats(**defaults)


def test_output_json_list(capsys):
    output(True, [_repo()], render_repos)
    data = json.loads(capsys.readouterr().out)
    assert data == [
        {
            "org": "acme",
            "name": "widget",
            "language": "Go",
            "stars": 42,
            "forks": 3,
            "open_issues": 1,
            "last_push": "2024-06-01",
            "status": "active",
        }
    ]


def test_output_json_nested(capsys):
    output(True, _stats(), render_stats)
    data = json.loads(capsys.readouterr().out)
    assert data["total_repos"] == 5
    assert data["most_starred"] == {"org": "myorg", "name": "best-repo", "count": 50}
    assert data["most_forked"] is None
    assert data["languages"] == [{"language": "Rust", "count": 3}]


def test_output_json_empty_list(capsys):
    output(True, [], render_repos)
    assert json.loads(capsys.readouterr().out) == []


def test_output_json_serialization_failure_is_reported(capsys):
    output(True, {"bad": object()}, lambda data: None)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error: Failed to serialize JSON" in captured.err


def test_output_table_calls_renderer():
    seen = []
    output(False, [1, 2], seen.append)
    assert seen == [[1, 2]]


def test_message_helpers(capsys):
    success("done")
    warn("careful [brackets]")
    error("broken")
    captured = capsys.readouterr()
    assert "✓ done" in captured.out
    assert "warning: careful [brackets]" in captured.err
    assert "error: broken" in captured.err


def test_render_orgs(capsys):
    render_orgs([OrgSummary(name="acme", description="Acme", url="https://github.com/acme")])
    out = capsys.readouterr().out
    assert "Organizations" in out
    assert "acme" in out
    assert "1 organization(s) found." in out


def test_render_orgs_empty(capsys):
    render_orgs([])
    assert "No organizations found." in capsys.readouterr().err


def test_render_repos(capsys):
    render_repos([_repo(), _repo(name="gadget", status="stale")])
    out = capsys.readouterr().out
    assert "Repositories" in out
    assert "widget" in out
    assert "gadget" in out
    assert "2 repository(ies) found." in out


def test_render_repos_empty(capsys):
    render_repos([])
    assert "No repositories found." in capsys.readouterr().err


def test_render_stale(capsys):
    render_stale(
        [StaleRepo("acme", "dusty", "2020-01-01", 1500, 0, "-")],
        days=90,
    )
    out = capsys.readouterr().out
    assert "Stale Repositories (>90 days)" in out
    assert "dusty" in out
    assert "1500" in out
    assert "1 stale repository(ies) found." in out


def test_render_stale_empty(capsys):
    render_stale([], days=30)
    assert "No repositories stale for more than 30 days." in capsys.readouterr().out


def test_render_issues(capsys):
    render_issues(
        [IssueSummary("acme", "widget", 7, "Crash", "alice", "bug", "2024-06-02")]
    )
    out = capsys.readouterr().out
    assert "Open Issues" in out
    assert "Crash" in out
    assert "1 open issue(s) found." in out


def test_render_issues_empty(capsys):
    render_issues([])
    assert "No open issues found." in capsys.readouterr().out


def test_render_stats(capsys):
    render_stats(_stats())
    out = capsys.readouterr().out
    assert "Organization Statistics" in out
    assert "myorg/best-repo (50)" in out
    assert "Most Forked" not in out
    assert "1. Rust (3)" in out


def test_render_overview(capsys):
    render_overview(
        OverviewData(
            total_repos=2,
            total_stars=3,
            total_forks=0,
            total_open_issues=1,
            top_languages=[LanguageCount("Go", 2)],
            recently_active=[RepoEntry("acme", "fresh", 3, "2024-12-30", 2)],
            stale_repos=[RepoEntry("acme", "dusty", 0, "never", 99999)],
            recent_issues=[IssueEntry("acme", "fresh", 1, "Crash", "2024-12-31")],
        )
    )
    out = capsys.readouterr().out
    for heading in ("Summary", "Top Languages", "Recently Active Repos", "Stale Repos", "Recent Issues"):
        assert heading in out
    assert "Go (2)" in out
    assert "99999" in out


def test_render_overview_skips_empty_sections(capsys):
    render_overview(OverviewData())
    out = capsys.readouterr().out
    assert "Summary" in out
    assert "Recent Issues" not in out
