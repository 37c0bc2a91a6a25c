"""Rich-based terminal renderer with JSON support."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from dataclasses import asdict, is_dataclass
from typing import Any, TypeVar

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import (
    IssueSummary,
    OrgStats,
    OrgSummary,
    OverviewData,
    RepoSummary,
    StaleRepo,
)

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)


def to_jsonable(data: Any) -> Any:
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    if isinstance(data, (list, tuple)):
        return [to_jsonable(item) for item in data]
    return data


def output(as_json: bool, data: T, render_table: Callable[[T], None]) -> None:
    """Print ``data`` as JSON, or hand it to the command's table renderer."""
    if not as_json:
        render_table(data)
        return
    try:
        content = json.dumps(to_jsonable(data), indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        error(f"Failed to serialize JSON: {exc}")
        return
    print(content)


def new_table(headers: Sequence[str]) -> Table:
    table = Table(show_header=True, header_style="bold")
    for header in headers:
        table.add_column(header)
    return table


def section_header(title: str) -> None:
    console.print()
    console.print(f"[bold cyan]{escape(title)}[/bold cyan]")
    console.print("─" * len(title), style="cyan")


def success(msg: str) -> None:
    console.print(f"[bold green]✓[/bold green] {escape(msg)}", soft_wrap=True)


def warn(msg: str) -> None:
    err_console.print(f"[bold yellow]warning:[/bold yellow] {escape(msg)}", soft_wrap=True)


def error(msg: str) -> None:
    err_console.print(f"[bold red]error:[/bold red] {escape(msg)}", soft_wrap=True)


def _print_table(table: Table, footer: str) -> None:
    console.print(table)
    console.print()
    console.print(footer, markup=False)


def render_orgs(orgs: list[OrgSummary]) -> None:
    if not orgs:
        warn("No organizations found.")
        return

    section_header("Organizations")
    table = new_table(["Name", "Description", "URL"])
    for org in orgs:
        table.add_row(escape(org.name), escape(org.description), org.url)
    _print_table(table, f"{len(orgs)} organization(s) found.")


def render_repos(repos: list[RepoSummary]) -> None:
    if not repos:
        warn("No repositories found.")
        return

    section_header("Repositories")
    table = new_table(
        ["Org", "Name", "Language", "Stars", "Forks", "Issues", "Last Push", "Status"]
    )
    for r in repos:
        table.add_row(
            escape(r.org),
            escape(r.name),
            escape(r.language),
            str(r.stars),
            str(r.forks),
            str(r.open_issues),
            r.last_push,
            r.status,
        )
    _print_table(table, f"{len(repos)} repository(ies) found.")


def render_stale(repos: list[StaleRepo], days: int) -> None:
    if not repos:
        success(f"No repositories stale for more than {days} days.")
        return

    section_header(f"Stale Repositories (>{days} days)")
    table = new_table(["Org", "Name", "Last Push", "Days Stale", "Stars", "Language"])
    for r in repos:
        table.add_row(
            escape(r.org),
            escape(r.name),
            r.last_push,
            str(r.days_stale),
            str(r.stars),
            escape(r.language),
        )
    _print_table(table, f"{len(repos)} stale repository(ies) found.")


def render_issues(issues: list[IssueSummary]) -> None:
    if not issues:
        success("No open issues found.")
        return

    section_header("Open Issues")
    table = new_table(["Org", "Repo", "#", "Title", "Author", "Labels", "Updated"])
    for i in issues:
        table.add_row(
            escape(i.org),
            escape(i.repo),
            str(i.number),
            escape(i.title),
            escape(i.author),
            escape(i.labels),
            i.updated,
        )
    _print_table(table, f"{len(issues)} open issue(s) found.")


def render_stats(stats: OrgStats) -> None:
    section_header("Organization Statistics")

    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="bold")
    summary.add_column("value")
    summary.add_row("Repositories:", str(stats.total_repos))
    summary.add_row("Total Stars:", str(stats.total_stars))
    summary.add_row("Total Forks:", str(stats.total_forks))
    summary.add_row("Open Issues:", str(stats.total_open_issues))
    if stats.most_starred is not None:
        r = stats.most_starred
        summary.add_row("Most Starred:", escape(f"{r.org}/{r.name} ({r.count})"))
    if stats.most_forked is not None:
        r = stats.most_forked
        summary.add_row("Most Forked:", escape(f"{r.org}/{r.name} ({r.count})"))
    console.print(summary)

    if stats.languages:
        console.print()
        console.print("  [bold]Top Languages:[/bold]")
        for i, lang in enumerate(stats.languages[:10], 1):
            console.print(f"    {i}. {escape(lang.language)} ({lang.count})")


def render_overview(data: OverviewData) -> None:
    section_header("Summary")
    console.print(
        f"  [bold]Repos:[/bold] {data.total_repos}   "
        f"[bold]Stars:[/bold] {data.total_stars}   "
        f"[bold]Forks:[/bold] {data.total_forks}   "
        f"[bold]Issues:[/bold] {data.total_open_issues}"
    )

    if data.top_languages:
        section_header("Top Languages")
        for lang in data.top_languages:
            console.print(f"  {escape(lang.language)} ({lang.count})")

    if data.recently_active:
        section_header("Recently Active Repos")
        table = new_table(["Org", "Name", "Stars", "Last Push"])
        for r in data.recently_active:
            table.add_row(escape(r.org), escape(r.name), str(r.stars), r.last_push)
        console.print(table)

    if data.stale_repos:
        section_header("Stale Repos")
        table = new_table(["Org", "Name", "Stars", "Last Push", "Days Stale"])
        for r in data.stale_repos:
            table.add_row(
                escape(r.org),
                escape(r.name),
                str(r.stars),
                r.last_push,
                str(r.days_since_push),
            )
        console.print(table)

    if data.recent_issues:
        section_header("Recent Issues")
        table = new_table(["Org", "Repo", "#", "Title", "Updated"])
        for i in data.recent_issues:
            table.add_row(
                escape(i.org), escape(i.repo), str(i.number), escape(i.title), i.updated
            )
        console.print(table)
