"""Terminal report rendered with rich."""

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from depscope.analyzers.scorer import round_half_up
from depscope.models.schemas import (
    DependencyResult,
    Grade,
    MaintenanceStatus,
    ProjectResult,
    Severity,
    Trend,
)
from depscope.reporters.options import ReportOptions

GRADE_COLORS = {
    Grade.A: "green",
    Grade.B: "green",
    Grade.C: "yellow",
    Grade.D: "red",
    Grade.F: "red",
}

MAINTENANCE_COLORS = {
    MaintenanceStatus.ACTIVE: "green",
    MaintenanceStatus.STALE: "yellow",
    MaintenanceStatus.ABANDONED: "red",
}

TREND_ARROWS = {
    Trend.GROWING: "[green]↑[/green]",
    Trend.STABLE: "[dim]→[/dim]",
    Trend.DECLINING: "[red]↓[/red]",
}

RULE = "─" * 50


def _score_bar(score: int, width: int = 20) -> str:
    """Create a visual score bar."""
    filled = int(round_half_up(score / 100 * width))
    empty = width - filled
    color = "green" if score >= 60 else "yellow" if score >= 40 else "red"
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * empty}[/dim]"


def _grade_badge(grade: Grade) -> str:
    color = GRADE_COLORS[grade]
    return f"[bold {color}]{grade.value}[/bold {color}]"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def _worst_first(deps: list[DependencyResult], limit: int) -> list[DependencyResult]:
    ordered = sorted(deps, key=lambda dep: dep.score)
    return ordered[:limit] if limit > 0 else ordered


def _render_dependency(console: Console, dep: DependencyResult, options: ReportOptions) -> None:
    """Render a single dependency entry."""
    header = Text.from_markup(f"  {_grade_badge(dep.grade)} ")
    header.append(f"{dep.name:<30.30}", style="bold")
    header.append(f" {dep.version_constraint} → {dep.latest_version}", style="dim")
    console.print(header)

    parts = [f"{_score_bar(dep.score)} [bold]{dep.score}[/bold]/100"]

    if dep.maintenance is not None:
        color = MAINTENANCE_COLORS[dep.maintenance.status]
        parts.append(f"[{color}]{dep.maintenance.status.value}[/{color}]")
    else:
        parts.append("[dim]unknown[/dim]")

    if dep.popularity is not None:
        downloads = f"{dep.popularity.weekly_downloads:,}"
        parts.append(f"[dim]{downloads}/wk[/dim] {TREND_ARROWS[dep.popularity.trend]}")
    else:
        parts.append("[dim]?/wk -[/dim]")

    size = dep.size.unpacked_size_human if dep.size is not None else "?"
    parts.append(f"[dim]{size}[/dim]")

    if dep.security is None:
        parts.append("[dim]? security unknown[/dim]")
    elif dep.security.vulnerability_count == 0:
        parts.append("[green]✓ secure[/green]")
    else:
        color = "yellow" if dep.security.severity == Severity.LOW else "red"
        vulns = _plural(dep.security.vulnerability_count, "vuln")
        parts.append(f"[{color}]✗ {vulns} ({dep.security.severity.value})[/{color}]")

    console.print("    " + "  ".join(parts))

    if dep.error:
        console.print(f"    [red]! {escape(dep.error)}[/red]")

    if options.fix and dep.alternative:
        console.print(
            f"    [magenta]↳ Consider: [bold]{dep.alternative.name}[/bold][/magenta]"
            f"[dim] - {dep.alternative.reason}[/dim]"
        )

    console.print()


def _render_summary(console: Console, result: ProjectResult, options: ReportOptions) -> None:
    """Render the summary section at the bottom."""
    deps = result.in_scope(options.dev)

    console.print(f"  [dim]{RULE}[/dim]")
    console.print()
    console.print(
        f"  [bold]Project Health:[/bold] {_grade_badge(result.project_grade)}  "
        f"{_score_bar(result.project_score)} [bold]{result.project_score}[/bold]/100"
    )
    console.print()

    grades = {grade: 0 for grade in Grade}
    for dep in deps:
        grades[dep.grade] += 1
    distribution = "  ".join(
        f"[{GRADE_COLORS[grade]}]{grade.value}:{count}[/{GRADE_COLORS[grade]}]"
        for grade, count in grades.items()
    )
    console.print(f"  [bold]Grades:[/bold] {distribution}")

    noun = "dependency" if len(deps) == 1 else "dependencies"
    total = f"  [bold]Total:[/bold] {len(deps)} {noun}"
    if options.dev:
        total += f" ({len(result.dependencies)} prod, {len(result.dev_dependencies)} dev)"
    console.print(total)

    abandoned = sum(
        1 for dep in deps
        if dep.maintenance and dep.maintenance.status == MaintenanceStatus.ABANDONED
    )
    vulnerable = sum(1 for dep in deps if dep.security and dep.security.vulnerability_count > 0)
    healthy = grades[Grade.A] + grades[Grade.B]

    if abandoned:
        console.print(f"  [red]⚠ {_plural(abandoned, 'abandoned package')}[/red]")
    if vulnerable:
        console.print(f"  [red]⚠ {_plural(vulnerable, 'package')} with known vulnerabilities[/red]")
    if healthy:
        console.print(f"  [green]✓ {_plural(healthy, 'healthy package')} (A or B)[/green]")


def _render_quiet(console: Console, result: ProjectResult, options: ReportOptions) -> None:
    """Render the project score and the D/F offenders only."""
    deps = result.in_scope(options.dev)
    console.print()
    console.print(
        f"  depscope: {_grade_badge(result.project_grade)} {result.project_score}/100 "
        f"({len(deps)} deps)"
    )

    offenders = _worst_first(
        [dep for dep in deps if dep.grade in (Grade.D, Grade.F)],
        options.limit,
    )
    if offenders:
        console.print()
        console.print("  Issues:")
        for dep in offenders:
            line = f"  {_grade_badge(dep.grade)} {dep.name}"
            if dep.maintenance and dep.maintenance.status == MaintenanceStatus.ABANDONED:
                line += " [red](abandoned)[/red]"
            if dep.security and dep.security.vulnerability_count > 0:
                line += f" [red]({dep.security.vulnerability_count} vulns)[/red]"
            console.print(line)
    console.print()


def render(result: ProjectResult, options: ReportOptions, console: Console | None = None) -> None:
    """Render a project report to the terminal.

    Args:
        result: Project analysis.
        options: Report options.
        console: Console to print to. Defaults to stdout.
    """
    console = console or Console()

    if options.quiet:
        _render_quiet(console, result, options)
        return

    console.print()
    console.print("  [bold cyan]depscope[/bold cyan][dim] - Dependency Health Report[/dim]")
    console.print(f"  [dim]{RULE}[/dim]")
    console.print()

    if result.dependencies:
        console.print(
            f"  [bold]Production Dependencies[/bold][dim] ({len(result.dependencies)})[/dim]"
        )
        console.print()
        for dep in _worst_first(result.dependencies, options.limit):
            _render_dependency(console, dep, options)

    if options.dev and result.dev_dependencies:
        console.print(f"  [bold]Dev Dependencies[/bold][dim] ({len(result.dev_dependencies)})[/dim]")
        console.print()
        for dep in _worst_first(result.dev_dependencies, options.limit):
            _render_dependency(console, dep, options)

    _render_summary(console, result, options)
    console.print()
