"""ds-coverage CLI – Typer multi-command application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dscoverage.config.settings import DsCoverageSettings, load_settings
from dscoverage.core.doctor import CheckStatus, run_checks
from dscoverage.core.engine import DsCoverageEngine
from dscoverage.core.locator import DirectoryNotFoundError, SourceReadError
from dscoverage.core.report import Report
from dscoverage.utils.logger import (
    console, coverage_style, create_panel, create_table, print_error, print_info,
    print_success, print_warning, score_style,
)

__all__ = ["app"]

app = typer.Typer(
    name="ds-coverage",
    help="Design system coverage analysis for React/Tailwind codebases.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

ConfigOption = typer.Option(None, "--config", "-c", help="Path to ds-coverage.yaml")
DirOption = typer.Option(None, "--dir", "-d", help="Project root directory")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable debug logging")

_CHECK_ICON = {CheckStatus.PASS: "[green]✔[/green]", CheckStatus.WARN: "[yellow]⚠[/yellow]", CheckStatus.FAIL: "[red]✖[/red]"}
_COMPLEXITY_STYLE = {"simple": "green", "moderate": "yellow", "complex": "red"}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )


def _banner() -> None:
    console.print(Panel(
        Text("ds-coverage", style="bold magenta", justify="center"),
        subtitle="Design system coverage",
        border_style="magenta", expand=False, padding=(0, 4),
    ))
    console.print()


def _load(config: Path | None, project_dir: Path | None) -> tuple[DsCoverageSettings, Path]:
    root = (project_dir or Path.cwd()).resolve()
    try:
        settings = load_settings(config_path=config, search_dir=root)
    except ValidationError as exc:
        print_error(f"Invalid configuration:\n{escape(str(exc))}")
        raise typer.Exit(code=1)
    return settings, root


def _load_engine(config: Path | None, project_dir: Path | None) -> DsCoverageEngine:
    settings, root = _load(config, project_dir)
    return DsCoverageEngine(settings=settings, root_dir=root)


def _run_report(engine: DsCoverageEngine, message: str) -> Report:
    with console.status(f"[bold cyan]{message}"):
        try:
            return engine.run_report()
        except DirectoryNotFoundError as exc:
            print_error(escape(str(exc)))
            print_info("Check scan_dir in your config or pass --dir.")
            raise typer.Exit(code=1)
        except SourceReadError as exc:
            print_error(escape(str(exc)))
            raise typer.Exit(code=1)


def _print_diagnostics(report: Report) -> None:
    for diag in report.diagnostics:
        print_warning(f"Rule [bold]{diag.rule_id}[/bold] skipped: {escape(diag.message)}")


def _print_summary(report: Report, settings: DsCoverageSettings) -> None:
    s = report.summary
    compliant = s.total_files_scanned - s.total_files_with_violations
    style = coverage_style(s.coverage_percent)
    console.print(create_panel(
        f"[bold]Coverage:[/bold] [{style}]{s.coverage_percent}%[/{style}] "
        f"({compliant}/{s.total_files_scanned} files compliant)\n"
        f"[bold]Files found:[/bold] {s.total_files}  [bold]Violations:[/bold] {s.total_violations}  "
        f"[bold]Files affected:[/bold] {s.total_files_with_violations}",
        title="📊 Design System Coverage",
    ))

    rows = []
    for key, category in s.categories.items():
        rule = settings.violations.get(key)
        label = f"{rule.icon} {rule.label}".strip() if rule and rule.label else key
        rows.append([label, str(category.total_violations), str(category.total_files)])
    if rows:
        console.print(create_table("By category", [("Category", "bold"), ("Violations", "red"), ("Files", "cyan")], rows))

    console.print(
        f"  Flags: @ds-migrate: simple → {s.flags.migrate_simple}   "
        f"@ds-migrate: complex → {s.flags.migrate_complex}   @ds-todo → {s.flags.todo}"
    )

    if settings.component_analysis.enabled:
        ca = report.component_api.summary
        console.print(
            f"  Component API: {ca.total_components} components, avg score "
            f"[{score_style(ca.avg_compliance_score)}]{ca.avg_compliance_score}[/{score_style(ca.avg_compliance_score)}], "
            f"{ca.compliant_count} compliant, token score {ca.avg_token_score}%"
        )

    if report.migration is not None:
        ms = report.migration.summary
        console.print(
            f"  Migration → {report.migration.target_ds or 'target'}: {ms.migrated_count}/{ms.total_mappings} migrated "
            f"({ms.progress_percent}%), {ms.total_usages} usages in {ms.total_files_affected} files"
        )
    console.print()


@app.command()
def scan(
    config: Optional[Path] = ConfigOption,
    project_dir: Optional[Path] = DirOption,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Report JSON path"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not write the report"),
    verbose: bool = VerboseOption,
) -> None:
    """Run the full pipeline and write the JSON report."""
    _setup_logging(verbose)
    _banner()
    engine = _load_engine(config, project_dir)
    report = _run_report(engine, "Scanning design system coverage…")

    _print_diagnostics(report)
    _print_summary(report, engine.settings)

    if dry_run:
        print_info("Dry run – report not written.")
        raise typer.Exit(code=0)
    path = engine.write_report(report, output)
    print_success(f"Report written to {path}")


@app.command()
def components(
    config: Optional[Path] = ConfigOption,
    project_dir: Optional[Path] = DirOption,
    verbose: bool = VerboseOption,
) -> None:
    """List analyzed components, worst compliance score first."""
    _setup_logging(verbose)
    _banner()
    engine = _load_engine(config, project_dir)
    if not engine.settings.component_analysis.enabled:
        print_info("Component analysis is disabled.")
        raise typer.Exit(code=0)
    report = _run_report(engine, "Analysing component APIs…")
    _print_diagnostics(report)

    result = report.component_api
    if not result.components:
        print_warning("No components found in the configured directories.")
        raise typer.Exit(code=0)

    table = Table(title="🧩 Component API", show_lines=True, expand=True)
    table.add_column("Component", style="bold")
    table.add_column("Location")
    table.add_column("Score", justify="center")
    table.add_column("Tokens", justify="center")
    table.add_column("Issues")
    for c in result.components:
        style = score_style(c.compliance_score)
        issues = "\n".join(f"[{'red' if i.severity == 'error' else 'yellow'}]●[/] {i.message}" for i in c.issues)
        table.add_row(
            f"{c.name}\n[dim]{c.path}[/dim]", c.location, f"[{style}]{c.compliance_score}[/{style}]",
            f"{c.token_coverage.score}%", issues or "[green]none[/green]",
        )
    console.print(table)

    s = result.summary
    console.print(create_panel(
        f"[bold]Components:[/bold] {s.total_components}  [bold]Avg score:[/bold] {s.avg_compliance_score}  "
        f"[bold]Compliant (≥80):[/bold] {s.compliant_count}\n"
        f"[bold]CVA:[/bold] {s.uses_cva}  [bold]Radix:[/bold] {s.uses_radix}  "
        f"[bold]Correct naming:[/bold] {s.correct_api_naming}  [bold]Correct sizes:[/bold] {s.correct_size_values}",
        title="📋 Component Summary",
    ))


@app.command()
def migration(
    config: Optional[Path] = ConfigOption,
    project_dir: Optional[Path] = DirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show remaining usages of every migration mapping, pending first."""
    _setup_logging(verbose)
    _banner()
    engine = _load_engine(config, project_dir)
    if not engine.settings.migration.enabled:
        print_info("Migration tracking is disabled. Set migration.enabled in your config.")
        raise typer.Exit(code=0)
    report = _run_report(engine, "Tracking migration usage…")
    _print_diagnostics(report)

    result = report.migration
    if result is None:
        print_warning("No migration mappings configured or discovered.")
        raise typer.Exit(code=0)

    table = Table(title=f"🔀 Migration → {result.target_ds or 'target'}", show_lines=True, expand=True)
    table.add_column("Source", style="bold")
    table.add_column("Target")
    table.add_column("Complexity")
    table.add_column("Usages", justify="right")
    table.add_column("Files", justify="right")
    table.add_column("Status")
    for c in result.components:
        tier = _COMPLEXITY_STYLE.get(c.complexity, "white")
        status = "[green]migrated[/green]" if c.migrated else "[yellow]pending[/yellow]"
        table.add_row(
            c.source, c.target, f"[{tier}]{c.complexity}[/{tier}]",
            str(c.total_usages), str(c.files_affected), status,
        )
    console.print(table)

    s = result.summary
    console.print(create_panel(
        f"[bold]Mappings:[/bold] {s.total_mappings}  [bold]Migrated:[/bold] {s.migrated_count}  "
        f"[bold]Pending:[/bold] {s.pending_count}  [bold]Progress:[/bold] {s.progress_percent}%\n"
        f"[bold]Usages:[/bold] {s.total_usages} in {s.total_files_affected} files",
        title="📋 Migration Summary",
    ))


@app.command()
def roadmap(
    config: Optional[Path] = ConfigOption,
    project_dir: Optional[Path] = DirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show remediation phases and the directories with most violations."""
    _setup_logging(verbose)
    _banner()
    engine = _load_engine(config, project_dir)
    if not engine.settings.roadmap.enabled:
        print_info("Roadmap is disabled.")
        raise typer.Exit(code=0)
    report = _run_report(engine, "Building roadmap…")
    _print_diagnostics(report)

    plan = report.roadmap
    if not plan.phases:
        print_success("Nothing to do – no files match any roadmap phase.")
        raise typer.Exit(code=0)

    for number, phase in enumerate(plan.phases, start=1):
        console.rule(f"[bold cyan]Phase {number}: {phase.title}")
        console.print(f"  {phase.description}")
        if phase.business_case:
            console.print(f"  [dim]{phase.business_case}[/dim]")
        console.print(f"  [bold]{phase.files_count}[/bold] files, [bold]{phase.violations_count}[/bold] matches")
        for f in phase.files[:5]:
            console.print(f"    • {f.path} [dim]({f.count})[/dim]")
        console.print()

    if plan.directories:
        rows = [
            [d.path, str(d.total_violations), f"{d.files_with_violations}/{d.total_files}", f"{d.coverage_percent}%"]
            for d in plan.directories[:10]
        ]
        console.print(create_table(
            "📁 Top directories",
            [("Directory", "bold"), ("Violations", "red"), ("Files", "cyan"), ("Coverage", "green")],
            rows,
        ))


@app.command()
def doctor(
    config: Optional[Path] = ConfigOption,
    project_dir: Optional[Path] = DirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Validate the configuration and the project layout."""
    _setup_logging(verbose)
    _banner()
    settings, root = _load(config, project_dir)
    console.print(f"  Project root: {root}\n")
    console.print(f"  {_CHECK_ICON[CheckStatus.PASS]} Config loaded")

    checks = run_checks(settings, root)
    for check in checks:
        console.print(f"  {_CHECK_ICON[check.status]} {check.label}")
        if check.detail:
            console.print(f"     [dim]{escape(check.detail)}[/dim]")

    fails = sum(1 for c in checks if c.status is CheckStatus.FAIL)
    warns = sum(1 for c in checks if c.status is CheckStatus.WARN)
    console.print()
    if fails:
        print_error(f"{fails} issue(s) found. Fix them and re-run `ds-coverage doctor`.")
        raise typer.Exit(code=1)
    if warns:
        print_warning(f"{warns} warning(s). Your setup works but could be improved.")
    else:
        print_success(f"All {len(checks) + 1} checks passed.")


if __name__ == "__main__":
    app()
