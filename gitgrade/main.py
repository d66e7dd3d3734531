import argparse
import asyncio
import sys
from typing import Optional, Sequence
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table
from gitgrade.agent.analyst import RepositoryAnalyst
from gitgrade.config import Settings
from gitgrade.errors import GitGradeError
from gitgrade.models.analysis import AnalysisReport
from gitgrade.models.repository import RepositoryDetails
from gitgrade.renderer.engine import render_to_html
from gitgrade.renderer.manifest import create_manifest
from gitgrade.utils.logging import configure_logging

console = Console()
# spinners, notices and errors; stdout stays clean for --json
err_console = Console(stderr=True)

# One exit code per failure kind so scripts can react differently
EXIT_CODES = {
    "configuration": 2,
    "invalid_request": 3,
    "not_found": 4,
    "unauthorized": 5,
    "remote_api": 6,
    "model_unavailable": 7,
    "malformed_model_output": 8,
    "timeout": 9,
}


def target_to_url(target: str) -> str:
    """
    Accepts either a GitHub URL or an `owner/repo` shorthand.
    """
    target = target.strip()
    if "github.com" in target:
        return target
    return f"https://github.com/{target}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="GitGrade: AI-powered review of a GitHub repository")
    parser.add_argument("target", help="GitHub repository URL or owner/repo")
    parser.add_argument("--model", help="Gemini model to use (overrides GITGRADE_MODEL)", default=None)
    parser.add_argument("-y", "--yes", action="store_true", help="Grade without asking for confirmation")
    parser.add_argument("--output", help="Also write the report to a .html or .json file", default=None)
    parser.add_argument("--json", action="store_true", help="Print the report as JSON instead of the formatted view")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    return parser


def show_details(details: RepositoryDetails) -> None:
    body = f"[bold cyan]{details.full_name}[/bold cyan]\n{details.html_url}"
    if details.description:
        body += f"\n\n{details.description}"
    body += f"\n\n⭐ {details.stars:,}   🍴 {details.forks:,}"
    console.print(Panel(body, title="Repository"))


def show_report(report: AnalysisReport, commit_window: int) -> None:
    colour = "green" if report.score >= 75 else "yellow" if report.score >= 50 else "red"
    console.print(Panel(
        f"[bold {colour}]{report.score}/100[/bold {colour}]  [italic]{report.rating}[/italic]\n\n{report.summary}",
        title="Analysis Complete",
    ))

    table = Table(title="Roadmap", show_lines=True)
    table.add_column("#", justify="right")
    table.add_column("Action", style="bold")
    table.add_column("Why")
    for i, item in enumerate(report.roadmap, start=1):
        table.add_row(str(i), item.title, item.explanation)
    console.print(table)
    console.print(f"[dim]Commit activity is based on the {commit_window} most recent commits only.[/dim]")


def write_output(path: str, report: AnalysisReport, details: RepositoryDetails, commit_window: int) -> None:
    if path.endswith(".json"):
        with open(path, "w", encoding="utf-8") as f:
            f.write(report.model_dump_json(indent=2))
    else:
        render_to_html(create_manifest(report, details, commit_window=commit_window), path)
    err_console.print(f"[bold green]Report Generated: {path}[/bold green]")


def run(args: argparse.Namespace) -> int:
    settings = Settings.from_env(model=args.model)
    analyst = RepositoryAnalyst(settings)

    with err_console.status("Fetching repository details..."):
        details = asyncio.run(analyst.resolve(target_to_url(args.target)))
    if not args.json:
        show_details(details)

    # --json is for scripts: never prompt
    interactive = not (args.yes or args.json)
    if interactive and not Confirm.ask("Grade this repository?", console=console, default=True):
        err_console.print("Nothing graded.")
        return 0

    owner, _, name = details.full_name.partition("/")
    with err_console.status("Grading repository... This can take up to a minute."):
        report = asyncio.run(analyst.analyze(owner, name))

    if args.json:
        console.print_json(report.model_dump_json())
    else:
        show_report(report, settings.commit_limit)

    if args.output:
        write_output(args.output, report, details, settings.commit_limit)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        code = run(args)
    except GitGradeError as e:
        err_console.print(f"[red]{type(e).__name__}:[/red] {e.message}")
        code = EXIT_CODES.get(e.kind, 1)
    sys.exit(code)


if __name__ == "__main__":
    main()
