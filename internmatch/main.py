"""InternMatch CLI - Internship matching for university students."""

import json
import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from internmatch.config import (
    APPLY_MIN_TIER,
    DEFAULT_TOP_N,
    HIGH_THRESHOLD,
    LOG_FORMAT,
    LOG_LEVEL,
    MEDIUM_THRESHOLD,
    PERFECT_THRESHOLD,
    POSTINGS_PATH,
    SEARCH_MATCH_THRESHOLD,
    STUDENT_PATH,
)
from internmatch.data.loader import LoaderError, load_postings, load_student
from internmatch.matching.eligibility import can_apply
from internmatch.matching.scorer import evaluate
from internmatch.schemas.internship import AnnotatedPosting
from internmatch.schemas.match import MatchTier
from internmatch.services.match_service import recommend_from_files

app = typer.Typer(help="InternMatch - Internship matching based on student profiles")
console = Console()

TIER_STYLES = {
    MatchTier.PERFECTA: "bold green",
    MatchTier.ALTA: "green",
    MatchTier.MEDIA: "yellow",
    MatchTier.BAJA: "red",
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Match a student profile against stored internship postings."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else LOG_LEVEL,
        format=LOG_FORMAT,
    )


@app.command()
def match(
    student: Path = typer.Option(
        STUDENT_PATH, "--student", "-s", help="Path to student profile JSON"
    ),
    postings: Path = typer.Option(
        POSTINGS_PATH, "--postings", "-p", help="Path to stored postings JSON"
    ),
    tier: str | None = typer.Option(
        None, "--tier", "-t", help="Only show postings in this tier (perfecta, alta, media, baja)"
    ),
    career: str | None = typer.Option(None, "--career", help="Filter by accepted career"),
    area: str | None = typer.Option(None, "--area", help="Filter by area"),
    remote: bool = typer.Option(False, "--remote", help="Only show remote postings"),
    language: str | None = typer.Option(
        None, "--language", help="Filter by required language"
    ),
    year: int | None = typer.Option(
        None, "--year", help="Only show postings open to this year of study"
    ),
    duration: str | None = typer.Option(
        None, "--duration", help="Duration bucket (1-3 meses, 4-6 meses, 6+ meses, indefinido)"
    ),
    search: str | None = typer.Option(
        None, "--search", help="Keyword matched against title and company"
    ),
    top_n: int | None = typer.Option(
        DEFAULT_TOP_N, "--top-n", "-n", min=0, help="Number of postings to show"
    ),
    output_json: bool = typer.Option(
        False, "--json", help="Output results as JSON instead of pretty format"
    ),
) -> None:
    """Score stored postings for a student and display the listing."""
    if tier is not None:
        try:
            tier = MatchTier(tier)
        except ValueError:
            console.print(f"[red]Error: Unknown tier: {tier}[/red]")
            raise typer.Exit(1)

    try:
        stats, results = recommend_from_files(
            student_path=student,
            postings_path=postings,
            tier=tier,
            career=career,
            area=area,
            remote_only=remote,
            language=language,
            year=year,
            duration=duration,
            search_term=search,
            top_n=top_n,
        )
    except LoaderError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Error: Invalid student profile in {student}[/red]")
        console.print(str(e), markup=False)
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if output_json:
        _output_json(postings=results)
        return

    if stats["postings_skipped"]:
        console.print(
            f"[yellow]Skipped {stats['postings_skipped']} malformed postings. "
            "Run 'internmatch validate' for details.[/yellow]"
        )

    if not results:
        console.print("[yellow]No postings match your filters.[/yellow]")
        raise typer.Exit(0)

    _output_pretty(postings=results)
    console.print(
        f"\n{stats['eligible']} of {stats['postings_matched']} postings open for application"
    )


@app.command()
def score(
    posting_id: str = typer.Argument(..., help="Id of the posting to explain"),
    student: Path = typer.Option(
        STUDENT_PATH, "--student", "-s", help="Path to student profile JSON"
    ),
    postings: Path = typer.Option(
        POSTINGS_PATH, "--postings", "-p", help="Path to stored postings JSON"
    ),
) -> None:
    """Explain the match score of a single posting."""
    try:
        profile = load_student(student)
        loaded, _ = load_postings(postings)
    except LoaderError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Error: Invalid student profile in {student}[/red]")
        console.print(str(e), markup=False)
        raise typer.Exit(1)

    posting = next((p for p in loaded if p.id == posting_id), None)
    if posting is None:
        console.print(f"[red]Error: Posting not found: {posting_id}[/red]")
        raise typer.Exit(1)

    result = evaluate(profile, posting)
    style = TIER_STYLES[result.tier]

    content = [
        f"[cyan]Match Score:[/cyan] [{style}]{result.score}% - {result.tier.label}[/{style}]"
        f" ({result.points}/{result.total} requirements met)",
        f"[cyan]Career:[/cyan] {'yes' if result.career_match else 'no'}"
        f" (accepts: {', '.join(sorted(posting.careers))})",
        f"[cyan]Year:[/cyan] {'yes' if result.year_match else 'no'}"
        f" (minimum: {posting.min_year}, current: {profile.current_year})",
    ]

    missing = {
        "Soft skills": result.missing_soft_skills,
        "Technical skills": result.missing_technical_skills,
        "Languages": result.missing_languages,
    }
    if result.missing_skills:
        content.append("\n[cyan]Missing requirements:[/cyan]")
        for label, items in missing.items():
            if items:
                content.append(f"  • {label}: {', '.join(items)}")

    if can_apply(result.tier):
        content.append("\n[green]You can apply to this posting.[/green]")
    else:
        content.append("\n[red]Match too low to apply.[/red]")

    header = f"[bold]{posting.title or posting.id}[/bold]"
    if posting.company:
        header += f" at {posting.company}"

    console.print(Panel(renderable="\n".join(content), title=header, border_style="blue"))


@app.command()
def validate(
    postings: Path = typer.Option(
        POSTINGS_PATH, "--postings", "-p", help="Path to stored postings JSON"
    ),
) -> None:
    """Check stored postings and report the ones that cannot be matched."""
    try:
        loaded, skipped = load_postings(postings)
    except LoaderError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not skipped:
        console.print(f"[bold green]All {len(loaded)} postings are valid.[/bold green]")
        return

    table = Table(title="Skipped Postings")
    table.add_column("#", style="dim")
    table.add_column("Id", style="cyan")
    table.add_column("Reason", style="red")

    for item in skipped:
        table.add_row(str(item.index), escape(item.posting_id or "-"), escape(item.reason))

    console.print(table)
    console.print(f"[yellow]{len(loaded)} valid, {len(skipped)} skipped[/yellow]")
    raise typer.Exit(1)


@app.command()
def info() -> None:
    """Display matching thresholds and configured snapshot paths."""
    console.print("[bold cyan]InternMatch Configuration[/bold cyan]\n")

    table = Table(title="Matching Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Perfecta", f">= {PERFECT_THRESHOLD}")
    table.add_row("Alta", f">= {HIGH_THRESHOLD}")
    table.add_row("Media", f">= {MEDIUM_THRESHOLD}")
    table.add_row("Baja", f"< {MEDIUM_THRESHOLD}")
    table.add_row("Apply from tier", MatchTier(APPLY_MIN_TIER).label)
    table.add_row("Search threshold", str(SEARCH_MATCH_THRESHOLD))
    table.add_row("Student file", str(STUDENT_PATH))
    table.add_row("Postings file", str(POSTINGS_PATH))

    console.print(table)


def _output_json(postings: list[AnnotatedPosting]) -> None:
    """Output annotated postings as JSON to stdout."""
    output = [posting.model_dump(mode="json", by_alias=True) for posting in postings]
    json.dump(obj=output, fp=sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def _output_pretty(postings: list[AnnotatedPosting]) -> None:
    """Output annotated postings as a console table."""
    table = Table(title="Internship Opportunities")
    table.add_column("Id", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Company")
    table.add_column("Location")
    table.add_column("Match", justify="right", no_wrap=True)
    table.add_column("Tier", no_wrap=True)
    table.add_column("Apply", no_wrap=True)

    for posting in postings:
        style = TIER_STYLES[posting.match_tier]
        table.add_row(
            posting.id or "-",
            posting.title or "-",
            posting.company or "-",
            posting.location or "-",
            f"{posting.match_score}%",
            f"[{style}]{posting.match_tier.label}[/{style}]",
            "[green]yes[/green]" if can_apply(posting) else "[red]no[/red]",
        )

    console.print(table)


if __name__ == "__main__":
    app()
