"""Command-line interface for point_patterns.

Provides commands for:
- discover: Compress a point set into a pattern cover (COSIATEC / SIATECCompress)
- mtps: List or write maximal translatable patterns (SIA / SIAR)
- tecs: List or write translational equivalence classes (SIATEC / SIATEC-C / SIATEC-CH)
- match: Find occurrences of a query in a target point set
- info: Show point set information
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .core import PointPatternsError, PointSet

app = typer.Typer(
    name="point-patterns",
    help="Translational pattern discovery in symbolic music point sets",
    rich_markup_mode="markdown",
)
console = Console()

# Points shown per pattern in tables
_PREVIEW_POINTS = 4


@dataclass
class StageTimings:
    """Wall time and output size of each stage of a command.

    Stages are timed with the stage() context manager; the number of items
    a stage produced (points, patterns, files) is recorded with count().
    """

    seconds: Dict[str, float] = field(default_factory=dict)
    items: Dict[str, int] = field(default_factory=dict)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.seconds[name] = time.perf_counter() - start

    def count(self, name: str, items: int) -> None:
        self.items[name] = items

    @property
    def total_time(self) -> float:
        return sum(self.seconds.values())

    def print_summary(self) -> None:
        """Print a stage table to the console."""
        table = Table(title="Timing Summary")
        table.add_column("Stage", style="cyan")
        table.add_column("Seconds", style="green", justify="right")
        table.add_column("Items", style="magenta", justify="right")
        for name, seconds in self.seconds.items():
            items = self.items.get(name)
            table.add_row(name, f"{seconds:.3f}", "" if items is None else str(items))
        table.add_row("[bold]total[/bold]", f"[bold]{self.total_time:.3f}[/bold]", "")
        console.print(table)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "stages": {
                name: {"seconds": seconds, "items": self.items.get(name)}
                for name, seconds in self.seconds.items()
            },
            "total_time": self.total_time,
        }


def _parse_list(text: Optional[str], cast, option: str) -> Optional[List]:
    """Parse a comma-separated option value, exiting on bad input."""
    if text is None:
        return None
    try:
        return [cast(part.strip()) for part in text.split(",") if part.strip()]
    except ValueError:
        console.print(f"[red]Error: Invalid value for {option}: {text}[/red]")
        raise typer.Exit(1)


def _load_point_set(
    input_file: Path,
    columns: Optional[str] = None,
    onset_decimals: Optional[int] = None,
) -> PointSet:
    """Load a point set for a command, exiting with status 1 on failure."""
    from .input import PointSetLoader

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    selected = _parse_list(columns, int, "--columns")
    try:
        loader = PointSetLoader(
            columns=tuple(selected) if selected else (0, 1),
            onset_decimals=onset_decimals,
        )
        return loader.load(str(input_file))
    except (PointPatternsError, ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _format_points(points) -> str:
    shown = [f"({', '.join(f'{c:g}' for c in p)})" for p in list(points)[:_PREVIEW_POINTS]]
    if len(points) > _PREVIEW_POINTS:
        shown.append("...")
    return " ".join(shown)


@app.command()
def discover(
    input_file: Path = typer.Argument(..., help="Input point set: CSV/TSV table or MIDI file"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write a JSON pattern report to this path"
    ),
    midi_output: Optional[Path] = typer.Option(
        None, "--midi", help="Render the cover to a MIDI file, one instrument per pattern"
    ),
    mode: str = typer.Option(
        "exact", "-m", "--mode", help="Compression mode: exact (COSIATEC) or fast (SIATECCompress)"
    ),
    min_compactness: float = typer.Option(
        0.0, "--min-compactness", help="Minimum compactness of a candidate pattern"
    ),
    measure: str = typer.Option(
        "region", "--measure", help="Compactness measure: region or span"
    ),
    weights: Optional[str] = typer.Option(
        None, "--weights", help="Comma-separated per-dimension weights for the span measure"
    ),
    min_ratio: float = typer.Option(
        1.0, "--min-ratio", help="Minimum compression ratio of a selected pattern"
    ),
    max_ioi: Optional[float] = typer.Option(
        None, "--max-ioi", help="Only consider patterns with onset gaps up to this value (SIATEC-C)"
    ),
    conjugates: bool = typer.Option(
        True, "--conjugates/--no-conjugates", help="Also consider conjugate TECs"
    ),
    keep_residual: bool = typer.Option(
        False, "--keep-residual", help="Report uncovered points as a residual instead of singleton patterns"
    ),
    columns: Optional[str] = typer.Option(
        None, "--columns", help="Comma-separated table columns to read (default: 0,1)"
    ),
    onset_decimals: Optional[int] = typer.Option(
        None, "--round-onsets", help="Round onsets to this many decimals"
    ),
    algorithm: str = typer.Option(
        "siatec", "-a", "--algorithm", help="Candidate TECs: siatec or siatec-ch (needs --max-ioi)"
    ),
    workers: int = typer.Option(
        1, "-w", "--workers", help="Processes used for the translator search"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
):
    """Discover repeated patterns and compress the point set into a pattern cover.

    **Examples:**

        point-patterns discover piece.csv

        point-patterns discover piece.mid -m fast -o patterns.json

        point-patterns discover piece.csv --measure span --weights 1,0.5 --json
    """
    from .config import DiscoveryConfig
    from .output import CoverMIDIExporter, JSONReportWriter
    from .pipeline import discover_patterns

    timings = StageTimings()

    with timings.stage("load"):
        point_set = _load_point_set(input_file, columns, onset_decimals)
    timings.count("load", len(point_set))

    parsed_weights = _parse_list(weights, float, "--weights")
    config = DiscoveryConfig(
        compression_mode=mode,
        min_compactness=min_compactness,
        compactness_measure=measure,
        dimension_weights=tuple(parsed_weights) if parsed_weights else None,
        min_compression_ratio=min_ratio,
        use_conjugates=conjugates,
        residual_as_singletons=not keep_residual,
        max_ioi=max_ioi,
        workers=workers,
        tec_algorithm=algorithm,
    )

    if not json_output:
        console.print(f"[blue]Loaded:[/blue] {input_file} ({len(point_set)} points, {point_set.dims}D)")
        console.print(f"[blue]Discovering patterns ({mode} mode)...[/blue]")

    try:
        with timings.stage("discover"):
            cover, stats = discover_patterns(point_set, config, return_stats=True)
        timings.count("discover", len(cover))

        writer = JSONReportWriter(piece=input_file.stem)
        if output is not None:
            with timings.stage("export"):
                writer.write_cover(cover, str(output))
        if midi_output is not None:
            with timings.stage("midi"):
                CoverMIDIExporter().export(cover, str(midi_output))
    except (PointPatternsError, ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        result = writer.cover_report(cover)
        result["input"] = str(input_file)
        result["stats"] = {
            "iterations": stats.iterations,
            "candidates_evaluated": stats.candidates_evaluated,
            "selected": stats.selected,
            "singletons": stats.singletons,
        }
        if verbose:
            result["timings"] = timings.to_dict()
        console.print_json(data=result)
        return

    console.print(
        f"  Patterns: {stats.selected} selected, {stats.singletons} singletons, "
        f"{len(cover.residual)} residual points"
    )
    console.print(
        f"  Encoding length: {cover.encoding_length} "
        f"(compression ratio {cover.compression_ratio:.3f})"
    )
    if output is not None:
        console.print(f"[blue]Report written to:[/blue] {output}")
    if midi_output is not None:
        console.print(f"[blue]MIDI written to:[/blue] {midi_output}")

    if verbose:
        console.print(
            f"  Iterations: {stats.iterations}, candidates evaluated: {stats.candidates_evaluated}"
        )
        _show_cover_table(cover)
        timings.print_summary()

    console.print("[green]Discovery complete![/green]")


@app.command()
def mtps(
    input_file: Path = typer.Argument(..., help="Input point set: CSV/TSV table or MIDI file"),
    subdiagonals: int = typer.Option(
        0, "-r", "--subdiagonals", help="Run SIAR over this many subdiagonals (0 = full SIA)"
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the MTPs as a JSON pattern report (a directory with --batch-size)"
    ),
    piece: Optional[str] = typer.Option(
        None, "--piece", help="Piece name in the report (default: input file name)"
    ),
    batch_size: int = typer.Option(
        0, "--batch-size", help="Split the report into files of this many patterns (0 = one file)"
    ),
    limit: int = typer.Option(
        20, "--limit", help="Maximum rows shown in the table (0 = all)"
    ),
    columns: Optional[str] = typer.Option(
        None, "--columns", help="Comma-separated table columns to read (default: 0,1)"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """List the maximal translatable patterns of a point set.

    **Examples:**

        point-patterns mtps piece.csv --limit 0

        point-patterns mtps piece.csv -r 3 -o reports/ --batch-size 500
    """
    from .core import Tec
    from .discovery import Sia, SiaR

    point_set = _load_point_set(input_file, columns)
    algorithm = "SIAR" if subdiagonals > 0 else "SIA"

    try:
        if subdiagonals > 0:
            found = SiaR(subdiagonals=subdiagonals).compute_mtps(point_set)
        else:
            found = Sia().compute_mtps(point_set)
    except (PointPatternsError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    written = []
    if output is not None:
        # An MTP is reported as the TEC of its pattern and translator
        as_tecs = [Tec(m.pattern, (m.translator,)) for m in found]
        written = _write_pattern_report(
            as_tecs, algorithm, output, piece or input_file.stem, batch_size
        )

    if json_output:
        console.print_json(data={
            "input": str(input_file),
            "algorithm": algorithm,
            "written": [str(path) for path in written],
            "mtps": [
                {"translator": list(m.translator), "pattern": [list(p) for p in m.pattern]}
                for m in found
            ],
        })
        return

    console.print(f"[blue]{len(found)} MTPs[/blue] in {input_file.name}")
    table = Table(title="Maximal Translatable Patterns")
    table.add_column("Translator", style="cyan")
    table.add_column("Size", style="green")
    table.add_column("Pattern", style="yellow")

    shown = found if limit <= 0 else found[:limit]
    for m in shown:
        table.add_row(_format_points([m.translator]), str(len(m.pattern)), _format_points(m.pattern))
    console.print(table)
    for path in written:
        console.print(f"[blue]Report written to:[/blue] {path}")


@app.command()
def tecs(
    input_file: Path = typer.Argument(..., help="Input point set: CSV/TSV table or MIDI file"),
    max_ioi: Optional[float] = typer.Option(
        None, "--max-ioi", help="Run SIATEC-C with this maximum inter-onset interval"
    ),
    algorithm: str = typer.Option(
        "siatec", "-a", "--algorithm", help="siatec (SIATEC-C with --max-ioi) or siatec-ch (needs --max-ioi)"
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the TECs as a JSON pattern report (a directory with --batch-size)"
    ),
    piece: Optional[str] = typer.Option(
        None, "--piece", help="Piece name in the report (default: input file name)"
    ),
    batch_size: int = typer.Option(
        0, "--batch-size", help="Split the report into files of this many patterns (0 = one file)"
    ),
    limit: int = typer.Option(
        20, "--limit", help="Maximum rows shown in the table (0 = all)"
    ),
    columns: Optional[str] = typer.Option(
        None, "--columns", help="Comma-separated table columns to read (default: 0,1)"
    ),
    workers: int = typer.Option(
        1, "-w", "--workers", help="Processes used for the translator search"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """List the translational equivalence classes of a point set.

    **Examples:**

        point-patterns tecs piece.csv --max-ioi 2

        point-patterns tecs piece.csv -a siatec-ch --max-ioi 2 -o patterns.json --piece bwv847
    """
    from .discovery import Siatec, SiatecCH

    point_set = _load_point_set(input_file, columns)

    if max_ioi is not None and max_ioi <= 0:
        console.print(f"[red]Error: --max-ioi must be positive, got {max_ioi}[/red]")
        raise typer.Exit(1)
    if algorithm not in ("siatec", "siatec-ch"):
        console.print(f"[red]Error: Unknown algorithm: {algorithm}[/red]")
        raise typer.Exit(1)
    if algorithm == "siatec-ch" and max_ioi is None:
        console.print("[red]Error: siatec-ch needs --max-ioi[/red]")
        raise typer.Exit(1)

    if algorithm == "siatec-ch":
        name = "SIATEC-CH"
    else:
        name = "SIATEC" if max_ioi is None else "SIATEC-C"

    try:
        if algorithm == "siatec-ch":
            found = SiatecCH(max_ioi=max_ioi).compute_tecs(point_set)
        else:
            found = Siatec(max_ioi=max_ioi, workers=max(1, workers)).compute_tecs(point_set)
    except PointPatternsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    written = []
    if output is not None:
        written = _write_pattern_report(found, name, output, piece or input_file.stem, batch_size)

    if json_output:
        console.print_json(data={
            "input": str(input_file),
            "algorithm": name,
            "written": [str(path) for path in written],
            "tecs": [tec.to_dict() for tec in found],
        })
        return

    console.print(f"[blue]{len(found)} TECs[/blue] in {input_file.name} ({name})")
    table = Table(title="Translational Equivalence Classes")
    table.add_column("Size", style="green")
    table.add_column("Occurrences", style="magenta")
    table.add_column("Pattern", style="yellow")

    shown = found if limit <= 0 else found[:limit]
    for tec in shown:
        table.add_row(str(len(tec.pattern)), str(len(tec.translators)), _format_points(tec.pattern))
    console.print(table)
    for path in written:
        console.print(f"[blue]Report written to:[/blue] {path}")


def _write_pattern_report(found, source: str, output: Path, piece: str, batch_size: int) -> List[Path]:
    """Write TEC records to output, exiting with status 1 on failure."""
    from .output import JSONReportWriter

    writer = JSONReportWriter(piece=piece)
    try:
        if batch_size > 0:
            return writer.write_batches(found, source, str(output), batch_size)
        writer.write(found, source, str(output))
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return [output]


@app.command()
def match(
    query_file: Path = typer.Argument(..., help="Query pattern: CSV/TSV table or MIDI file"),
    target_file: Path = typer.Argument(..., help="Target point set: CSV/TSV table or MIDI file"),
    exact_pitch: bool = typer.Option(
        False, "--exact-pitch", help="Only report occurrences at the query's own pitch"
    ),
    min_match: int = typer.Option(
        0, "--min-match", help="Report partial matches of at least this many points (0 = exact only)"
    ),
    columns: Optional[str] = typer.Option(
        None, "--columns", help="Comma-separated table columns to read (default: 0,1)"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Find occurrences of a query pattern in a target point set."""
    from .discovery import QueryMatcher

    query = _load_point_set(query_file, columns)
    target = _load_point_set(target_file, columns)

    matcher = QueryMatcher(transposition_invariant=not exact_pitch)
    try:
        if min_match > 0:
            matches = matcher.find_partial(query, target, min_match_size=min_match)
            rows = [(m.translator, len(m), m.occurrence(target)) for m in matches]
        else:
            rows = [
                (t, len(query), query.translate(t))
                for t in matcher.find_translators(query, target)
            ]
    except PointPatternsError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        console.print_json(data={
            "query": str(query_file),
            "target": str(target_file),
            "matches": [
                {"translator": list(t), "matched": size, "points": [list(p) for p in occ]}
                for t, size, occ in rows
            ],
        })
        return

    console.print(f"[blue]{len(rows)} matches[/blue] of {query_file.name} in {target_file.name}")
    if rows:
        table = Table(title="Matches")
        table.add_column("Translator", style="cyan")
        table.add_column("Matched", style="green")
        table.add_column("Points", style="yellow")
        for translator, size, occurrence in rows:
            table.add_row(_format_points([translator]), f"{size}/{len(query)}", _format_points(occurrence))
        console.print(table)


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Input point set: CSV/TSV table or MIDI file"),
    columns: Optional[str] = typer.Option(
        None, "--columns", help="Comma-separated table columns to read (default: 0,1)"
    ),
):
    """Show information about a point set."""
    point_set = _load_point_set(input_file, columns)

    console.print(f"\n[bold]Point Set Info:[/bold] {input_file.name}")
    console.print(f"  Points: {len(point_set):,}")
    console.print(f"  Dimensions: {point_set.dims}")
    if point_set:
        lower, upper = point_set.bounds()
        console.print(f"  Lower bound: {_format_points([lower])}")
        console.print(f"  Upper bound: {_format_points([upper])}")
        pairs = len(point_set) * (len(point_set) - 1) // 2
        console.print(f"  Difference vectors: {pairs:,}")


def _show_cover_table(cover):
    """Display a pattern cover in a table."""
    table = Table(title="Pattern Cover")
    table.add_column("#", style="dim")
    table.add_column("Size", style="green")
    table.add_column("Occurrences", style="magenta")
    table.add_column("Covered", style="cyan")
    table.add_column("Pattern", style="yellow")

    for i, tec in enumerate(cover.tecs):
        table.add_row(
            f"P{i}",
            str(len(tec.pattern)),
            str(len(tec.translators)),
            str(len(tec.covered_set())),
            _format_points(tec.pattern),
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
