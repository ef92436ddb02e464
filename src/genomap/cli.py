"""Command-line interface for genomap.

This module provides the main entry point for the genomap CLI tool.
It uses Click to define commands and rich for console output.

Commands:
    aa-to-nt: Convert an amino-acid position to nucleotides
    nt-to-aa: Convert a nucleotide position to an amino acid
    remap: Remap a genomic range down to its sequence-level region
    sequence: Remap a genomic range and print its sequence
    introns: List the introns of a transcript
    protein-feature: Map an amino-acid range onto the genome

Coordinates on the command line are 1-based and inclusive.

Example:
    $ genomap aa-to-nt 3
    $ genomap remap --assembly assembly.tsv --genome contigs.fa chr1 1100 1200 --strand -
    $ genomap introns --exons 100-199,300-399 --strand -
    $ genomap protein-feature --exons 100-199,300-399 --coding 150-350 --strand + 10 40
"""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from genomap import __version__
from genomap.assembly.mapper import AssemblyMapper
from genomap.config import Config
from genomap.coords.converters import aa_to_nt, nt_to_aa
from genomap.errors import GenomapError
from genomap.intervals.genomic import GenomicInterval, Strand, to_genomic_intervals
from genomap.io.assembly import FileAssemblySource
from genomap.transcripts import Transcript
from genomap.utils.logging import Timer, setup_logging

console = Console()

STRAND_CHOICES = click.Choice(["+", "-", "1", "-1"])

CLI_ERRORS = (GenomapError, OSError, KeyError, ValueError)


# =============================================================================
# Helpers
# =============================================================================


def _parse_range(value: str) -> tuple[int, int]:
    start, sep, end = value.strip().partition("-")
    if not sep:
        raise click.BadParameter(f"Expected START-END, got '{value}'")
    try:
        return int(start), int(end)
    except ValueError:
        raise click.BadParameter(f"Expected integer START-END, got '{value}'") from None


def _parse_ranges(ctx: click.Context, param: click.Parameter, value: str | None):
    if value is None:
        return None
    if param.name == "coding":
        return _parse_range(value)
    return [_parse_range(item) for item in value.split(",") if item.strip()]


def _fail(ctx: click.Context, error: Exception) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    if ctx.obj.get("verbose"):
        console.print_exception()
    raise SystemExit(1)


def _open_mapper(
    ctx: click.Context,
    assembly: Path,
    genome: Path | None,
    sequence_levels: tuple[str, ...],
) -> tuple[AssemblyMapper, FileAssemblySource]:
    source = FileAssemblySource.from_paths(
        assembly, fasta=genome, sequence_levels=sequence_levels
    )
    mapper = AssemblyMapper.from_config(source, ctx.obj["config"].mapper)
    return mapper, source


# =============================================================================
# Main group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="genomap")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="TOML configuration file.",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool, config_path: Path | None) -> None:
    """genomap: interval algebra and coordinate mapping for genomic features."""
    ctx.ensure_object(dict)

    try:
        config = Config.load(config_path)
    except CLI_ERRORS as e:
        raise click.BadParameter(str(e), param_hint="--config") from e

    verbosity = config.logging.verbosity
    if verbose:
        verbosity = 2
    elif quiet:
        verbosity = 0
    setup_logging(verbosity, config.logging.log_file, config.logging.use_rich)

    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config"] = config


# =============================================================================
# Coordinate conversion commands
# =============================================================================


@main.command("aa-to-nt")
@click.argument("position", type=int)
@click.option("--offset", type=int, default=0, show_default=True, help="Added to the result.")
def aa_to_nt_command(position: int, offset: int) -> None:
    """Print the first nucleotide of the codon for amino acid POSITION."""
    click.echo(aa_to_nt(position, offset))


@main.command("nt-to-aa")
@click.argument("position", type=int)
@click.option("--offset", type=int, default=0, show_default=True, help="Added to the result.")
def nt_to_aa_command(position: int, offset: int) -> None:
    """Print the amino acid and codon phase for nucleotide POSITION."""
    aa, remainder = nt_to_aa(position, offset)
    click.echo(f"{aa}\t{remainder}")


# =============================================================================
# Assembly commands
# =============================================================================


def _assembly_options(command):
    command = click.option(
        "--sequence-level",
        "sequence_levels",
        multiple=True,
        help="Region ID to treat as sequence-level. Repeatable.",
    )(command)
    command = click.option(
        "--genome",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="FASTA of sequence-level regions.",
    )(command)
    command = click.option(
        "--assembly",
        "-a",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        required=True,
        help="Assembly table (TSV).",
    )(command)
    return command


@main.command()
@_assembly_options
@click.argument("region")
@click.argument("start", type=int)
@click.argument("end", type=int)
@click.option("--strand", type=STRAND_CHOICES, default="+", show_default=True)
@click.pass_context
def remap(
    ctx: click.Context,
    assembly: Path,
    genome: Path | None,
    sequence_levels: tuple[str, ...],
    region: str,
    start: int,
    end: int,
    strand: str,
) -> None:
    """Remap REGION:START-END down to its sequence-level region."""
    try:
        mapper, source = _open_mapper(ctx, assembly, genome, sequence_levels)
        try:
            with Timer(f"Remapping {region}:{start}-{end}"):
                target_id, target = mapper.remap_genomic(
                    region, GenomicInterval(start, end, strand)
                )
        finally:
            source.close()
    except CLI_ERRORS as e:
        _fail(ctx, e)

    click.echo(f"{target_id}\t{target.start}\t{target.end}\t{target.strand}")


@main.command()
@_assembly_options
@click.argument("region")
@click.argument("start", type=int)
@click.argument("end", type=int)
@click.option("--strand", type=STRAND_CHOICES, default="+", show_default=True)
@click.option("--width", type=int, default=60, show_default=True, help="FASTA line width.")
@click.pass_context
def sequence(
    ctx: click.Context,
    assembly: Path,
    genome: Path | None,
    sequence_levels: tuple[str, ...],
    region: str,
    start: int,
    end: int,
    strand: str,
    width: int,
) -> None:
    """Print the sequence of REGION:START-END as FASTA."""
    genomic = None
    try:
        genomic = GenomicInterval(start, end, strand)
        mapper, source = _open_mapper(ctx, assembly, genome, sequence_levels)
        try:
            seq = mapper.fetch_sequence(region, genomic)
        finally:
            source.close()
    except CLI_ERRORS as e:
        _fail(ctx, e)

    click.echo(f">{region}:{genomic}")
    for i in range(0, len(seq), width):
        click.echo(seq[i : i + width])


# =============================================================================
# Transcript commands
# =============================================================================


@main.command()
@click.option(
    "--exons",
    required=True,
    callback=_parse_ranges,
    help="Comma-separated exon ranges, e.g. 100-199,300-399.",
)
@click.option("--strand", type=STRAND_CHOICES, default="+", show_default=True)
@click.pass_context
def introns(ctx: click.Context, exons: list[tuple[int, int]], strand: str) -> None:
    """List introns 5' to 3' for a transcript's exons."""
    try:
        transcript = Transcript.from_tuples("transcript", "region", strand, exons)
    except CLI_ERRORS as e:
        _fail(ctx, e)

    table = Table(title=f"Introns ({Strand.from_value(strand)} strand)")
    table.add_column("#", justify="right")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Length", justify="right")
    for i, intron in enumerate(transcript.introns, start=1):
        table.add_row(str(i), str(intron.start), str(intron.end), str(intron.length))

    if not transcript.introns:
        if not ctx.obj["quiet"]:
            console.print("[yellow]No introns[/yellow]")
        return
    console.print(table)


@main.command("protein-feature")
@click.option(
    "--exons",
    required=True,
    callback=_parse_ranges,
    help="Comma-separated exon ranges, e.g. 100-199,300-399.",
)
@click.option(
    "--coding",
    required=True,
    callback=_parse_ranges,
    help="Genomic coding range START-END.",
)
@click.option("--strand", type=STRAND_CHOICES, default="+", show_default=True)
@click.argument("aa_start", type=int)
@click.argument("aa_end", type=int)
@click.pass_context
def protein_feature(
    ctx: click.Context,
    exons: list[tuple[int, int]],
    coding: tuple[int, int],
    strand: str,
    aa_start: int,
    aa_end: int,
) -> None:
    """Print the genomic pieces covering amino acids AA_START-AA_END."""
    try:
        transcript = Transcript.from_tuples("transcript", "region", strand, exons, coding)
        feature = transcript.protein_to_genomic(aa_start, aa_end)
    except CLI_ERRORS as e:
        _fail(ctx, e)

    for piece in to_genomic_intervals(feature, transcript.strand):
        click.echo(f"{piece.start}\t{piece.end}\t{piece.strand}")


if __name__ == "__main__":
    main()
