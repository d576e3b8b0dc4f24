"""di2hap: diploid to haploid genotype conversion CLI."""

import json
import logging
import time
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .config import (
    OUTPUT_FORMATS,
    ConfigurationError,
    ConvertConfig,
    load_config,
    validate_config,
)
from .converter import ConversionStats, HaploidConverter
from .genotypes.codec import GenotypeEncodingError
from .ploidy.ploidy_map import build_ploidy_map
from .ploidy.rewriter import GenotypeShapeError
from .ploidy.verifier import VerificationFailure
from .sex_map import load_sex_map
from .vcf_io import STDIO_PATH, SinkError, SourceError, VariantSink, VariantSource

EXIT_IO_ERROR = 1
EXIT_CONFIGURATION_ERROR = 3
EXIT_VERIFICATION_ERROR = 4


def version_callback(value: bool) -> None:
    if value:
        print(__version__)
        raise typer.Exit()


app = typer.Typer(
    name="di2hap", help="Convert diploid VCF/BCF genotypes to haploid using a sex map"
)
console = Console(stderr=True, emoji=False)


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", callback=version_callback, is_eager=True, help="Show version and exit"
        ),
    ] = None,
) -> None:
    pass


def setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure logging based on verbosity flags."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("di2hap").setLevel(level)


def _build_config(config_file: Path | None, overrides: dict[str, Any]) -> ConvertConfig:
    """Merge an optional TOML config file with explicitly given CLI options."""
    if config_file:
        return load_config(config_file, overrides)
    validate_config(overrides)
    return ConvertConfig(**overrides)


def _write_report(report: Path, report_data: dict[str, Any]) -> None:
    report_data["timestamp"] = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
    with open(report, "w") as f:
        json.dump(report_data, f, indent=2)
        f.write("\n")


def _run_conversion(
    input_path: str,
    output: str,
    config: ConvertConfig,
    sex_map: Path | None,
    show_progress: bool,
) -> ConversionStats:
    entries = load_sex_map(sex_map) if sex_map else []

    with VariantSource(input_path) as source:
        ploidy_map = build_ploidy_map(
            source.samples,
            entries,
            haploid_code=config.haploid_code,
            default_haploid=config.all_haploid,
        )
        converter = HaploidConverter(ploidy_map, source.samples, verify=config.verify)

        with VariantSink(output, source, config.output_format) as sink:
            if not show_progress:
                return converter.run(source, sink)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress_bar:
                task = progress_bar.add_task("Converting variants...", total=None)

                def update_progress(total: int) -> None:
                    progress_bar.update(task, description=f"Converted {total:,} variants")

                return converter.run(
                    source,
                    sink,
                    progress_callback=update_progress,
                    progress_interval=config.progress_interval,
                )


@app.command()
def convert(
    input_path: Annotated[
        str, typer.Argument(help="Input file (.vcf, .vcf.gz, .bcf); '-' reads stdin")
    ] = STDIO_PATH,
    output: Annotated[
        str, typer.Option("--output", "-o", help="Output path ('-' writes stdout)")
    ] = STDIO_PATH,
    output_format: Annotated[
        str | None,
        typer.Option(
            "--output-format",
            "-O",
            help=f"Output file format ({', '.join(OUTPUT_FORMATS)}; default: vcf)",
        ),
    ] = None,
    sex_map: Annotated[
        Path | None,
        typer.Option("--sex-map", "-m", help="Tab-delimited sample ID to ploidy code map"),
    ] = None,
    haploid_code: Annotated[
        str | None,
        typer.Option(
            "--haploid-code", "-c", help="Code used for haploid samples in sex map (default: 0)"
        ),
    ] = None,
    verify: bool = typer.Option(
        False,
        "--verify",
        "-V",
        help=(
            "Verify genotypes are homozygous before converting. Every call position is"
            " compared, so a haploid call stored in a diploid-width record (VCF '1' next"
            " to '0/1') fails the check"
        ),
    ),
    all_haploid: bool = typer.Option(
        False,
        "--all-haploid",
        help="Presume every sample haploid unless the sex map says otherwise",
    ),
    config_file: Annotated[
        Path | None, typer.Option("--config", help="TOML configuration file")
    ] = None,
    report: Annotated[
        Path | None, typer.Option("--report", "-r", help="Write JSON report to file")
    ] = None,
    log_file: Annotated[Path | None, typer.Option("--log", help="Write log to file")] = None,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show progress"),
) -> None:
    """Convert genotypes of haploid-designated samples to haploid.

    When every sample is haploid the GT field is collapsed to one call per
    sample. Otherwise haploid samples keep their first call and the remaining
    positions are marked end-of-vector.
    """
    setup_logging(verbose, quiet)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logging.getLogger("di2hap").addHandler(file_handler)

    overrides: dict[str, Any] = {}
    if output_format is not None:
        overrides["output_format"] = output_format
    if haploid_code is not None:
        overrides["haploid_code"] = haploid_code
    if verify:
        overrides["verify"] = True
    if all_haploid:
        overrides["all_haploid"] = True

    try:
        config = _build_config(config_file, overrides)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(EXIT_CONFIGURATION_ERROR) from None
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error: {escape(str(e))}[/red]")
        raise typer.Exit(EXIT_CONFIGURATION_ERROR) from None

    if config_file and not (verbose or quiet):
        logging.getLogger("di2hap").setLevel(config.log_level)

    if input_path != STDIO_PATH and not Path(input_path).exists():
        console.print(f"[red]Error: Input file not found: {escape(input_path)}[/red]")
        raise typer.Exit(EXIT_IO_ERROR)

    report_data: dict[str, Any] = {
        "input_file": input_path,
        "output_file": output,
        "output_format": config.output_format,
        "verify": config.verify,
    }

    try:
        stats = _run_conversion(
            input_path, output, config, sex_map, show_progress=progress and not quiet
        )
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error: {escape(str(e))}[/red]")
        raise typer.Exit(EXIT_CONFIGURATION_ERROR) from None
    except VerificationFailure as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if report:
            report_data.update(status="verification_failed", error=str(e))
            _write_report(report, report_data)
        raise typer.Exit(EXIT_VERIFICATION_ERROR) from None
    except (SourceError, SinkError, GenotypeEncodingError, GenotypeShapeError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(EXIT_IO_ERROR) from None

    if not quiet:
        console.print(f"[green]✓[/green] Converted {stats.variants_processed:,} variants")
        console.print(f"  Haploid samples: {stats.haploid_count:,} of {stats.sample_count:,}")

    if report:
        report_data.update(status="success", **stats.to_dict())
        _write_report(report, report_data)
        if not quiet:
            console.print(f"  Report: {escape(str(report))}")


@app.command()
def doctor() -> None:
    """Check that runtime dependencies are installed."""
    from .doctor import DependencyChecker

    console.print("\n[bold]di2hap System Check[/bold]")
    console.print("─" * 30)

    checker = DependencyChecker()
    all_passed = True
    for result in checker.check_all():
        if result.passed:
            version_str = f" ({result.version})" if result.version else ""
            console.print(f"[green]✓[/green] {result.name}{version_str}")
        else:
            all_passed = False
            console.print(f"[red]✗[/red] {result.name}")
            if result.message:
                console.print(f"    {escape(result.message)}")

    console.print()

    if all_passed:
        console.print("[green]All systems ready![/green]")
    else:
        console.print("[yellow]Some checks failed.[/yellow]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
