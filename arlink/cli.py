"""
Command-line interface for ARlink
"""

import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__, check_dependencies, get_info
from .config import Config, get_default_config, load_config, save_config
from .core import RegulatoryAssociationAnalysis
from .utils import setup_logging, validate_environment


class CLIContext:
    def __init__(self):
        self.config_file: Optional[Path] = None
        self.config: Optional[Config] = None
        self.verbose: bool = False
        self.quiet: bool = False


def _fail(cli_ctx: CLIContext, message: str, error: Exception) -> None:
    click.echo(f"Error: {message}: {error}", err=True)
    if cli_ctx.verbose:
        import traceback

        traceback.print_exc()
    sys.exit(1)


def _finish(analysis: RegulatoryAssociationAnalysis, output: Optional[str]) -> None:
    """Print the report and export tables"""

    failed = [step for step, entry in analysis.results.items() if not entry["success"]]

    click.echo(analysis.report())

    if output:
        exported = analysis.export(output)
        click.echo(f"Results written to: {output}")
        for name, path in exported.items():
            click.echo(f"  {name}: {path.name}")
        analysis.save_results(Path(output) / f"{analysis.config.project_name}_results.json")

    if failed:
        for step in failed:
            click.echo(f"Step {step} failed: {analysis.results[step]['error']}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(__version__)
@click.option(
    "--config", "-c", type=click.Path(exists=True), help="Configuration file path"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", "-q", is_flag=True, help="Enable quiet mode (minimal output)")
@click.pass_context
def main(ctx, config, verbose, quiet):
    """
    ARlink: link accelerated regions to genes

    Associates accelerated noncoding regions with genes through the TADs
    the genes fall in and through GREAT-style regulatory domains, then
    counts associated regions per gene.
    """
    cli_ctx = CLIContext()
    cli_ctx.verbose = verbose
    cli_ctx.quiet = quiet

    log_level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    setup_logging(level=log_level)

    if config:
        cli_ctx.config_file = Path(config)
        cli_ctx.config = load_config(cli_ctx.config_file)

    ctx.obj = cli_ctx


@main.command()
def info():
    """Show ARlink package information"""

    info_data = get_info()

    click.echo("=" * 50)
    click.echo(f"ARlink v{info_data['version']}")
    click.echo("=" * 50)
    click.echo(f"Description: {info_data['description']}")
    click.echo(f"Python version: {info_data['python_version']}")
    click.echo()

    click.echo("Available modules:")
    for module in info_data["modules"]:
        click.echo(f"  - {module}")
    click.echo()

    deps = check_dependencies()
    click.echo("Dependency status:")
    for dep, available in deps.items():
        status = "✓" if available else "✗"
        click.echo(f"  {status} {dep}")

    issues = validate_environment()
    if issues:
        click.echo()
        click.echo("Environment issues:")
        for issue in issues:
            click.echo(f"  ✗ {issue}")


@main.command()
@click.argument("output_file", type=click.Path())
@click.option(
    "--format",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    help="Output format for configuration file",
)
def init_config(output_file, format):
    """Initialize a new ARlink configuration file"""

    output_path = Path(output_file)
    if format == "json" and output_path.suffix.lower() != ".json":
        output_path = output_path.with_suffix(".json")

    if output_path.exists():
        if not click.confirm(f"File {output_path} already exists. Overwrite?"):
            click.echo("Configuration initialization cancelled.")
            return

    try:
        save_config(get_default_config(), output_path)
    except Exception as e:
        click.echo(f"Error creating configuration file: {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration file created: {output_path}")
    click.echo("Edit this file to set input tables and domain parameters.")


@main.command()
@click.argument("config_file", type=click.Path(exists=True))
def validate_config(config_file):
    """Validate an ARlink configuration file"""

    from .config import validate_config as validate_config_func

    try:
        config = load_config(config_file)
    except Exception as e:
        click.echo(f"Configuration validation failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration loaded successfully: {config_file}")

    issues = validate_config_func(config)

    if not issues:
        click.echo("✓ Configuration is valid")
    else:
        click.echo("Configuration issues found:")
        for issue in issues:
            click.echo(f"  ✗ {issue}")
        sys.exit(1)


@main.command()
@click.option("--output", "-o", type=click.Path(), help="Output directory")
@click.pass_context
def run(ctx, output):
    """Run every enabled association policy from the configuration"""

    cli_ctx = ctx.obj

    if cli_ctx.config is None:
        click.echo(
            "Error: No configuration file provided. Use --config option or 'arlink init-config'",
            err=True,
        )
        sys.exit(1)

    try:
        analysis = RegulatoryAssociationAnalysis(cli_ctx.config)
        analysis.run_full_pipeline()
    except Exception as e:
        _fail(cli_ctx, "Pipeline execution failed", e)

    _finish(analysis, output or cli_ctx.config.output_dir)


@main.command()
@click.option("--genes", type=click.Path(exists=True), required=True, help="Gene table")
@click.option("--tads", type=click.Path(exists=True), required=True, help="TAD table")
@click.option("--ars", type=click.Path(exists=True), required=True, help="AR table")
@click.option("--output", "-o", type=click.Path(), help="Output directory")
@click.pass_context
def tad(ctx, genes, tads, ars, output):
    """Associate ARs with genes through overlapping TADs"""

    cli_ctx = ctx.obj
    config = cli_ctx.config or get_default_config()
    config.inputs.update({"genes": genes, "tads": tads, "ars": ars})

    try:
        analysis = RegulatoryAssociationAnalysis(config)
        analysis.run_full_pipeline(steps=["tad"])
    except Exception as e:
        _fail(cli_ctx, "TAD association failed", e)

    _finish(analysis, output or config.output_dir)


@main.command()
@click.option("--tss", type=click.Path(exists=True), required=True, help="TSS table")
@click.option("--ars", type=click.Path(exists=True), required=True, help="AR table")
@click.option(
    "--genes",
    type=click.Path(exists=True),
    help="Gene table restricting which TSS records are used",
)
@click.option("--basal-upstream", type=click.IntRange(min=0), help="Basal upstream (bp)")
@click.option(
    "--basal-downstream", type=click.IntRange(min=0), help="Basal downstream (bp)"
)
@click.option("--max-extension", type=click.IntRange(min=0), help="Extension (bp)")
@click.option(
    "--strand-aware", is_flag=True, help="Mirror basal offsets on the minus strand"
)
@click.option("--output", "-o", type=click.Path(), help="Output directory")
@click.pass_context
def great(
    ctx,
    tss,
    ars,
    genes,
    basal_upstream,
    basal_downstream,
    max_extension,
    strand_aware,
    output,
):
    """Associate ARs with genes through basal plus extension domains"""

    cli_ctx = ctx.obj
    config = cli_ctx.config or get_default_config()
    config.inputs.update({"tss": tss, "ars": ars})
    if genes:
        config.inputs["genes"] = genes

    overrides = {
        "basal_upstream": basal_upstream,
        "basal_downstream": basal_downstream,
        "max_extension": max_extension,
    }
    config.regulatory_domain.update(
        {key: value for key, value in overrides.items() if value is not None}
    )
    if strand_aware:
        config.regulatory_domain["strand_aware"] = True

    try:
        analysis = RegulatoryAssociationAnalysis(config)
        analysis.run_full_pipeline(steps=["regulatory_domain"])
    except Exception as e:
        _fail(cli_ctx, "Regulatory-domain association failed", e)

    _finish(analysis, output or config.output_dir)


if __name__ == "__main__":
    main()
