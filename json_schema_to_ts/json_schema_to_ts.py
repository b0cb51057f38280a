import json
import logging
from pathlib import Path

import click
from click.core import ParameterSource

from .pipeline import AtomicWriter, CodeGeneratorConfig, CompileError, PipelineGenerator

logger = logging.getLogger(__name__)


def load_config(config_path):
    if config_path is None:
        return CodeGeneratorConfig()
    with open(config_path) as f:
        return CodeGeneratorConfig.from_dict(json.load(f))


def schema_files(path: Path) -> list[Path]:
    """Schema files to compile: the file itself, or the *.json files of a directory in name order."""
    if path.is_dir():
        return sorted(p for p in path.iterdir() if p.suffix == ".json" and p.is_file())
    return [path]


@click.command()
@click.option("--name", "-n", default=None, type=str, help="Root type name (defaults to the file name)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--cwd",
    default=None,
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Directory $ref files are resolved from (defaults to the schema directory)",
)
@click.option("--format/--no-format", "format_", default=False, help="Run prettier on the output")
@click.option(
    "--declare-externally-referenced/--root-only",
    "declare_externally_referenced",
    default=True,
    help="Declare every named type reachable from the root, or only the root types",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def json_schema_to_ts(name, config, cwd, format_, declare_externally_referenced, verbose, path, output):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(name)s: %(message)s")

    config = load_config(config)
    path = Path(path)
    is_directory = path.is_dir()

    # Options given on the command line override the config file
    ctx = click.get_current_context()
    if ctx.get_parameter_source("format_") != ParameterSource.DEFAULT:
        config.formatter.enabled = format_
    if ctx.get_parameter_source("declare_externally_referenced") != ParameterSource.DEFAULT:
        config.declare_externally_referenced = declare_externally_referenced
    elif is_directory:
        # Each file of a directory declares its own root types only
        config.declare_externally_referenced = False

    outputs = []
    for index, schema_path in enumerate(schema_files(path)):
        with open(schema_path) as f:
            schema = json.load(f)

        if index > 0:
            # Only the first file carries the generation comment
            config.add_generation_comment = False

        codegen = PipelineGenerator(
            name if name is not None and not is_directory else schema_path.stem,
            schema,
            config,
            cwd=cwd or schema_path.parent,
            filename=schema_path.name,
        )
        try:
            outputs.append(codegen.generate())
        except CompileError as e:
            raise click.ClickException(f"{schema_path.name}: {e}") from e

    if not outputs:
        raise click.ClickException(f"No schema files found in {path}")

    try:
        AtomicWriter().write(Path(output), "\n".join(outputs))
    except CompileError as e:
        raise click.ClickException(str(e)) from e
    logger.info("Wrote %s", output)
