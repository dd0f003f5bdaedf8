"""CLI entry point for api-annotations."""

import logging
from pathlib import Path

import click
import yaml

from api_annotations.generator.listing import build_listing, dump_listing
from api_annotations.models.registry import ModelRegistry
from api_annotations.parser.base import Operation
from api_annotations.parser.comment import parse_comment
from api_annotations.parser.context import DEFAULT_PACKAGE, CompileContext
from api_annotations.parser.errors import AnnotationError
from api_annotations.source.locator import iter_source_files, scan_file


def _compile_sources(
    sources: tuple[Path, ...], context: CompileContext, skip_errors: bool
) -> list[Operation]:
    """Compile every annotated comment block found in the given sources."""
    operations = []
    for file_path in iter_source_files(sources):
        try:
            blocks = scan_file(file_path)
        except ValueError as e:
            raise click.ClickException(str(e)) from e

        for block in blocks:
            try:
                operations.append(parse_comment(block.lines, context))
            except AnnotationError as e:
                location = f"{file_path}:{block.line_number}"
                if not skip_errors:
                    raise click.ClickException(f"{location}: {e}") from e
                click.echo(f"Skipped {location}: {e}", err=True)
    return operations


def _make_context(models: Path | None, package: str) -> CompileContext:
    if models is None:
        return CompileContext(resolver=None, package=package)
    try:
        resolver = ModelRegistry.from_file(models)
    except (yaml.YAMLError, AnnotationError) as e:
        raise click.ClickException(f"{models}: {e}") from e
    return CompileContext(resolver=resolver, package=package)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """API Annotations — compile route comment annotations into API descriptions."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command("compile")
@click.argument("sources", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--models", type=click.Path(exists=True, path_type=Path), help="YAML file with model definitions.")
@click.option("--package", default=DEFAULT_PACKAGE, envvar="API_ANNOTATIONS_PACKAGE", show_default=True, help="Package used for unqualified type names.")
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output file path. Prints to stdout if omitted.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("--api-version", default="1.0", show_default=True, help="Version of the documented API.")
@click.option("--base-path", default="/", show_default=True, help="Base path of the documented API.")
@click.option("--skip-errors", is_flag=True, help="Report malformed blocks and keep going.")
def compile_cmd(
    sources: tuple[Path, ...],
    models: Path | None,
    package: str,
    output: Path | None,
    fmt: str,
    api_version: str,
    base_path: str,
    skip_errors: bool,
):
    """Compile annotated sources into a Swagger 1.2 style listing."""
    context = _make_context(models, package)
    operations = _compile_sources(sources, context, skip_errors)
    result = dump_listing(build_listing(operations, api_version=api_version, base_path=base_path), fmt)

    if output is None:
        click.echo(result)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result, encoding="utf-8")
    click.echo(f"Compiled {len(operations)} operations to {output}", err=True)


@main.command()
@click.argument("sources", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--models", type=click.Path(exists=True, path_type=Path), help="YAML file with model definitions.")
@click.option("--package", default=DEFAULT_PACKAGE, envvar="API_ANNOTATIONS_PACKAGE", show_default=True, help="Package used for unqualified type names.")
def check(sources: tuple[Path, ...], models: Path | None, package: str):
    """Compile annotated sources and list the operations found."""
    context = _make_context(models, package)
    operations = _compile_sources(sources, context, skip_errors=False)
    for operation in operations:
        click.echo(f"{operation.method:<7} {operation.path}  ({len(operation.parameters)} params, {len(operation.responses)} responses)")
    click.echo(f"Found {len(operations)} operations.")
