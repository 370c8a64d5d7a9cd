import functools
import json
import pathlib
from typing import Any, Dict, List, Mapping, Tuple

import click

from context_state import ContextState
from telemetry import telemetry_event
from tinyyaml import TinyYAMLError, dump, read_file, safe_load, serialize_stream, write_file
from tinyyaml.logging_utils import configure_logging, get_logger

DEFAULT_CONFIG_PATH = ".tinyyaml.yml"
DEFAULT_JSON_INDENT = 2

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}

logger = get_logger(__name__)


def _validate_config_shape(config: Any) -> None:
    if not isinstance(config, Mapping):
        raise click.ClickException("Config file must contain a YAML mapping")

    json_section = config.get("json")
    if json_section is not None and not isinstance(json_section, Mapping):
        raise click.ClickException("Config 'json' section must be a mapping")


def load_config(config_path: str) -> Dict[str, Any]:
    path = pathlib.Path(config_path)
    if not path.exists():
        return {}

    try:
        data = safe_load(path.read_bytes()) or {}
    except TinyYAMLError as exc:
        raise click.ClickException(f"Failed to parse config file: {exc}") from exc

    _validate_config_shape(data)

    return data


def _json_options(config: Mapping[str, Any]) -> Tuple[int | None, bool]:
    section = config.get("json") or {}

    indent = section.get("indent", str(DEFAULT_JSON_INDENT))
    if indent is not None:
        if not isinstance(indent, str) or not indent.isdigit():
            raise click.ClickException("Config 'json.indent' must be a non-negative integer")
        indent = int(indent)

    ensure_ascii = section.get("ensure_ascii", "false")
    if not isinstance(ensure_ascii, str) or ensure_ascii.lower() not in _TRUE | _FALSE:
        raise click.ClickException("Config 'json.ensure_ascii' must be true or false")

    return indent, ensure_ascii.lower() in _TRUE


def _report_stats(state: ContextState) -> None:
    for line in state.telemetry.summary():
        click.echo(f"[stats] {line}", err=True)


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    type=click.Path(exists=False, dir_okay=False, path_type=str),
    help="Path to configuration file",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output")
@click.option("--quiet", is_flag=True, help="Reduce logging output to errors only")
@click.option("--stats", is_flag=True, help="Print timings for the command and each file")
@click.pass_context
def cli(ctx: click.Context, config: str, verbose: bool, quiet: bool, stats: bool) -> None:
    """Read, check and rewrite Tiny YAML files."""

    if verbose and quiet:
        raise click.ClickException("--verbose and --quiet are mutually exclusive")

    configure_logging(verbose=verbose, quiet=quiet)
    configuration = load_config(config)
    logger.debug("Loaded configuration from %s", config)
    json_indent, ensure_ascii = _json_options(configuration)

    ctx.obj = ContextState(
        config=configuration,
        json_indent=json_indent,
        ensure_ascii=ensure_ascii,
        verbose=verbose,
        quiet=quiet,
        stats=stats,
    )
    if stats:
        ctx.call_on_close(functools.partial(_report_stats, ctx.obj))


def _read_values(state: ContextState, path: pathlib.Path) -> List[Any]:
    try:
        with state.telemetry.track(f"read.{path.name}") as details:
            stream = read_file(path)
            details["documents"] = len(stream)
    except TinyYAMLError as exc:
        raise click.ClickException(f"{path}: {exc}") from exc
    return stream.values()


def _from_json(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return [_from_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _from_json(item) for key, item in value.items()}
    return value


@cli.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path),
)
@click.pass_context
@telemetry_event("check")
def check(ctx: click.Context, paths: Tuple[pathlib.Path, ...]) -> None:
    """Parse each file and report whether it is valid."""

    state: ContextState = ctx.obj
    failures = 0
    for path in paths:
        try:
            with state.telemetry.track(f"check.{path.name}") as details:
                stream = read_file(path)
                details["documents"] = len(stream)
        except TinyYAMLError as exc:
            failures += 1
            click.echo(f"{path}: {exc}", err=True)
            continue
        click.echo(f"{path}: ok ({len(stream)} document(s))")

    if failures:
        raise click.ClickException(f"{failures} file(s) failed to parse")


@cli.command("to-json")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path))
@click.option("--all", "all_documents", is_flag=True, help="Emit every document as a JSON array")
@click.pass_context
@telemetry_event("to-json")
def to_json(ctx: click.Context, path: pathlib.Path, all_documents: bool) -> None:
    """Print the last document of PATH (or all of them) as JSON."""

    state: ContextState = ctx.obj
    values = _read_values(state, path)
    if all_documents:
        data: Any = values
    else:
        data = values[-1] if values else None

    click.echo(state.dump_json(data))


@cli.command("from-json")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path))
@click.option(
    "--all",
    "all_documents",
    is_flag=True,
    help="Write each element of a top-level JSON array as its own document",
)
@click.pass_context
@telemetry_event("from-json")
def from_json(ctx: click.Context, path: pathlib.Path, all_documents: bool) -> None:
    """Convert the JSON file PATH to Tiny YAML.

    JSON booleans become the strings ``true``/``false`` and numbers become
    strings, since the Tiny dialect only knows null and string scalars.
    """

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (ValueError, UnicodeDecodeError) as exc:
        raise click.ClickException(f"Failed to parse JSON from {path}: {exc}") from exc

    if all_documents:
        if not isinstance(data, list):
            raise click.ClickException("--all expects a top-level JSON array")
        values = [_from_json(item) for item in data]
    else:
        values = [_from_json(data)]

    try:
        text = dump(*values)
    except TinyYAMLError as exc:
        raise click.ClickException(f"Cannot write {path} as Tiny YAML: {exc}") from exc

    click.echo(text, nl=False)


@cli.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path),
)
@click.option(
    "--check",
    "check_only",
    is_flag=True,
    help="Report files that are not in canonical form instead of rewriting them",
)
@click.pass_context
@telemetry_event("fmt")
def fmt(ctx: click.Context, paths: Tuple[pathlib.Path, ...], check_only: bool) -> None:
    """Rewrite files in canonical form. Comments are not preserved."""

    state: ContextState = ctx.obj
    changed = 0
    for path in paths:
        original = path.read_bytes()
        try:
            with state.telemetry.track(f"fmt.{path.name}") as details:
                stream = read_file(path)
                text = serialize_stream(stream)
                details["documents"] = len(stream)
        except TinyYAMLError as exc:
            raise click.ClickException(f"{path}: {exc}") from exc

        if text.encode("utf-8") == original:
            logger.debug("%s is already canonical", path)
            continue

        changed += 1
        if check_only:
            click.echo(f"would reformat {path}")
        else:
            write_file(stream, path)
            click.echo(f"reformatted {path}")

    if check_only and changed:
        raise click.ClickException(f"{changed} file(s) would be reformatted")


if __name__ == "__main__":
    cli()
