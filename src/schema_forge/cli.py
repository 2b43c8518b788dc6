"""
CLI tool to generate LLM function calling schemas from record descriptors.

This module provides a Click-based command line interface that:
- Loads descriptor documents from a file or a directory.
- Selects the requested target records.
- Generates schema components and formats them for OpenAI, Grok or Gemini.
- Writes the JSON document to the output file.
- Optionally reports the prompt token footprint of the result.

Any generation or formatting failure aborts the run with exit status 1 and
no output file is written.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import load_config
from .descriptors import RecordDescriptor
from .dialects import OutputFormat, format_schemas
from .errors import FormattingError, GenerationError, SchemaForgeError
from .generator import SchemaGenerator
from .loader import (
    DescriptorSet,
    load_descriptor_dir,
    load_descriptor_file,
    select_targets,
)
from .utils import encode_document, estimate_tokens, write_output_file

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# --- Logging ---
def configure_logging(verbose: bool, log_file: Optional[str]) -> None:
    """
    Configure the root logger for one CLI run.

    Parameters
    ----------
    verbose : bool
        Log at INFO level instead of WARNING.
    log_file : str, optional
        Also write log records to this file.

    Handlers left by an earlier call are closed and replaced.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


# --- Pipeline Steps ---
def load_descriptors(input_file: Optional[str], input_dir: Optional[str]) -> DescriptorSet:
    if input_file:
        return load_descriptor_file(Path(input_file))
    return load_descriptor_dir(Path(input_dir))


def build_document(
    targets: List[RecordDescriptor],
    descriptors: DescriptorSet,
    output_format: str,
) -> List[Dict[str, Any]]:
    """
    Generate and format the schema document for the selected targets.

    Parameters
    ----------
    targets : list of RecordDescriptor
        Records to generate, in output order.
    descriptors : DescriptorSet
        Source of the enum table.
    output_format : str
        Dialect name.

    Returns
    -------
    list of dict
        The formatted document, possibly empty.
    """
    components = SchemaGenerator(targets, descriptors.enums).generate()
    return format_schemas(targets, components, output_format)


def print_summary(
    console: Console, document: List[Dict[str, Any]], output_path: Path
) -> None:
    console.print("\n✅ Successfully generated schema!")
    console.print(f"   Definitions: [cyan]{len(document)}[/]")
    console.print(f"   Output saved to: [bold yellow]{output_path}[/]")


def print_token_estimate(
    console: Console, document: List[Dict[str, Any]], model: str
) -> None:
    try:
        tokens = estimate_tokens(document, model)
        console.print(f"   Prompt footprint: [cyan]{tokens}[/] tokens ({model})")
    except Exception as e:
        console.print(f"[yellow]Warning: Could not estimate tokens: {escape(str(e))}[/]")


def resolve_options(
    config: Dict[str, Any], output_format: Optional[str], pretty_print: bool
) -> Tuple[str, bool]:
    """Combine command line options with configured defaults."""
    chosen_format = output_format or config.get("format") or OutputFormat.OPENAI.value
    return chosen_format.lower(), pretty_print or bool(config.get("pretty_print"))


# --- CLI Entry Point ---
@click.command()
@click.option(
    "--input-file",
    "-i",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="Descriptor document (JSON) produced by the extractor.",
)
@click.option(
    "--input-dir",
    "-d",
    type=click.Path(exists=True, file_okay=False, readable=True),
    help="Directory of descriptor documents; every *.json below it is loaded.",
)
@click.option(
    "--type-name",
    "-t",
    "type_names",
    multiple=True,
    help="Name of a record to generate a schema for (repeatable).",
)
@click.option(
    "--output-file",
    "-o",
    required=True,
    type=click.Path(dir_okay=False),
    help="Path where the JSON schema document is written.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=None,
    help="Target LLM API format. Defaults to the configured format (openai).",
)
@click.option("--pretty-print", is_flag=True, help="Write indented JSON.")
@click.option(
    "--estimate-tokens",
    "show_tokens",
    is_flag=True,
    help="Report the prompt token footprint of the generated document.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress information.")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also log to a file.")
@click.version_option(version=__version__, prog_name="schema-forge")
def main(
    input_file: Optional[str],
    input_dir: Optional[str],
    type_names: Tuple[str, ...],
    output_file: str,
    output_format: Optional[str],
    pretty_print: bool,
    show_tokens: bool,
    verbose: bool,
    log_file: Optional[str],
) -> None:
    """
    Generate function calling JSON schemas for the requested records.

    EXAMPLE USAGE:

    --------------

    schema-forge -i models.json -t UserProfile -t Address -o tools.json --format gemini
    """
    if bool(input_file) == bool(input_dir):
        raise click.UsageError("Provide exactly one of --input-file or --input-dir.")

    configure_logging(verbose, log_file)
    console = Console()
    config = load_config()
    chosen_format, pretty = resolve_options(config, output_format, pretty_print)

    console.print(
        f"🛠  [bold green]schema-forge[/]: {len(type_names)} target(s) "
        f"as [yellow]{chosen_format}[/]"
    )

    # --- 1. Load descriptors ---
    try:
        descriptors = load_descriptors(input_file, input_dir)
    except SchemaForgeError as e:
        console.print(f"[bold red]Error loading descriptors:[/] {escape(str(e))}")
        sys.exit(1)

    # --- 2. Select targets ---
    targets, missing = select_targets(descriptors, type_names)
    if missing:
        console.print(
            f"[yellow]Warning: Could not find target(s): {escape(', '.join(missing))}[/]"
        )
    if not targets:
        console.print("[yellow]No target records found. Writing an empty document.[/]")

    # --- 3. Generate and format ---
    try:
        document = build_document(targets, descriptors, chosen_format)
    except GenerationError as e:
        console.print(f"[bold red]Schema generation failed:[/] {escape(str(e))}")
        sys.exit(1)
    except FormattingError as e:
        console.print(f"[bold red]Formatting failed:[/] {escape(str(e))}")
        sys.exit(1)

    # --- 4. Write output ---
    content = encode_document(
        document,
        pretty_print=pretty,
        indent=int(config.get("indent", 2)),
        sort_keys=bool(config.get("sort_keys", True)),
    )
    try:
        output_path = write_output_file(Path(output_file), content)
    except IOError as e:
        console.print(f"[bold red]Error writing output file: {escape(str(e))}[/]")
        sys.exit(1)

    print_summary(console, document, output_path)

    # --- 5. Token footprint ---
    if show_tokens:
        print_token_estimate(console, document, str(config.get("token_model")))


if __name__ == "__main__":
    main()
