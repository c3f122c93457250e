"""CLI entry point for signage-composer.

This module acts as the central entry point for the project's CLI tools.
It delegates each command to a small argparse handler.
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from signage.compose import import_signage
from signage.config import (
    EnvVar,
    get_canvas_bounds,
    get_environment,
    list_environment_variables,
)
from signage.core import get_logger, setup_logging
from signage.layout import OverflowPolicy
from signage.schema import export_llm_schema

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")

OVERFLOW_CHOICES = [policy.value for policy in OverflowPolicy]


def _emit(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        logger.info("Composition saved to %s", output)
    else:
        print(text)


# =============================================================================
# Import Command
# =============================================================================


def cmd_import(args: argparse.Namespace) -> int:
    """Handle the import command."""
    try:
        if str(args.path) == "-":
            text = sys.stdin.read()
        else:
            text = args.path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Cannot read %s: %s", args.path, e)
        return 1

    width, height = get_canvas_bounds(args.width, args.height)
    overflow = args.overflow or get_environment(EnvVar.SIGNAGE_OVERFLOW)
    if overflow not in OVERFLOW_CHOICES:
        logger.error("Unknown overflow policy: %s", overflow)
        return 1

    result = import_signage(text, width, height, overflow=overflow)
    if not result.success:
        for error in result.errors:
            logger.error("Import failed: %s", error)
        return 1

    for advisory in result.errors:
        logger.warning("%s", advisory)
    _emit(json.dumps(result.to_dict(), indent=args.indent), args.output)
    return 0


def handle_import_command(argv: list[str]) -> int:
    """Handle import-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="signage import",
        description="Sanitize a signage document and resolve its layout",
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Signage JSON file, or - to read from stdin",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Bounding box width (default: SIGNAGE_CANVAS_WIDTH)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Bounding box height (default: SIGNAGE_CANVAS_HEIGHT)",
    )
    parser.add_argument(
        "--overflow",
        type=str,
        default=None,
        choices=OVERFLOW_CHOICES,
        help="Overflow policy (default: SIGNAGE_OVERFLOW)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )
    args = parser.parse_args(argv)
    return cmd_import(args)


# =============================================================================
# Generate Command
# =============================================================================


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate command."""
    from signage.llm import GeneratorConfig, LLMError, ProxyBackend, SignageGenerator

    try:
        backend = ProxyBackend(url=args.proxy_url)
    except ValueError as e:
        logger.error("%s", e)
        return 1

    with backend:
        config = GeneratorConfig(
            max_retries=args.retries,
            generation_model=args.model,
            canvas_width=args.width,
            canvas_height=args.height,
            overflow=args.overflow,
            style_index=args.style,
        )
        generator = SignageGenerator(backend=backend, config=config)

        try:
            if args.questions:
                questions = generator.clarify(args.description)
                print(json.dumps({"questions": questions}, indent=2))
                return 0 if questions else 1

            logger.info("Generating signage for: %s", args.description)
            output = generator.generate(args.description, args.answers)
        except LLMError as e:
            logger.error("Generation failed: %s", e)
            return 1

    _emit(json.dumps(output.result.to_dict(), indent=2), args.output)
    logger.info(
        "Stats: %d attempt(s), %d tokens, model=%s",
        output.stats.attempts,
        output.stats.total_tokens,
        output.stats.final_model,
    )
    return 0


def handle_generate_command(argv: list[str]) -> int:
    """Handle generate-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="signage generate",
        description="Generate a signage composition from a plain-language request",
    )
    parser.add_argument(
        "description",
        type=str,
        help="What the sign should be about",
    )
    parser.add_argument(
        "--answers",
        "-a",
        type=str,
        default="",
        help="Answers to the clarifying questions",
    )
    parser.add_argument(
        "--questions",
        "-q",
        action="store_true",
        help="Only ask the clarifying questions and print them",
    )
    parser.add_argument(
        "--proxy-url",
        type=str,
        default=None,
        help="Generation proxy URL (default: SIGNAGE_PROXY_URL)",
    )
    parser.add_argument(
        "--model",
        "-m",
        type=str,
        default=None,
        help="Generation model (default: SIGNAGE_GENERATION_MODEL)",
    )
    parser.add_argument(
        "--style",
        type=int,
        default=None,
        help="Creative direction index 0-7 (random if not specified)",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=3,
        help="Max generation attempts (default: 3)",
    )
    parser.add_argument("--width", type=int, default=None, help="Bounding box width")
    parser.add_argument("--height", type=int, default=None, help="Bounding box height")
    parser.add_argument(
        "--overflow",
        type=str,
        default=None,
        choices=OVERFLOW_CHOICES,
        help="Overflow policy (default: SIGNAGE_OVERFLOW)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    args = parser.parse_args(argv)
    return cmd_generate(args)


# =============================================================================
# Env and Schema Commands
# =============================================================================


def handle_env_command(argv: list[str]) -> int:
    """List configuration variables with their current values."""
    parser = argparse.ArgumentParser(
        prog="signage env",
        description="List configuration variables",
    )
    parser.add_argument(
        "--category",
        "-c",
        type=str,
        default=None,
        choices=["llm", "canvas"],
        help="Only show one category",
    )
    args = parser.parse_args(argv)

    for var in list_environment_variables(args.category):
        config = var.value
        value = get_environment(var)
        print(f"{config.name:<28} {str(value):<16} [{config.category}] {config.description}")
    return 0


def handle_schema_command(argv: list[str]) -> int:
    """Print the schema reference handed to the generative model."""
    parser = argparse.ArgumentParser(
        prog="signage schema",
        description="Print the signage JSON schema with allow-lists and limits",
    )
    parser.parse_args(argv)
    print(json.dumps(export_llm_schema(), indent=2))
    return 0


# =============================================================================
# Main
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: signage {command} [args]")
    print("\nCommands:")
    print("  import     Sanitize a signage document and resolve its layout")
    print("  generate   Generate a signage composition via the proxy")
    print("  env        List configuration variables")
    print("  schema     Print the schema reference for the generative model")
    print("\nExamples:")
    print("  signage import sign.json --width 1280 --height 720")
    print("  cat sign.json | signage import - --overflow clip")
    print("  signage generate 'welcome sign for a bakery' --questions")
    print("  signage generate 'welcome sign for a bakery' -a 'Name: Crumbs'")
    print("  signage env --category canvas")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        show_help()
        return 1

    command = argv[0]
    rest_args = argv[1:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "import": lambda: handle_import_command(rest_args),
        "generate": lambda: handle_generate_command(rest_args),
        "env": lambda: handle_env_command(rest_args),
        "schema": lambda: handle_schema_command(rest_args),
    }

    if command in commands:
        setup_logging()
        return commands[command]()

    logger.error("Unknown command: %s", command)
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
