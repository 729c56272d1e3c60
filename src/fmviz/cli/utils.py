"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, model loading with user-facing error reporting, and the
JSON envelope used by every `--json` output.
"""

import json
from typing import Any, List, Optional

import click

from ..core.exceptions import ModelLoadError
from ..core.types import FeatureModel


def echo_success(message: str) -> None:
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """Errors go to stderr so --json output stays parseable."""
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """Secondary detail lines (counts, hints), indented under the headline."""
    click.echo(click.style(f"   {message}", dim=True))


def echo_json(status: str, payload: Any = None, error: Optional[str] = None) -> None:
    """Print the standard `{"meta": ..., "data"|"error": ...}` envelope."""
    envelope: dict = {"meta": {"status": status}}
    if error is not None:
        envelope["error"] = {"message": error}
    else:
        envelope["data"] = payload
    click.echo(json.dumps(envelope, default=str))


def describe_failure(error: Any) -> List[str]:
    """Turn a loader Err payload into printable lines."""
    if isinstance(error, ModelLoadError):
        return [str(error)]
    if isinstance(error, list):
        return ["Invalid model:"] + [f"  - {e}" for e in error]
    return [str(error)]


def load_model_or_report(model_file: str, quiet: bool = False) -> Optional[FeatureModel]:
    """
    Load a model file, printing the failure instead of raising.

    Args:
        model_file (str): Path to the model JSON.
        quiet (bool): Suppress the error output (used in --json mode).

    Returns:
        Optional[FeatureModel]: The model, or None if loading failed.
    """
    from ..io.loader import load_model

    result = load_model(model_file)
    if result.is_ok():
        return result.value

    if not quiet:
        lines = describe_failure(result.error)
        echo_error(lines[0])
        for line in lines[1:]:
            click.echo(line, err=True)
    return None
