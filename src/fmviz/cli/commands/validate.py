"""
Validate Command - Check a model file before rendering it.

Schema problems fail the command; issues the engine tolerates (extra roots,
dangling parents, constraints on unknown features) are listed as warnings.
"""

import sys

import click

from ...io.loader import load_model, model_warnings
from ..utils import describe_failure, echo_error, echo_success, echo_warning


@click.command()
@click.argument("model_file", type=click.Path())
@click.option("--strict", is_flag=True, help="Treat warnings as errors")
def validate(model_file: str, strict: bool):
    """
    Validate MODEL_FILE.
    """
    result = load_model(model_file)
    if result.is_err():
        lines = describe_failure(result.error)
        echo_error(lines[0])
        for line in lines[1:]:
            click.echo(line, err=True)
        sys.exit(1)

    model = result.value
    warnings = model_warnings(model)
    for warning in warnings:
        echo_warning(warning)

    if strict and warnings:
        echo_error(f"{len(warnings)} warning(s) in strict mode")
        sys.exit(1)

    echo_success(
        f"Valid model: {len(model.features)} features, {len(model.constraints)} constraints"
    )
