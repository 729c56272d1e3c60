"""
fmviz CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import render, search, tree, validate


@click.group()
@click.version_option(package_name="fmviz")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """fmviz: Feature-Model Visualizer.

    Builds the feature tree from a model file, lays it out, draws the
    requires/excludes constraints and highlights search matches.

    \b
    Quick Start:
      fmviz validate model.json
      fmviz search model.json "payment"
      fmviz tree model.json --query payment
      fmviz render model.json -o diagram.svg --query payment
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands
main.add_command(render.render)
main.add_command(search.search)
main.add_command(tree.tree)
main.add_command(validate.validate)

if __name__ == "__main__":
    main()
