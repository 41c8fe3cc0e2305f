#!/usr/bin/python3
from pathlib import Path

import click

from deployment.registry import merge_registries


@click.command()
@click.option(
    "--registry",
    "-r",
    "registries",
    help="Registry file to merge; give at least two, later ones are merged into earlier ones",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    multiple=True,
    required=True,
)
@click.option(
    "--output-registry",
    "-o",
    help="Filepath of output registry file",
    type=click.Path(dir_okay=False, exists=False, path_type=Path),
    required=True,
)
@click.option(
    "--deprecated-contract",
    "-d",
    "deprecated_contracts",
    help="Names of any deprecated contracts to exclude from the merge",
    required=False,
    multiple=True,
)
def cli(registries, output_registry, deprecated_contracts):
    """Merge deployment registries into one."""
    if len(registries) < 2:
        raise click.BadParameter("at least two registries are required", param_hint="--registry")

    merge_registries(
        registry_1_filepath=registries[0],
        registry_2_filepath=registries[1],
        output_filepath=output_registry,
        deprecated_contracts=list(deprecated_contracts),
    )
    for registry in registries[2:]:
        merge_registries(
            registry_1_filepath=output_registry,
            registry_2_filepath=registry,
            output_filepath=output_registry,
            deprecated_contracts=list(deprecated_contracts),
        )


if __name__ == "__main__":
    cli()
