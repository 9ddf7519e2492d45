from __future__ import annotations

import click

from compressed_commitment.commitment.test_vectors import conformance_vectors


@click.command()
@click.option(
    "--overwrite",
    is_flag=True,
    help="Recompute vectors that already have an expected value",
)
def main(overwrite: bool) -> None:
    """Record expected outputs in conformance_vectors.json."""
    data = conformance_vectors.load_vectors()
    recorded = conformance_vectors.record_vectors(data, overwrite=overwrite)
    conformance_vectors.save_vectors(data)
    for name in recorded:
        click.echo(f"conformance_vectors.json: recorded {name}")
    if not recorded:
        click.echo("conformance_vectors.json: nothing to record")


if __name__ == "__main__":
    main()
