import sys

import click
from flask import current_app
from flask.cli import AppGroup

from proofpage.extensions import db
from proofpage.utils.media import get_object_store
from proofpage.application.media.backfill_thumbnails import backfill_thumbnails

thumbnails_cli = AppGroup("thumbnails", help="Media thumbnail maintenance.")


@thumbnails_cli.command("backfill")
@click.option("--batch-size", type=click.IntRange(min=1), default=None,
              help="Rows fetched per query (default: THUMB_BATCH_SIZE).")
def backfill_command(batch_size):
    """Generate missing avatar and work-example thumbnails."""
    store = get_object_store()
    batch_size = batch_size or current_app.config["THUMB_BATCH_SIZE"]

    click.echo("Starting thumbnail backfill...")
    click.echo(f"Bucket: {store.bucket}")
    click.echo(f"Batch size: {batch_size}")

    report = backfill_thumbnails(db.session, store, batch_size=batch_size)

    click.echo("\nBackfill complete.")
    for stats in report.tables:
        click.echo(stats.summary_line())
    click.echo(report.total.summary_line())

    sys.exit(report.exit_code)


def register_commands(app):
    app.cli.add_command(thumbnails_cli)
