# main.py
import logging
from pathlib import Path
import click

from ignoretree.picker.base import ScriptedPicker
from ignoretree.picker.textuals import TextualPicker
from ignoretree.renderer import Renderer
from ignoretree.session import IgnoreFileError, IgnoreSession
from ignoretree.untrack import UntrackError, untrack_ignored
from ignoretree.utils import LOG_PATH, configure_logging


@click.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False), default='.')
@click.option("-u", "--untrack", is_flag=True,
              help="After saving, untrack (git rm --cached) tracked files that are now ignored.")
@click.option("-t", "--toggle", "toggles", multiple=True, metavar="PATH",
              help="Toggle PATH without opening the editor, then save. Repeatable; applied in order.")
@click.option("--show", is_flag=True,
              help="Print the tree with its current ignore marks and exit.")
@click.option("-n", "--dry-run", is_flag=True,
              help="Print the resulting ignore file instead of writing it.")
@click.option("-v", "--verbose", is_flag=True,
              help=f"Log debug output to {LOG_PATH}.")
def cli(path, untrack, toggles, show, dry_run, verbose):
    """
    Edit a directory's .gitignore as a tree of checkboxes.

    Existing rules are read into per-file marks; files matched by wildcard
    rules are locked. Saving rewrites the literal rules so they reproduce the
    tree exactly, keeping comments and wildcard rules in place.

    Keys: space toggle, s save, q quit, left/right navigate.
    """
    configure_logging(verbose)
    root = Path(path).resolve()

    try:
        session = IgnoreSession.load(root)
    except IgnoreFileError as e:
        raise click.ClickException(str(e)) from e

    for warning in session.warnings:
        click.secho(f"[warning] {warning}", fg="yellow", err=True)

    if show:
        click.echo(Renderer(session.root).render_tree())
        return

    # Choose picker strategy
    picker = ScriptedPicker(toggles) if toggles else TextualPicker()
    try:
        should_save = picker.pick(session)
    except KeyError as e:
        raise click.BadParameter(f"no such file or directory: {e.args[0]!r}", param_hint="--toggle") from e

    if not should_save:
        click.echo("Quit without saving.")
        return

    if dry_run:
        click.echo(session.render(), nl=False)
        return

    try:
        written = session.save()
    except IgnoreFileError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Selection completed. {written} has been updated.")

    if untrack:
        try:
            removed = untrack_ignored(root, session.is_ignored)
        except UntrackError as e:
            logging.getLogger(__name__).error(f"Untrack failed: {e}")
            raise click.ClickException(f"Saved, but could not untrack: {e}") from e
        for rel_path in removed:
            click.echo(f"untracked {rel_path}")
        if not removed:
            click.echo("No tracked files are ignored.")


if __name__ == "__main__":
    cli()
