"""
Flite command line interface

Exports edited images and inspects saved edits without opening the editor.
"""

from typing import Optional

import click

from .config import settings
from .io.edit_store import EditStore
from .io.image_loader import list_image_files
from .processing.batch import export_batch
from .processing.curves import CHANNELS
from .utils.logger import get_logger, set_level

logger = get_logger(__name__)


@click.group()
@click.option('--edits', '-e', type=click.Path(dir_okay=False),
              help='Edits file (default: FLITE_EDITS_FILE or the user data directory)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, edits: Optional[str] = None, verbose: bool = False, quiet: bool = False):
    """
    Flite - tonal adjustments and tone curves for folders of photos
    """
    if ctx.obj is None:
        ctx.obj = {}

    if verbose:
        set_level('DEBUG')
    elif quiet:
        set_level('ERROR')

    ctx.obj['store'] = EditStore(edits or settings.EDITS_FILE)
    ctx.obj['quiet'] = quiet


@main.command()
@click.argument('folder', type=click.Path(exists=True, file_okay=False, dir_okay=True))
@click.argument('output_dir', type=click.Path(file_okay=False, dir_okay=True))
@click.option('--all', 'include_unedited', is_flag=True, help='Also export images without edits')
@click.option('--workers', '-w', type=int, default=settings.EXPORT_DEFAULTS["batch_workers"],
              show_default=True, help='Parallel export workers')
@click.pass_context
def export(ctx, folder: str, output_dir: str, include_unedited: bool = False, workers: int = 4):
    """
    Export each edited image of FOLDER into OUTPUT_DIR as <name>_edited.png.

    Every image is rendered with its own saved adjustments.
    """
    quiet = ctx.obj.get('quiet', False)
    adjustments = ctx.obj['store'].load()
    results = export_batch(folder, output_dir, adjustments,
                           include_unedited=include_unedited, max_workers=workers)

    failures = [(path, error) for path, ok, error in results if not ok]
    if not quiet:
        click.echo(f"Exported {len(results) - len(failures)} of {len(results)} image(s) to {output_dir}")
    for path, error in failures:
        click.echo(f"Failed: {path}: {error}", err=True)
    if failures:
        ctx.exit(1)


@main.command()
@click.argument('folder', type=click.Path(exists=True, file_okay=False, dir_okay=True))
@click.pass_context
def show(ctx, folder: str):
    """
    List the images in FOLDER and their saved adjustments.
    """
    adjustments = ctx.obj['store'].load()
    for name in list_image_files(folder):
        adj = adjustments.get(name)
        if adj is None or adj.is_default():
            click.echo(f"  {name}")
            continue
        sliders = ", ".join(f"{k}={v:+d}" for k, v in adj.sliders().items() if v)
        curves = ", ".join(ch for ch in CHANNELS if not adj.curves.is_identity(ch))
        details = "; ".join(part for part in (sliders, f"curves: {curves}" if curves else "") if part)
        click.echo(f"* {name}  {details}")


if __name__ == '__main__':
    main()
