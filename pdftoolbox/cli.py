"""
Command-line interface for pdftoolbox.
"""

import os
import sys
from contextlib import contextmanager

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn
from rich.table import Table

from pdftoolbox import __version__
from pdftoolbox.config import COMPRESSION_LEVELS, load_settings
from pdftoolbox.exceptions import PDFToolboxError, ToolOptionError
from pdftoolbox.ranges import PageRangeSplitter
from pdftoolbox.splitter import split_document, write_results
from pdftoolbox.tools import (
    IMAGE_FORMATS,
    POSITIONS,
    add_page_numbers,
    add_watermark,
    compress_pdf,
    delete_pages,
    get_document_info,
    images_to_pdf,
    merge_documents,
    pdf_to_images,
    rotate_pages,
)
from pdftoolbox.utils import configure_logging, format_file_size

console = Console()


def _fail(error):
    console.print(f"\n[bold red]✗ Error:[/bold red] {escape(str(error))}")
    sys.exit(1)


@contextmanager
def _progress(description):
    """Yield a percent-based progress callback drawn with rich."""
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(description, total=100)
        yield lambda percent: progress.update(task, completed=percent)


def _write_output(output_path, data):
    directory = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(directory, exist_ok=True)
    with open(output_path, "wb") as handle:
        handle.write(data)
    console.print(f"\n[bold green]✓ Successfully created:[/bold green] {output_path}")
    console.print(f"[dim]Size: {format_file_size(len(data))}[/dim]\n")


def _parse_rotation(value):
    page_text, _, degrees_text = value.partition(":")
    try:
        page, degrees = int(page_text), int(degrees_text)
    except ValueError:
        raise click.BadParameter(f"expected PAGE:DEGREES, got {value!r}")
    if page < 1:
        raise click.BadParameter(f"page numbers start at 1, got {page}")
    return page - 1, degrees


@click.group()
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx):
    """
    pdftoolbox - split, merge, organize, stamp, convert and compress PDFs.
    """
    try:
        settings = load_settings()
    except ToolOptionError as e:
        _fail(e)
    configure_logging(settings.log_level)
    ctx.obj = settings


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--password', help='Password for encrypted PDFs', default=None)
def show_info(input_pdf, password):
    """
    Display information about a PDF file.

    Example:

        pdftoolbox info input.pdf
    """
    try:
        info = get_document_info(input_pdf, password=password)
    except (PDFToolboxError, OSError) as e:
        _fail(e)

    table = Table(title=f"PDF Information: {os.path.basename(input_pdf)}")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("File Path", os.path.abspath(input_pdf))
    table.add_row("File Size", format_file_size(info.file_size))
    table.add_row("Number of Pages", str(info.num_pages))
    table.add_row("Encrypted", "Yes" if info.is_encrypted else "No")
    for label in ("title", "author", "subject", "creator", "producer"):
        value = getattr(info, label)
        if value:
            table.add_row(label.capitalize(), value)

    console.print()
    console.print(table)
    console.print()


@cli.command(name="split")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--ranges', '-r',
    default=None,
    help="Page ranges, one output file each (e.g., '1-3, 5, 7-9'). Defaults to every page.",
    type=str
)
@click.option(
    '--output-dir', '-o',
    default='./output',
    help='Output directory',
    type=click.Path(file_okay=False)
)
@click.option('--workers', '-w', default=None, type=click.IntRange(min=1), help='Groups processed at once')
@click.option('--password', default=None, help='Password for encrypted PDFs')
@click.option('--show-skipped', is_flag=True, help='List range segments that were ignored')
@click.pass_obj
def split(settings, input_pdf, ranges, output_dir, workers, password, show_skipped):
    """
    Split a PDF into one file per page range.

    Invalid or out-of-range segments are ignored; the command only fails
    when no segment selects any page.

    Examples:

        pdftoolbox split input.pdf -r '1-3, 5, 7-9'

        pdftoolbox split input.pdf -r '1-10,11-20' -o chapters --show-skipped
    """
    try:
        if ranges is None:
            info = get_document_info(input_pdf, password=password)
            ranges = PageRangeSplitter.default_range(info.num_pages)

        console.print(f"\n[bold cyan]Splitting {os.path.basename(input_pdf)} by '{escape(ranges)}'...[/bold cyan]")
        with _progress("Producing documents") as update_progress:
            results, report = split_document(
                input_pdf,
                ranges,
                password=password,
                max_workers=workers or settings.split_workers,
                on_progress=update_progress,
            )
        created_files = write_results(results, output_dir)
    except (PDFToolboxError, OSError) as e:
        _fail(e)

    console.print(f"\n[bold green]✓ Successfully created {len(created_files)} file(s)[/bold green]")
    console.print(f"[dim]Output directory: {os.path.abspath(output_dir)}[/dim]")

    console.print("\n[bold]Created files:[/bold]")
    for path, result in zip(created_files, results):
        console.print(f"  • {path.name} ({result.page_count} page(s))")

    if report.skipped:
        if show_skipped:
            console.print("\n[bold yellow]Skipped segments:[/bold yellow]")
            for skipped in report.skipped:
                console.print(f"  ✗ '{escape(skipped.text)}' ({skipped.reason.replace('_', ' ')})")
        else:
            console.print(f"\n[yellow]{len(report.skipped)} segment(s) skipped; use --show-skipped for details[/yellow]")
    console.print()


@cli.command(name="merge")
@click.argument('input_pdfs', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', default='merged.pdf', help='Output PDF file', type=click.Path(dir_okay=False))
def merge(input_pdfs, output):
    """
    Merge PDFs into one document, in the order given.

    Example:

        pdftoolbox merge a.pdf b.pdf c.pdf -o combined.pdf
    """
    try:
        with _progress("Merging") as update_progress:
            data = merge_documents(list(input_pdfs), on_progress=update_progress)
        _write_output(output, data)
    except (PDFToolboxError, OSError) as e:
        _fail(e)


@cli.command(name="rotate")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option(
    '--page', '-p', 'rotations',
    multiple=True,
    required=True,
    help='PAGE:DEGREES, e.g. 2:90 (repeatable)'
)
@click.option('--output', '-o', required=True, help='Output PDF file', type=click.Path(dir_okay=False))
def rotate(input_pdf, rotations, output):
    """
    Set the rotation of individual pages.

    Example:

        pdftoolbox rotate input.pdf -p 1:90 -p 3:180 -o rotated.pdf
    """
    parsed = dict(_parse_rotation(value) for value in rotations)
    try:
        _write_output(output, rotate_pages(input_pdf, parsed))
    except (PDFToolboxError, OSError) as e:
        _fail(e)


@cli.command(name="delete")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--pages', '-p', required=True, help="Pages to delete (e.g., '2, 4-6')")
@click.option('--output', '-o', required=True, help='Output PDF file', type=click.Path(dir_okay=False))
def delete(input_pdf, pages, output):
    """
    Remove pages from a PDF.

    Example:

        pdftoolbox delete input.pdf -p '2, 4-6' -o trimmed.pdf
    """
    try:
        info = get_document_info(input_pdf)
        groups = PageRangeSplitter().parse(pages, info.num_pages)
        if not groups:
            raise ToolOptionError(f"'{pages}' selects no pages of a {info.num_pages}-page document.")
        indices = [index for group in groups for index in group.indices()]
        _write_output(output, delete_pages(input_pdf, indices))
    except (PDFToolboxError, OSError) as e:
        _fail(e)


@cli.command(name="page-numbers")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', required=True, help='Output PDF file', type=click.Path(dir_okay=False))
@click.option('--position', type=click.Choice(POSITIONS), default='bottom-center', show_default=True)
@click.option('--font-size', type=click.FloatRange(min=1), default=12, show_default=True)
@click.option('--start-page', type=click.IntRange(min=1), default=1, show_default=True)
@click.option('--format', 'number_format', default='{n}', show_default=True, help='Use {n} and {total}')
def page_numbers(input_pdf, output, position, font_size, start_page, number_format):
    """
    Stamp page numbers onto a PDF.

    Example:

        pdftoolbox page-numbers input.pdf -o numbered.pdf --format 'Page {n} of {total}'
    """
    try:
        data = add_page_numbers(
            input_pdf,
            position=position,
            font_size=font_size,
            start_page=start_page,
            number_format=number_format,
        )
        _write_output(output, data)
    except (PDFToolboxError, OSError) as e:
        _fail(e)


@cli.command(name="watermark")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--text', '-t', required=True, help='Watermark text')
@click.option('--output', '-o', required=True, help='Output PDF file', type=click.Path(dir_okay=False))
@click.option('--opacity', type=click.FloatRange(0, 1), default=0.3, show_default=True)
@click.option('--rotation', type=float, default=45, show_default=True)
@click.option('--font-size', type=click.FloatRange(min=1), default=48, show_default=True)
@click.option('--tiled', is_flag=True, help='Repeat the text across the page')
def watermark(input_pdf, text, output, opacity, rotation, font_size, tiled):
    """
    Draw a text watermark over every page.

    Example:

        pdftoolbox watermark input.pdf -t CONFIDENTIAL -o marked.pdf --tiled
    """
    try:
        data = add_watermark(
            input_pdf,
            text,
            opacity=opacity,
            rotation=rotation,
            font_size=font_size,
            tiled=tiled,
        )
        _write_output(output, data)
    except (PDFToolboxError, OSError) as e:
        _fail(e)


@cli.command(name="to-images")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--output-dir', '-o', default='./images', help='Output directory', type=click.Path(file_okay=False))
@click.option('--dpi', type=click.IntRange(min=1), default=None, help='Resolution (default from settings)')
@click.option('--format', 'image_format', type=click.Choice(IMAGE_FORMATS), default='png', show_default=True)
@click.option('--quality', type=click.FloatRange(0, 1), default=0.92, show_default=True, help='JPEG quality')
@click.pass_obj
def to_images(settings, input_pdf, output_dir, dpi, image_format, quality):
    """
    Render every page to a JPEG or PNG image.

    Example:

        pdftoolbox to-images input.pdf -o pages --dpi 200 --format jpeg
    """
    try:
        with _progress("Rendering pages") as update_progress:
            images = pdf_to_images(
                input_pdf,
                dpi=dpi or settings.render_dpi,
                image_format=image_format,
                quality=quality,
                on_progress=update_progress,
            )
        os.makedirs(output_dir, exist_ok=True)
        for image in images:
            with open(os.path.join(output_dir, image.name), "wb") as handle:
                handle.write(image.data)
    except (PDFToolboxError, OSError) as e:
        _fail(e)

    console.print(f"\n[bold green]✓ Successfully rendered {len(images)} page(s)[/bold green]")
    console.print(f"[dim]Output directory: {os.path.abspath(output_dir)}[/dim]\n")


@cli.command(name="from-images")
@click.argument('images', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', default='images.pdf', help='Output PDF file', type=click.Path(dir_okay=False))
def from_images(images, output):
    """
    Build a PDF with one page per JPEG or PNG image.

    Example:

        pdftoolbox from-images scan1.jpg scan2.png -o scans.pdf
    """
    try:
        with _progress("Converting images") as update_progress:
            data = images_to_pdf(list(images), on_progress=update_progress)
        _write_output(output, data)
    except (PDFToolboxError, OSError) as e:
        _fail(e)


@cli.command(name="compress")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', required=True, help='Output PDF file', type=click.Path(dir_okay=False))
@click.option('--level', '-l', type=click.Choice(COMPRESSION_LEVELS), default=None, help='Compression preset')
@click.pass_obj
def compress(settings, input_pdf, output, level):
    """
    Shrink a PDF by re-rendering its pages as JPEG images.

    Example:

        pdftoolbox compress input.pdf -o small.pdf -l high
    """
    try:
        with _progress("Compressing") as update_progress:
            result = compress_pdf(input_pdf, level or settings.compression_level, on_progress=update_progress)
        _write_output(output, result.data)
    except (PDFToolboxError, OSError) as e:
        _fail(e)

    console.print(
        f"[dim]{format_file_size(result.original_size)} → {format_file_size(result.compressed_size)} "
        f"({result.compression_ratio:.0%} of original)[/dim]\n"
    )


if __name__ == '__main__':
    cli()
