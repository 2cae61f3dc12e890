"""
Command-line interface for text region binarization.

Loads one image, runs the binarizer and writes the two-level mask, with an
optional plate bounds image and region preview for inspection.
"""

from pathlib import Path

import click
import numpy as np
from PIL import Image, UnidentifiedImageError
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from .edge_map import DEFAULT_CANNY_HIGH, DEFAULT_CANNY_LOW, DEFAULT_MARGIN
from .plate_bounds import PlateBoundsEstimator
from .region_classifier import DEFAULT_MIN_BOX_AREA
from .region_selector import DEFAULT_MAX_KEPT_DESCENDANTS
from .stats import BinarizationStats
from .text_binarizer import TextBinarizer

console = Console()


def parse_size(size_str):
    """
    Parses a size string in 'WxH' format into a tuple of integers.

    Args:
        size_str (str): A string such as "5x3".

    Returns:
        tuple[int, int] or None: (width, height) if the string is valid and both
                                 values are positive, otherwise None.
    """
    if not size_str:
        return None

    try:
        parts = [int(x.strip()) for x in size_str.lower().split("x")]
        if len(parts) != 2:
            raise ValueError("Size must have 2 components")
        if not all(p > 0 for p in parts):
            raise ValueError("Size values must be positive")
        return tuple(parts)
    except (ValueError, AttributeError):
        return None


def load_image(path):
    """Load an image file as an RGB uint8 array."""
    with Image.open(path) as img:
        return np.array(img.convert("RGB"))


def save_image(array, path):
    """Write a uint8 array to an image file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(array).save(path)


@click.command()
@click.argument("input_image", type=click.Path(exists=True, dir_okay=False))
@click.argument("output_mask", type=click.Path(dir_okay=False))
@click.option(
    "--margin",
    default=DEFAULT_MARGIN,
    type=click.IntRange(min=0),
    help="Constant border added around the image before edge detection",
)
@click.option(
    "--canny-low",
    default=DEFAULT_CANNY_LOW,
    type=int,
    help="Lower Canny hysteresis threshold",
)
@click.option(
    "--canny-high",
    default=DEFAULT_CANNY_HIGH,
    type=int,
    help="Upper Canny hysteresis threshold",
)
@click.option(
    "--min-box-area",
    default=DEFAULT_MIN_BOX_AREA,
    type=int,
    help="Smallest bounding box area accepted as a text region",
)
@click.option(
    "--max-kept-descendants",
    default=DEFAULT_MAX_KEPT_DESCENDANTS,
    type=int,
    help="Max nested text-shaped contours a region may contain",
)
@click.option(
    "--strip-margin",
    is_flag=True,
    default=False,
    help="Crop the mask back to the input image size",
)
@click.option(
    "--plate-bounds",
    "plate_bounds_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Also estimate the plate rectangle and save the annotated image here",
)
@click.option(
    "--plate-kernel",
    default="5x3",
    type=str,
    help="Erosion element for plate bounds as 'WxH'",
)
@click.option(
    "--debug-preview",
    default=None,
    type=click.Path(dir_okay=False),
    help="Save the edge map with selected region boxes drawn on it",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def main(
    input_image,
    output_mask,
    margin,
    canny_low,
    canny_high,
    min_box_area,
    max_kept_descendants,
    strip_margin,
    plate_bounds_path,
    plate_kernel,
    debug_preview,
    verbose,
):
    """Binarize text regions of a plate or document crop for OCR."""
    kernel_size = parse_size(plate_kernel)
    if kernel_size is None:
        console.print(
            Panel(
                f"[red]Invalid --plate-kernel value: {plate_kernel}[/red]\n\n"
                "[yellow]Example:[/yellow] --plate-kernel 5x3",
                title="[bold red]Invalid Parameter[/bold red]",
                border_style="red",
            )
        )
        raise click.Abort()

    try:
        image = load_image(input_image)
    except (UnidentifiedImageError, OSError) as e:
        console.print(
            Panel(
                f"[red]Cannot read image: {input_image}[/red]\n\n[dim]{e}[/dim]",
                title="[bold red]✗ Input Error[/bold red]",
                border_style="red",
            )
        )
        raise click.Abort() from e

    console.print(
        Panel(
            f"[yellow]Input:[/yellow]  {input_image} ({image.shape[1]}x{image.shape[0]})\n"
            f"[yellow]Output:[/yellow] {output_mask}\n"
            f"[dim]Margin: {margin} | Canny: {canny_low}/{canny_high} | "
            f"Min box area: {min_box_area} | "
            f"Max kept descendants: {max_kept_descendants}[/dim]",
            title="[bold]Configuration[/bold]",
            border_style="cyan",
        )
    )

    stats = BinarizationStats(verbose=verbose)

    try:
        binarizer = TextBinarizer(
            margin=margin,
            canny_low=canny_low,
            canny_high=canny_high,
            min_box_area=min_box_area,
            max_kept_descendants=max_kept_descendants,
            verbose=verbose,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=verbose,
        ) as progress:
            task = progress.add_task("[cyan]Binarizing text regions...", total=None)
            mask = binarizer.binarize(image, strip_margin=strip_margin)
            progress.stop_task(task)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort() from e

    save_image(mask, output_mask)
    stats.set_run(binarizer.last_stats, mask.shape)
    stats.set_output(output_mask)

    if debug_preview:
        preview = binarizer.preview_regions()
        save_image(preview, debug_preview)
        console.print(f"[dim]Region preview saved to {debug_preview}[/dim]")

    if plate_bounds_path:
        estimator = PlateBoundsEstimator(kernel_size=kernel_size, verbose=verbose)
        bounds = estimator.estimate(image)
        save_image(bounds.image, plate_bounds_path)
        stats.set_plate_box(bounds.box)
        if bounds.box is None:
            console.print("[yellow]⚠ No plate foreground survived erosion[/yellow]")

    stats.display_summary()


if __name__ == "__main__":
    main()
