"""Run statistics and summary panel."""

import time
from datetime import timedelta

from rich.console import Console
from rich.panel import Panel
from rich.table import Table


class BinarizationStats:
    """Track and display binarization statistics."""

    def __init__(self, verbose=False):
        """Initialize statistics tracker.

        Args:
            verbose: Enable verbose logging
        """
        self.verbose = verbose
        self.console = Console()
        self.start_time = time.time()
        self.run_stats = {}
        self.plate_box = None
        self.mask_size = None
        self.output_file = None

    def set_run(self, run_stats, mask_shape):
        """Record the binarizer's last_stats and the mask dimensions."""
        self.run_stats = dict(run_stats)
        self.mask_size = (mask_shape[1], mask_shape[0])

    def set_plate_box(self, box):
        """Record the rotated plate rectangle ((cx, cy), (w, h), angle)."""
        self.plate_box = box

    def set_output(self, output_file):
        self.output_file = output_file

    def get_elapsed_time(self):
        """Get formatted elapsed time.

        Returns:
            str: Formatted time (HH:MM:SS)
        """
        elapsed = time.time() - self.start_time
        return str(timedelta(seconds=int(elapsed)))

    def build_table(self):
        """Summary table of the recorded run."""
        table = Table(show_header=False, padding=(0, 1))
        table.add_column("Label", style="cyan")
        table.add_column("Value", style="green")

        if self.mask_size:
            table.add_row("[bold]Mask size:[/bold]", f"{self.mask_size[0]}x{self.mask_size[1]}")

        labels = [
            ("contours", "Contours traced"),
            ("candidates", "Text-shaped contours"),
            ("selected", "Regions selected"),
            ("painted", "Regions painted"),
            ("skipped", "Regions skipped"),
        ]
        for key, label in labels:
            if key in self.run_stats:
                table.add_row(f"[bold]{label}:[/bold]", f"{self.run_stats[key]}")

        if "dark_coverage" in self.run_stats:
            table.add_row(
                "[bold]Dark coverage:[/bold]",
                f"{self.run_stats['dark_coverage']:.1f}%",
            )

        if self.plate_box is not None:
            (cx, cy), (w, h), angle = self.plate_box
            table.add_row(
                "[bold]Plate bounds:[/bold]",
                f"center ({cx:.0f}, {cy:.0f}), {w:.0f}x{h:.0f}, {angle:.1f}°",
            )

        table.add_row("[bold]Time elapsed:[/bold]", self.get_elapsed_time())

        if self.output_file:
            table.add_row("[bold]Output saved:[/bold]", f"{self.output_file}")

        return table

    def display_summary(self):
        """Display processing summary panel."""
        self.console.print(
            Panel(
                self.build_table(),
                title="[bold green]Binarization Complete[/bold green]",
                border_style="green",
            )
        )
