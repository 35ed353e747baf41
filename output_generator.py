"""Output generator for production plans - creates folder structure, CSVs, G-code and slab images."""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.patches import Rectangle

from models.slab import Slab
from planning.result import OrderPlanResult


class OutputGenerator:
    """Generates output files and slab images for an order's production plans."""

    def __init__(self, result: OrderPlanResult, output_base: str = "output"):
        self.result = result
        self.output_base = Path(output_base)
        self.run_folder: Optional[Path] = None

    def create_output_folder(self) -> Path:
        """Create output folder structure based on the order id."""
        # Create timestamp for unique folder
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        # Create folder path: output/{order_id}_{timestamp}/
        self.run_folder = self.output_base / f"{self.result.order_id}_{timestamp}"

        # Create directories
        self.run_folder.mkdir(parents=True, exist_ok=True)
        (self.run_folder / "slabs").mkdir(exist_ok=True)
        (self.run_folder / "gcode").mkdir(exist_ok=True)

        print(f"\nOutput folder created: {self.run_folder}")
        return self.run_folder

    def generate_slab_image(self, slab: Slab, output_path: Path):
        """
        Generate an image for a single slab showing part placements.

        Args:
            slab: The slab to visualize
            output_path: Path to save the image
        """
        fig, ax = plt.subplots(1, 1, figsize=(12, 9))

        # Draw slab boundary and usable area
        slab_rect = Rectangle((0, 0), slab.width, slab.height,
                              linewidth=3, edgecolor='black',
                              facecolor='lightgray', alpha=0.3)
        ax.add_patch(slab_rect)
        usable_rect = Rectangle((slab.margin, slab.margin), slab.usable_width, slab.usable_height,
                                linewidth=1, edgecolor='gray', linestyle='--', fill=False)
        ax.add_patch(usable_rect)

        # Color by part role
        roles: Dict[str, list] = {}
        for placement in slab.placements:
            roles.setdefault(placement.part.part_type or "part", []).append(placement)
        colors = plt.cm.Set3(range(len(roles)))
        role_colors = {role: colors[i] for i, role in enumerate(roles.keys())}

        for role, placements in roles.items():
            for placement in placements:
                # Kerf strip
                ax.add_patch(Rectangle((placement.x, placement.y),
                                       placement.reserved_width, placement.reserved_height,
                                       linewidth=0, facecolor='dimgray', alpha=0.4))
                ax.add_patch(Rectangle((placement.x, placement.y), placement.width, placement.height,
                                       linewidth=1, edgecolor='black',
                                       facecolor=role_colors[role], alpha=0.8))

                label = f"#{placement.sequence} {placement.part.label}"
                if placement.rotated:
                    label = f"{label} (R)"
                ax.text(placement.x + placement.width / 2, placement.y + placement.height / 2,
                        label, ha='center', va='center', fontsize=6, wrap=True)

        # Set axis properties, y grows downwards like on the saw table
        ax.set_xlim(-50, slab.width + 50)
        ax.set_ylim(slab.height + 50, -50)
        ax.set_aspect('equal')
        ax.set_xlabel('Width (mm)')
        ax.set_ylabel('Height (mm)')

        # Title with slab info
        title = (f"{slab.id} - {slab.material}\n"
                 f"Parts: {slab.num_parts()} | "
                 f"Used: {slab.part_area() / 1e6:.3f}m2 | "
                 f"Utilization: {slab.utilization() * 100:.1f}%")
        ax.set_title(title, fontsize=10)

        # Add legend for roles
        legend_handles = [patches.Patch(color=role_colors[role], label=role) for role in roles]
        legend = ax.legend(handles=legend_handles, loc='upper left',
                           bbox_to_anchor=(1.02, 1), fontsize=8)

        save_kwargs = {"dpi": 150, "bbox_inches": "tight"}
        if legend is not None:
            save_kwargs["bbox_extra_artists"] = (legend,)
        plt.savefig(output_path, **save_kwargs)
        plt.close(fig)

    def generate_all_slab_images(self):
        """Generate images for all slabs."""
        slabs_folder = self.run_folder / "slabs"
        total = len(self.result.slabs)

        print(f"\nGenerating {total} slab images...")

        for i, slab in enumerate(self.result.slabs):
            self.generate_slab_image(slab, slabs_folder / f"{slab.id}.png")

            # Progress indicator
            if (i + 1) % 10 == 0 or i == total - 1:
                print(f"  Generated {i + 1}/{total} images")

        print(f"Slab images saved to: {slabs_folder}")

    def export_gcode_files(self):
        """Write one .nc program per planned part."""
        gcode_folder = self.run_folder / "gcode"
        for plan in self.result.plans:
            (gcode_folder / f"{plan.part_id}.nc").write_text(plan.cnc_plan.gcode, encoding='utf-8')
        print(f"G-code programs saved to: {gcode_folder}")

    def export_slab_parts_csv(self):
        """Export detailed slab-parts mapping to CSV."""
        output_path = self.run_folder / "slab_parts.csv"

        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['Slab ID', 'Material', 'Cut Sequence', 'Part ID', 'Name', 'Role',
                             'X (mm)', 'Y (mm)', 'Width (mm)', 'Height (mm)', 'Rotated'])

            for slab in self.result.slabs:
                for placement in sorted(slab.placements, key=lambda p: p.sequence):
                    writer.writerow([
                        slab.id,
                        slab.material,
                        placement.sequence,
                        placement.part_id,
                        placement.part.name,
                        placement.part.part_type,
                        f"{placement.x:g}",
                        f"{placement.y:g}",
                        f"{placement.width:g}",
                        f"{placement.height:g}",
                        placement.rotated
                    ])

        print(f"Slab parts CSV saved to: {output_path}")

    def export_slab_summary_csv(self):
        """Export slab summary to CSV."""
        output_path = self.run_folder / "slab_summary.csv"

        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['Slab ID', 'Material', 'Num Parts', 'Part Area (m2)',
                             'Cut Area (m2)', 'Slab Area (m2)', 'Waste (m2)', 'Utilization (%)'])

            for slab in self.result.slabs:
                writer.writerow([
                    slab.id,
                    slab.material,
                    slab.num_parts(),
                    f"{slab.part_area() / 1e6:.6f}",
                    f"{slab.used_area() / 1e6:.6f}",
                    f"{slab.width * slab.height / 1e6:.6f}",
                    f"{slab.waste() / 1e6:.6f}",
                    f"{slab.utilization() * 100:.2f}"
                ])

        print(f"Slab summary CSV saved to: {output_path}")

    def export_failures_csv(self):
        """Export parts that need manual handling."""
        output_path = self.run_folder / "failures.csv"

        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['Part ID', 'Error Code', 'Message'])
            for outcome in self.result.failures:
                writer.writerow([outcome.part_id or "", outcome.error_code, outcome.message])

        print(f"Failures CSV saved to: {output_path}")

    def export_plans_json(self):
        """Export all production plans as JSON documents."""
        output_path = self.run_folder / "plans.json"

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump([plan.to_dict() for plan in self.result.plans], f, indent=2)

        print(f"Production plans saved to: {output_path}")

    def export_plan_summary(self):
        """Export overall summary to text file."""
        output_path = self.run_folder / "plan_summary.txt"

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(self.result.summary() + "\n\n")
            f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")

            f.write("-" * 40 + "\n")
            f.write("OUTPUT FILES\n")
            f.write("-" * 40 + "\n")
            f.write("- slab_parts.csv: Part placements per slab\n")
            f.write("- slab_summary.csv: Slab statistics\n")
            f.write("- failures.csv: Parts needing manual handling\n")
            f.write("- plans.json: Production plans\n")
            f.write("- gcode/: CNC programs\n")
            f.write("- slabs/: Individual slab images\n")

        print(f"Plan summary saved to: {output_path}")

    def generate_all_outputs(self) -> Path:
        """Generate all output files and images."""
        self.create_output_folder()

        self.export_slab_parts_csv()
        self.export_slab_summary_csv()
        self.export_failures_csv()
        self.export_plans_json()
        self.export_gcode_files()
        self.export_plan_summary()

        self.generate_all_slab_images()

        print(f"\nAll outputs generated in: {self.run_folder}")
        return self.run_folder


def generate_outputs(result: OrderPlanResult, output_base: str = "output") -> Path:
    """
    Main function to generate all outputs for an order.

    Args:
        result: The planned order
        output_base: Folder that receives one sub-folder per run

    Returns:
        Path to the output folder
    """
    generator = OutputGenerator(result, output_base)
    return generator.generate_all_outputs()
