"""Main entry point for the production planner."""

import argparse
import logging
from pathlib import Path

import pandas as pd

from models import Order
from planning import PlannerConfig, ProductionPlanningService
from output_generator import generate_outputs
from visualizer import visualize_result

DEFAULT_CONFIG = str(Path(__file__).resolve().parent / "config" / "planner.json")


def main(argv=None):
    """Main function to plan an order."""
    parser = argparse.ArgumentParser(description="Nest cabinet parts and build production plans.")
    parser.add_argument("--parts", default=None, help="Parts table (.xlsx or .csv). Sample order if unset.")
    parser.add_argument("--order", default=None, help="Order id, defaults to the parts file name.")
    parser.add_argument("--config", default=DEFAULT_CONFIG)
    parser.add_argument("--output", default="output", help="Base folder for generated files.")
    parser.add_argument("--no-output", action="store_true", help="Only print the report.")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print("=" * 60)
    print("CABINET PRODUCTION PLANNER")
    print("=" * 60)

    # Load config
    if Path(args.config).exists():
        config = PlannerConfig.load_from_file(args.config)
    else:
        print(f"\nWarning: Config not found at {args.config}, using built-in defaults")
        config = PlannerConfig()

    # Load order
    if args.parts is None:
        print("\nNo parts file given, running with sample data for demonstration...")
        order = sample_order(args.order or "SAMPLE-001")
    elif not Path(args.parts).exists():
        parser.error(f"Parts file not found: {args.parts}")
    else:
        print(f"\nLoading parts from {args.parts}...")
        order = Order.load_from_file(args.parts, args.order)

    print(f"\nOrder loaded:")
    print(f"  - Order: {order.id}")
    print(f"  - Parts: {order.num_parts()}")
    print(f"  - Materials: {', '.join(m or config.default_material for m in order.get_unique_materials())}")
    print(f"  - Slab: {config.slab_width:g} x {config.slab_height:g} mm, "
          f"margin {config.margin:g} mm, kerf {config.kerf:g} mm")

    # Plan
    print("\nPlanning...")
    service = ProductionPlanningService(config=config)
    result = service.generate_for_order(order.id, order.records)

    print(result.summary())
    visualize_result(result)

    if not args.no_output:
        output_folder = generate_outputs(result, args.output)
        print(f"\n" + "=" * 60)
        print(f"COMPLETED - Output folder: {output_folder}")
        print("=" * 60)

    return result


def sample_order(order_id: str) -> Order:
    """A two-cabinet order used when no parts file is given."""
    shelf_pins = '[{"x": 37, "y": 100}, {"x": 37, "y": 132}, {"x": 37, "y": 164}]'
    sample_data = {
        'id': ['SIDE-L', 'SIDE-R', 'TOP', 'BOTTOM', 'SHELF', 'BACK', 'DOOR', 'TALL-SIDE'],
        'name': ['Left side', 'Right side', 'Top', 'Bottom', 'Shelf', 'Back panel', 'Door', 'Tall side'],
        'partType': ['leftPanel', 'rightPanel', 'topPanel', 'bottomPanel', 'shelf', 'backPanel', 'door', 'sidePanel'],
        'width': [560, 560, 564, 564, 562, 600, 596, 560],
        'height': [720, 720, 560, 560, 540, 720, 716, 2100],
        'depth': [18, 18, 18, 18, 18, 8, 18, 18],
        'material': ['MDF 18mm', 'MDF 18mm', 'MDF 18mm', 'MDF 18mm', 'MDF 18mm', 'HDF 8mm', 'Oak', 'MDF 18mm'],
        'color': ['White', 'White', 'White', 'White', 'White', None, 'Natural', 'White'],
        'drilling': [shelf_pins, shelf_pins, '', '', '', '', '[{"x": 22, "y": 100, "depth": 13}]', shelf_pins],
        'quantity': [2, 2, 2, 2, 4, 2, 2, 1]
    }
    df = pd.DataFrame(sample_data)
    return Order.load_from_dataframe(df, order_id)


if __name__ == "__main__":
    main()
