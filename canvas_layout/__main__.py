import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from canvas_layout import (
    LayoutError,
    ValidationError,
    format_row_report,
    get_layout_options,
    parse_program,
    print_program,
    translate,
    validate,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Solve canvas layout scripts")
    parser.add_argument("path", help="Path to the layout script")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Per-row residual tolerance in pixels (default: 1e-4)",
    )
    parser.add_argument(
        "--no-diagnostics",
        action="store_true",
        help="Skip the unconstrained-edge perturbation analysis",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Report unsatisfiable constraints instead of failing",
    )
    parser.add_argument(
        "--png-output-path",
        help="Render the solved layout and write it as a PNG to the given path",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    options = get_layout_options()
    if args.tolerance is not None:
        options = replace(options, tolerance=args.tolerance)
    options = replace(options, diagnose=not args.no_diagnostics, strict=not args.lenient)

    with open(args.path) as fin:
        text = fin.read()

    logger.info("Parsing program from %s", args.path)
    try:
        program = parse_program(text)
        validate(program)
    except (SyntaxError, ValidationError) as exc:
        logger.error("Invalid layout script: %s", exc)
        raise SystemExit(1)
    logger.info("Validation succeeded")
    logger.debug("Program:\n%s", print_program(program))

    model = translate(program, options)
    image = model.image
    try:
        snapshot = image.recompute()
    except LayoutError as exc:
        logger.error("Layout failed: %s", exc)
        for row in getattr(exc, "failed_rows", ()):
            logger.error("  %s", format_row_report(row))
        raise SystemExit(1)

    solution = snapshot.solution
    print(f"Image: {image.width}x{image.height}")
    print("Canvases:")
    for name, canvas in model.canvases.items():
        location = image.get_location(canvas)
        print(f"  {name}: {location}")
        description = image.get_coordinate_description(canvas)
        if description.has_coordinates:
            print(
                f"    coordinates: x=[{description.left:g}, {description.right:g}] "
                f"y=[{description.bottom:g}, {description.top:g}]"
            )

    print("Solve:")
    print(f"  method: {solution.method}")
    print(f"  success: {solution.success}")
    print(f"  rank: {solution.rank}")
    print(f"  degrees of freedom: {solution.degrees_of_freedom}")
    print(f"  max residual: {solution.max_residual:.3e}")
    if solution.rows:
        print("Rows:")
        for row in solution.rows:
            status = "ok" if row.satisfied else "FAILED"
            print(f"  [{row.index}] {status} {format_row_report(row)}")
    print("Unconstrained:")
    if solution.free_edges:
        for edge in solution.free_edges:
            print(f"  - {edge.edge} of {image.locatables[edge.locatable_index]!r}")
    else:
        print("  (none)")
    if solution.warnings:
        print("Solver warnings:")
        for warning in solution.warnings:
            print(f"  - {warning}")

    if args.png_output_path:
        output_path = Path(args.png_output_path)
        logger.info("Rendering bitmap to %s", output_path)
        image.to_bitmap().save(output_path)
        print(f"PNG written to {output_path}")


if __name__ == "__main__":
    main(sys.argv[1:])
