"""CLI entry point."""
import argparse
import json
import sys
from pathlib import Path

from .errors.exceptions import InvalidOptionsError, PresetNotFoundError
from .optimization.options import AGGRESSIVENESS_LEVELS
from .optimizer import SVGOptimizer
from .utils.logger import get_logger

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="svgslim - Shrink SVG files without changing how they look"
    )

    parser.add_argument("input", help="Input SVG file or directory of SVG files")
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output file (or directory for directory input). Defaults to stdout / <name>.min.svg",
    )

    parser.add_argument(
        "--preset",
        default=None,
        help="Use a named preset (conservative, web, print, icon, illustration)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to custom YAML config file",
    )
    parser.add_argument(
        "--aggressiveness",
        choices=AGGRESSIVENESS_LEVELS,
        default=None,
        help="Optimization tier",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Decimal places kept for coordinates and path data",
    )
    parser.add_argument(
        "--no-minify",
        action="store_true",
        help="Keep whitespace and formatting",
    )
    parser.add_argument(
        "--keep-comments",
        action="store_true",
        help="Do not remove comments",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-document timeout in milliseconds",
    )
    parser.add_argument(
        "--recover",
        action="store_true",
        help="Try to repair documents that fail to parse",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Only validate the input and print the result as JSON",
    )
    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Only analyze complexity and print the result as JSON",
    )
    return parser


def options_from_args(args) -> dict:
    # Build explicit options from CLI args
    options = {}
    if args.aggressiveness:
        options["aggressiveness"] = args.aggressiveness
    if args.precision is not None:
        options["coordinate_precision"] = args.precision
    if args.no_minify:
        options["minify"] = False
    if args.keep_comments:
        options["remove_comments"] = False
    return options


def _optimize_file(optimizer: SVGOptimizer, args, options: dict, path: Path):
    text = path.read_text(encoding="utf-8")
    if args.timeout:
        return optimizer.optimize_with_timeout(
            text, options, args.preset, args.timeout, recover=args.recover
        )
    return optimizer.optimize(text, options, args.preset, recover=args.recover)


def run_directory(optimizer: SVGOptimizer, args, options: dict, input_dir: Path) -> int:
    files = sorted(p for p in input_dir.glob("*.svg") if not p.name.endswith(".min.svg"))
    if not files:
        logger.warning(f"No .svg files found in {input_dir}")
        return 0

    output_dir = Path(args.output) if args.output else input_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    def on_progress(progress):
        if progress.current_file_progress == 0.0:
            logger.info(
                f"[{progress.completed_files + 1}/{progress.total_files}] {progress.current_file}"
            )

    documents = [p.read_text(encoding="utf-8") for p in files]
    results = optimizer.process_batch(
        documents,
        options,
        args.preset,
        on_progress=on_progress,
        names=[p.name for p in files],
        timeout_ms=args.timeout,
        recover=args.recover,
    )

    failures = 0
    for path, result in zip(files, results):
        if not result.success:
            failures += 1
            logger.error(f"{path.name}: {result.error}")
            continue
        suffix = ".svg" if args.output else ".min.svg"
        out_path = output_dir / f"{path.stem}{suffix}"
        out_path.write_text(result.optimized_svg, encoding="utf-8")
        logger.info(f"Saved: {out_path} ({result.saved_percent:.1f}% smaller)")

    return 1 if failures else 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    options = options_from_args(args)
    input_path = Path(args.input)

    try:
        optimizer = SVGOptimizer(config_path=args.config)

        if not input_path.exists():
            raise FileNotFoundError(str(input_path))

        if args.validate or args.analyze:
            text = input_path.read_text(encoding="utf-8")
            if args.validate:
                result = optimizer.validate(text)
            else:
                result = optimizer.analyze(text)
            print(json.dumps(result.to_dict(), indent=2))
            return 0 if not args.validate or result.is_valid else 1

        if input_path.is_dir():
            return run_directory(optimizer, args, options, input_path)

        result = _optimize_file(optimizer, args, options, input_path)
        if not result.success:
            logger.error(f"Optimization failed: {result.error}")
            return 1

        if args.output:
            Path(args.output).write_text(result.optimized_svg, encoding="utf-8")
            logger.info(
                f"Success! Output: {args.output} "
                f"({result.original_size} -> {result.optimized_size} bytes)"
            )
        else:
            sys.stdout.write(result.optimized_svg + "\n")
        return 0

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except (InvalidOptionsError, PresetNotFoundError) as e:
        logger.error(f"Invalid options: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
