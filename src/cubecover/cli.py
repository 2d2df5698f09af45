"""
Command-line interface for cubecover.

This module provides the `cubecover` command: solving one piece selection,
surveying every selector combination, inspecting the piece catalog and
managing YAML configuration files.
"""

import argparse
import sys
import json
from typing import Optional, Dict
from pathlib import Path

from cubecover.core.base import SolveStatus
from cubecover.core.catalog import (
    SOMA_PIECES, PIECE_MAPPING, COLOR_SELECTORS, get_piece, load_catalog, resolve_piece_key,
)
from cubecover.core.config import (
    Config, SolverConfig, SelectionConfig, load_config, save_config, validate_config,
)
from cubecover.runner import SolveRunner
from cubecover.solver.rotation import rotations
from cubecover.survey_runner import run_survey
from cubecover.utils.display import StatusDisplay, LiveLogger


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    selectors = ", ".join(f"{k}={v}" for k, v in sorted(PIECE_MAPPING.items()))

    parser = argparse.ArgumentParser(
        prog="cubecover",
        description="cubecover: pack polycube pieces into an N x N x N cube by exact cover",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Solve the default Soma selection on a 3x3x3 cube
  cubecover solve

  # Solve a custom selection (names or selector numbers)
  cubecover solve --pieces L T Z S B P --size 3

  # Solve from a configuration file with a node budget
  cubecover solve --config configs/soma.yaml --max-nodes 100000

  # Survey every selector combination
  cubecover survey --config configs/survey.yaml --workers 8

  # Inspect the catalog
  cubecover list-pieces
  cubecover show-piece L

  # Create and check a configuration
  cubecover create-config --output config.yaml
  cubecover validate-config config.yaml --strict

Selector numbers: {selectors}
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Solve one piece selection")
    solve_parser.add_argument("--config", "-c", help="Path to configuration file")
    solve_parser.add_argument("--pieces", "-p", nargs="+", help="Override the selected pieces")
    solve_parser.add_argument("--base", help="Override the base piece ('none' to skip it)")
    solve_parser.add_argument("--size", "-n", type=int, help="Override cube edge length")
    solve_parser.add_argument("--catalog", help="Override the catalog file")
    solve_parser.add_argument("--max-nodes", type=int, help="Stop after this many search nodes")
    solve_parser.add_argument("--time-limit", type=float, help="Stop after this many seconds")
    solve_parser.add_argument("--output-dir", help="Override output directory")
    solve_parser.add_argument("--no-save", action="store_true", help="Do not write run artefacts")
    solve_parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    solve_parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")

    # Survey command
    survey_parser = subparsers.add_parser("survey", help="Solve every selector combination")
    survey_parser.add_argument("--config", "-c", help="Path to configuration file")
    survey_parser.add_argument("--size", "-n", type=int, help="Override cube edge length")
    survey_parser.add_argument("--workers", "-w", type=int, help="Number of parallel solves")
    survey_parser.add_argument("--limit", type=int, help="Only solve the first N selections")
    survey_parser.add_argument("--max-nodes", type=int, help="Per-selection node budget")
    survey_parser.add_argument("--output-dir", help="Override output directory")
    survey_parser.add_argument("--no-save", action="store_true", help="Do not write the results table")

    # List pieces command
    list_parser = subparsers.add_parser("list-pieces", help="List catalog pieces")
    list_parser.add_argument("--catalog", help="Catalog file (defaults to the Soma pieces)")
    list_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")

    # Show piece command
    show_parser = subparsers.add_parser("show-piece", help="Show one piece layer by layer")
    show_parser.add_argument("name", help="Piece name or selector number")
    show_parser.add_argument("--catalog", help="Catalog file (defaults to the Soma pieces)")

    # Create config command
    config_parser = subparsers.add_parser("create-config", help="Create default configuration file")
    config_parser.add_argument("--output", "-o", default="config.yaml", help="Output configuration file")
    config_parser.add_argument("--size", "-n", type=int, default=3, help="Default cube edge length")
    config_parser.add_argument("--pieces", "-p", nargs="+", help="Default piece selection")
    config_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    # Validate config command
    validate_parser = subparsers.add_parser("validate-config", help="Validate configuration file")
    validate_parser.add_argument("config", help="Configuration file to validate")
    validate_parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")

    return parser


def _load_and_validate_config(args, logger) -> Optional[Config]:
    """Load the configuration (or defaults) and report validation issues."""
    try:
        if getattr(args, "config", None):
            logger.log_action("Loading configuration")
            config = load_config(args.config)
            logger.log_result("Configuration loaded")
        else:
            config = Config()
    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {args.config}")
        logger.log_info("Use 'cubecover create-config' to create a default configuration")
        return None
    except ValueError as e:
        logger.log_error(f"Configuration error: {e}")
        return None

    try:
        _apply_overrides(config, args)
    except ValueError as e:
        logger.log_error(f"Invalid option: {e}")
        return None

    issues = validate_config(config)
    errors = [issue for issue in issues if issue.startswith("ERROR")]
    warnings = [issue for issue in issues if not issue.startswith("ERROR")]

    if errors:
        StatusDisplay.print_section("Configuration Errors")
        for error in errors:
            logger.log_error(error.replace("ERROR: ", ""))
        return None
    for warning in warnings:
        logger.log_warning(warning.replace("WARNING: ", ""))
    return config


def _apply_overrides(config: Config, args) -> None:
    """Apply command line overrides; rebuilt sections are re-validated."""
    size = getattr(args, "size", None)
    max_nodes = getattr(args, "max_nodes", None)
    time_limit = getattr(args, "time_limit", None)
    if size is not None or max_nodes is not None or time_limit is not None:
        config.solver = SolverConfig(
            cube_size=size if size is not None else config.solver.cube_size,
            max_nodes=max_nodes if max_nodes is not None else config.solver.max_nodes,
            time_limit=time_limit if time_limit is not None else config.solver.time_limit,
        )

    pieces = getattr(args, "pieces", None)
    base = getattr(args, "base", None)
    catalog = getattr(args, "catalog", None)
    if pieces or base or catalog:
        if base is not None and base.lower() == "none":
            base_piece = None
        else:
            base_piece = base or config.selection.base_piece
        config.selection = SelectionConfig(
            base_piece=base_piece,
            pieces=pieces or config.selection.pieces,
            catalog_path=catalog or config.selection.catalog_path,
        )

    if getattr(args, "output_dir", None):
        config.runner.log_dir = args.output_dir
    if getattr(args, "no_save", False):
        config.runner.save_logs = False
    if getattr(args, "workers", None):
        config.survey.max_workers = args.workers
    if getattr(args, "limit", None):
        config.survey.limit = args.limit


def solve_command(args) -> int:
    """Execute solve command."""
    logger = LiveLogger(verbose=getattr(args, "verbose", False))

    try:
        config = _load_and_validate_config(args, logger)
        if config is None:
            return 1

        runner = SolveRunner(config, verbose=args.verbose or config.runner.verbose)
        runner.setup()
        report = runner.run()

        if getattr(args, "json", False):
            print(json.dumps(report.to_dict(), indent=2))

        if report.status in (SolveStatus.SOLVED, SolveStatus.NO_SOLUTION):
            return 0
        return 1

    except KeyboardInterrupt:
        logger.log_warning("Solve interrupted by user")
        return 1
    except Exception as e:
        logger.log_error(f"Failed to solve: {e}")
        if getattr(args, "verbose", False):
            import traceback
            logger.log_error(traceback.format_exc())
        return 1


def survey_command(args) -> int:
    """Execute survey command."""
    logger = LiveLogger(verbose=True)

    try:
        StatusDisplay.print_header("Selection Survey")
        config = _load_and_validate_config(args, logger)
        if config is None:
            return 1

        StatusDisplay.print_config({
            "Cube Size": config.solver.cube_size,
            "Base Piece": config.selection.base_piece or "none",
            "Workers": config.survey.max_workers,
            "Limit": config.survey.limit or "all",
            "Max Nodes": config.solver.max_nodes or "unbounded",
            "Output Directory": config.runner.log_dir if config.runner.save_logs else "disabled",
        }, "Survey Configuration")

        reports = run_survey(config)
        errors = [r for r in reports if r.status == SolveStatus.ERROR]
        if errors:
            logger.log_error(f"{len(errors)} selections produced invalid solutions")
            return 1
        logger.log_result(f"Survey finished: {sum(r.success for r in reports)}/{len(reports)} solvable")
        return 0

    except KeyboardInterrupt:
        logger.log_warning("Survey interrupted by user")
        return 1
    except Exception as e:
        logger.log_error(f"Failed to run survey: {e}")
        return 1


def _catalog_from_args(args):
    if getattr(args, "catalog", None):
        return load_catalog(args.catalog)
    return SOMA_PIECES


def list_pieces_command(args) -> int:
    """Execute list-pieces command."""
    logger = LiveLogger(verbose=False)

    try:
        catalog = _catalog_from_args(args)
        selector_of: Dict[str, str] = {name: key for key, name in PIECE_MAPPING.items()}

        if args.format == "json":
            print(json.dumps({name: piece.to_dict() for name, piece in catalog.items()}, indent=2))
            return 0

        StatusDisplay.print_header("Available Pieces")
        for name, piece in catalog.items():
            selector = f"selector {selector_of[name]}" if name in selector_of else "no selector"
            color = f"#{piece.color:06x}" if piece.color is not None else "-"
            print(f"  • {name:<6} volume {piece.volume:<3} "
                  f"rotations {len(rotations(piece.shape)):<3} {color:<8} ({selector})")
        StatusDisplay.print_section("Selector Slots")
        for slot, (color_name, value) in enumerate(COLOR_SELECTORS.items(), 1):
            print(f"  {slot}. {color_name:<7} #{value:06x}")
        return 0

    except Exception as e:
        logger.log_error(f"Failed to list pieces: {e}")
        return 1


def show_piece_command(args) -> int:
    """Execute show-piece command."""
    logger = LiveLogger(verbose=False)

    try:
        catalog = _catalog_from_args(args)
        try:
            piece = get_piece(resolve_piece_key(args.name, catalog), catalog)
        except KeyError as e:
            logger.log_error(str(e).strip("'\""))
            return 1

        StatusDisplay.print_header(f"Piece: {piece.name}")
        StatusDisplay.print_piece(piece.name, piece.shape, len(rotations(piece.shape)))
        return 0

    except Exception as e:
        logger.log_error(f"Failed to show piece: {e}")
        return 1


def create_config_command(args) -> int:
    """Execute create-config command."""
    logger = LiveLogger(verbose=True)

    try:
        StatusDisplay.print_header("Creating Configuration File")

        if Path(args.output).exists() and not args.force:
            logger.log_warning(f"Configuration file already exists: {args.output}")
            response = input("Overwrite existing file? (y/N): ").strip().lower()
            if response not in ['y', 'yes']:
                logger.log_info("Configuration creation cancelled")
                return 0

        logger.log_action("Creating configuration")
        config = Config()
        config.runner.experiment_name = f"cube{args.size}_experiment"
        config.solver = SolverConfig(cube_size=args.size)
        if args.pieces:
            config.selection = SelectionConfig(pieces=args.pieces)
        save_config(config, args.output)
        logger.log_result(f"Configuration created: {args.output}")

        StatusDisplay.print_results({
            "Output File": args.output,
            "Cube Size": config.solver.cube_size,
            "Base Piece": config.selection.base_piece,
            "Pieces": " ".join(config.selection.pieces),
        }, "Configuration Summary")

        logger.log_info("Next steps:")
        logger.log_info("1. Validate the configuration: cubecover validate-config " + args.output)
        logger.log_info("2. Solve: cubecover solve --config " + args.output)
        return 0

    except Exception as e:
        logger.log_error(f"Failed to create config: {e}")
        return 1


def validate_config_command(args) -> int:
    """Execute validate-config command."""
    logger = LiveLogger(verbose=True)

    try:
        StatusDisplay.print_header("Configuration Validation")

        logger.log_action(f"Loading configuration from: {args.config}")
        config = load_config(args.config)
        logger.log_result("Configuration loaded successfully")

        StatusDisplay.print_config({
            "Experiment": config.runner.experiment_name,
            "Cube Size": config.solver.cube_size,
            "Base Piece": config.selection.base_piece or "none",
            "Pieces": " ".join(config.selection.pieces),
            "Catalog": config.selection.catalog_path or "built-in",
            "Output Dir": config.runner.log_dir,
        }, "Configuration Overview")

        logger.log_action("Validating configuration")
        issues = validate_config(config)

        errors = [issue for issue in issues if issue.startswith("ERROR")]
        warnings = [issue for issue in issues if not issue.startswith("ERROR")]

        if args.strict and warnings:
            errors.extend(warnings)
            warnings = []

        if errors:
            StatusDisplay.print_section("❌ Configuration Errors")
            for i, error in enumerate(errors, 1):
                logger.log_error(f"{i}. {error.replace('ERROR: ', '')}")
            StatusDisplay.print_results({
                "Status": "❌ FAILED",
                "Errors Found": len(errors),
                "Warnings Found": len(warnings),
            }, "Validation Summary")
            logger.log_error("Configuration validation failed. Please fix the errors above.")
            return 1

        if warnings:
            StatusDisplay.print_section("⚠️  Configuration Warnings")
            for i, warning in enumerate(warnings, 1):
                logger.log_warning(f"{i}. {warning}")
            StatusDisplay.print_results({
                "Status": "✓ VALID (with warnings)",
                "Warnings Found": len(warnings),
            }, "Validation Summary")
            return 0

        StatusDisplay.print_results({
            "Status": "✅ VALID",
            "Errors Found": 0,
            "Warnings Found": 0,
        }, "Validation Summary")
        logger.log_result("Configuration is ready to run.")
        return 0

    except FileNotFoundError:
        logger.log_error(f"Configuration file not found: {args.config}")
        return 1
    except Exception as e:
        logger.log_error(f"Failed to validate config: {e}")
        return 1


def main(argv=None) -> int:
    """Main CLI entry point."""
    try:
        parser = create_parser()
        argv = sys.argv[1:] if argv is None else argv

        if not argv:
            parser.print_help()
            return 1

        args = parser.parse_args(argv)

        # Route to appropriate command handler
        command_handlers = {
            "solve": solve_command,
            "survey": survey_command,
            "list-pieces": list_pieces_command,
            "show-piece": show_piece_command,
            "create-config": create_config_command,
            "validate-config": validate_config_command,
        }

        handler = command_handlers.get(args.command)
        if handler:
            return handler(args)
        parser.print_help()
        return 1

    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
