"""
Main entry point for the CFD convergence advisor.

This module wires together all components and provides both CLI and programmatic interfaces.

Usage:
    # Command line
    python main.py --geometry "Flow over a cylinder" --velocity 10 --length 0.1

    # Programmatic
    from main import assess_setup
    setup = SimulationSetup.default().update("geometry", "cylinder")
    setup = setup.update("velocity", "10").update("characteristic_length", "0.1")
    assessment = assess_setup(setup)
"""

import argparse
import asyncio
import json
import os
import sys

from config import AppConfig, ConfigurationError, load_config, ensure_directories
from llm import AssessmentClient, AssessmentError
from logging_utils import LoggerAdapter, get_logger, set_verbose
from report import render_text
from schemas import Assessment
from state import SimulationSetup, TURBULENCE_MODELS
from workflow import IncompleteSetupError, prepare_request, run_assessment

logger = get_logger(__name__)


def create_client(config: AppConfig) -> AssessmentClient:
    """
    Create the assessment client.

    Args:
        config: Application configuration.

    Returns:
        AssessmentClient, logging requests under config.paths.logs_dir if enabled.
    """
    log_path = None
    if config.log_requests:
        ensure_directories(config)
        log_path = os.path.join(config.paths.logs_dir, "assessments.jsonl")
    return AssessmentClient(config.llm, log_path=log_path)


def assess_setup(setup: SimulationSetup, config: AppConfig | None = None) -> Assessment:
    """
    Assess one setup from start to finish.

    This is the main programmatic interface.

    Args:
        setup: The simulation setup to assess.
        config: Application configuration (loads default if None).

    Returns:
        The validated Assessment.

    Raises:
        ConfigurationError: If no API key is configured.
        IncompleteSetupError: If required fields are missing.
        AssessmentError: If the request fails.
    """
    if config is None:
        config = load_config()

    client = create_client(config)
    try:
        return asyncio.run(run_assessment(setup, client))
    finally:
        logger.debug(f"LLM usage: {client.stats.summary()}")


def setup_from_args(args: argparse.Namespace) -> SimulationSetup:
    """Build a SimulationSetup from parsed CLI arguments."""
    return SimulationSetup(
        geometry=args.geometry,
        velocity=args.velocity,
        characteristic_length=args.length,
        density=args.density,
        viscosity=args.viscosity,
        turbulence_model=args.turbulence,
        custom_turbulence_model=args.custom_turbulence,
        mesh_details=args.mesh,
        y_plus=args.y_plus,
        numerics=args.numerics,
        domain_extents=args.domain,
    )


def build_parser() -> argparse.ArgumentParser:
    defaults = SimulationSetup.default()
    parser = argparse.ArgumentParser(
        description="CFD Convergence Advisor: LLM assessment of a simulation setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py --geometry "Flow over a cylinder" --velocity 10 --length 0.1
    python main.py --geometry "NACA 0012" --velocity 50 --length 1 --density 1.225 --viscosity 1.81e-5 \\
        --turbulence "Other" --custom-turbulence "Reynolds Stress Model (RSM)" --y-plus "<1"
        """
    )

    # Required arguments
    parser.add_argument("--geometry", type=str, required=True,
                        help="Geometry description (e.g., 'Flow over a cylinder')")
    parser.add_argument("--velocity", type=str, required=True, help="Velocity (m/s)")
    parser.add_argument("--length", type=str, required=True,
                        help="Characteristic length (m), e.g. cylinder diameter")

    # Optional arguments
    parser.add_argument("--density", type=str, default=defaults.density,
                        help=f"Density (kg/m^3, default: {defaults.density} for water; air ~1.225)")
    parser.add_argument("--viscosity", type=str, default=defaults.viscosity,
                        help=f"Dynamic viscosity (Pa.s, default: {defaults.viscosity} for water; air ~1.81e-5)")
    parser.add_argument("--turbulence", type=str, default=defaults.turbulence_model,
                        choices=TURBULENCE_MODELS, help="Turbulence model")
    parser.add_argument("--custom-turbulence", type=str, default="",
                        help="Model name when --turbulence is 'Other'")
    parser.add_argument("--mesh", type=str, default="",
                        help="Mesh type, cell count, skewness, etc.")
    parser.add_argument("--y-plus", type=str, default="", help="y+ range (e.g., '<1' or '30-300')")
    parser.add_argument("--numerics", type=str, default="",
                        help="Scheme and Courant number (e.g., 'SIMPLE, Upwind, Co < 1')")
    parser.add_argument("--domain", type=str, default="",
                        help="Domain extents (e.g., '5D upstream, 10D downstream')")

    parser.add_argument("--config", type=str, default=None, help="Path to config JSON file")
    parser.add_argument("--json", action="store_true", help="Print the assessment as JSON")
    parser.add_argument("--dry-run", action="store_true",
                        help="Print the prompt that would be sent and exit")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Command-line interface. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)
    log = LoggerAdapter(logger, verbose=args.verbose)

    setup = setup_from_args(args)

    try:
        reynolds_text, prompt = prepare_request(setup)
    except IncompleteSetupError as e:
        logger.error(str(e))
        return 1

    log(f"Reynolds number: {reynolds_text}")

    if args.dry_run:
        print(prompt)
        return 0

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    log(f"Model: {config.llm.model} at {config.llm.base_url}")

    try:
        assessment = assess_setup(setup, config)
    except AssessmentError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130

    if args.json:
        print(json.dumps(assessment.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(render_text(assessment))
    return 0


if __name__ == "__main__":
    sys.exit(main())
