"""
Command-line interface for stepwise.

Resolves step text to ActionPlans without a browser, for authoring and
debugging step libraries.

Commands:
- plan STEP...        print the plan for each step as JSON
- plan-file PATH      plan every step in a .feature file or YAML step list
- supported STEP      exit 0 when some tier handles the step, else 1 with suggestions
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import structlog  # noqa: I001
import yaml

from stepwise.errors import StepFileError, StepwiseError
from stepwise.utils.text import GHERKIN_KEYWORDS


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure structlog for CLI output."""
    import logging

    log_level = "DEBUG" if debug else "INFO" if verbose else "WARNING"

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="stepwise",
        description="stepwise - resolve natural-language test steps into action plans",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  stepwise plan 'When I click "Submit" button'
  stepwise plan 'When I enter "John" in First Name' 'Then I should see "Order Confirmed"'
  stepwise plan-file features/checkout.feature
  stepwise supported 'When I teleport to the moon'
""",
    )

    parser.add_argument(
        "--no-intelligence",
        action="store_true",
        dest="no_intelligence",
        help="Disable the intent pipeline; use only the pattern cascade",
    )

    parser.add_argument(
        "--env-file",
        default=None,
        dest="env_file",
        help="Path to a .env file with STEPWISE_* settings",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    plan = subparsers.add_parser("plan", help="Print the plan for each step as JSON")
    plan.add_argument("steps", nargs="+", help="Step text, optionally with a Gherkin keyword")

    plan_file = subparsers.add_parser("plan-file", help="Plan every step in a .feature or YAML file")
    plan_file.add_argument("path", help="Path to a .feature file or a YAML file with a 'steps' list")

    supported = subparsers.add_parser("supported", help="Exit 0 when the step is supported")
    supported.add_argument("step", help="Step text")

    return parser


def read_steps(path: str | Path) -> list[str]:
    """
    Read step lines from a Gherkin feature file or a YAML step list.

    Raises:
        StepFileError: If the file is missing or not a usable step source
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StepFileError(f"Cannot read step file {path}: {e}") from e

    if path.suffix.lower() in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise StepFileError(f"Invalid YAML in {path}: {e}") from e
        steps = data.get("steps") if isinstance(data, dict) else None
        if not isinstance(steps, list):
            raise StepFileError(f"{path} has no 'steps' list")
        return [str(step).strip() for step in steps if str(step).strip()]

    keywords = tuple(f"{k} " for k in GHERKIN_KEYWORDS)
    return [line.strip() for line in content.splitlines() if line.strip().startswith(keywords)]


def build_resolver(args: argparse.Namespace):
    """Build a StepResolver from CLI options."""
    from stepwise.config import load_settings
    from stepwise.resolver import StepResolver

    settings = load_settings(args.env_file)
    if args.no_intelligence:
        settings = settings.model_copy(update={"intelligence_enabled": False})
    return StepResolver(settings=settings)


def run(args: argparse.Namespace) -> int:
    """
    Execute the selected command.

    Returns:
        Exit code (0 for success, non-zero for errors or unsupported steps)
    """
    logger = structlog.get_logger(__name__)
    resolver = build_resolver(args)

    match args.command:
        case "plan":
            steps = args.steps
        case "plan-file":
            steps = read_steps(args.path)
            logger.info("Loaded steps", path=args.path, count=len(steps))
        case "supported":
            supported = resolver.parser.is_step_supported(args.step)
            print("supported" if supported else "unsupported")
            if not supported:
                suggestions = resolver.parser.suggest_alternatives(args.step)
                if suggestions:
                    print("Did you mean:")
                    for suggestion in suggestions:
                        print(f"  {suggestion}")
            return 0 if supported else 1
        case _:
            return 2

    plans = [resolver.plan(step).to_dict() for step in steps]
    print(json.dumps(plans if len(plans) != 1 or args.command == "plan-file" else plans[0], indent=2))

    unknown = sum(1 for plan in plans if plan["action_type"] == "unknown")
    if unknown:
        logger.warning("Unresolved steps", count=unknown)
        return 1
    return 0


def main() -> None:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args()

    configure_logging(verbose=args.verbose, debug=args.debug)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except StepwiseError as e:
        logger = structlog.get_logger(__name__)
        logger.error("Command failed", error=str(e))
        if args.debug:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()
