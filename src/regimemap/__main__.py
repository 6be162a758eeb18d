"""Command-line interface."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from PySide6.QtCore import QEventLoop

from regimemap import config
from regimemap.app.application import create_app
from regimemap.app.state import channel_fractions
from regimemap.controller.engine import RegimeGridEngine
from regimemap.errors import RegimeMapError
from regimemap.logging_config import setup_logging
from regimemap.model.grid import Composition, GridParameters, GridSpec
from regimemap.model.messages import AcceptedResult
from regimemap.physics.evaluator import EosEvaluator, load_evaluator

logger = logging.getLogger("regimemap.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regimemap",
        description="Classify the dominant pressure channel over a (log T, log rho) grid.",
    )
    parser.add_argument("--log-t-min", type=float, default=config.DEFAULT_LOG_T_MIN)
    parser.add_argument("--log-t-max", type=float, default=config.DEFAULT_LOG_T_MAX)
    parser.add_argument("--log-rho-min", type=float, default=config.DEFAULT_LOG_RHO_MIN)
    parser.add_argument("--log-rho-max", type=float, default=config.DEFAULT_LOG_RHO_MAX)
    parser.add_argument("--cols", type=int, default=config.DEFAULT_COLUMNS)
    parser.add_argument("--rows", type=int, default=config.DEFAULT_ROWS)
    parser.add_argument("-X", type=float, default=config.DEFAULT_X, help="Hydrogen mass fraction")
    parser.add_argument("-Y", type=float, default=config.DEFAULT_Y, help="Helium mass fraction")
    parser.add_argument("-Z", type=float, default=config.DEFAULT_Z, help="Metal mass fraction")
    parser.add_argument("--eta", type=float, default=0.0, help="Radiation departure parameter")
    parser.add_argument(
        "--request",
        help="Request message as JSON (logTMin, ..., seq). Overrides the grid options above.",
    )
    parser.add_argument(
        "--evaluator",
        help=f"EOS evaluator as 'package.module:function' (default: ${config.EVALUATOR_ENV_VAR})",
    )
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def parameters_from_args(args: argparse.Namespace) -> GridParameters:
    if args.request:
        try:
            message = json.loads(args.request)
        except json.JSONDecodeError as e:
            raise RegimeMapError(f"--request is not valid JSON: {e}") from e
        if not isinstance(message, dict):
            raise RegimeMapError("--request must be a JSON object.")
        # The engine assigns its own sequence number.
        return GridSpec.from_message(message)

    return GridParameters(
        log_temperature_min=args.log_t_min,
        log_temperature_max=args.log_t_max,
        log_density_min=args.log_rho_min,
        log_density_max=args.log_rho_max,
        columns=args.cols,
        rows=args.rows,
        composition=Composition(args.X, args.Y, args.Z),
        radiation_departure_parameter=args.eta,
    )


def run_once(parameters: GridParameters, evaluator: EosEvaluator) -> AcceptedResult:
    """
    Evaluate one grid through the engine and wait for it.

    Raises:
        RegimeMapError: If the computation channel reports a failure.
    """
    create_app()
    engine = RegimeGridEngine(evaluator)
    loop = QEventLoop()
    outcome: Dict[str, object] = {}

    def on_accepted(result: AcceptedResult) -> None:
        outcome["result"] = result
        loop.quit()

    def on_failed(sequence_number: int, message: str) -> None:
        outcome["error"] = message
        loop.quit()

    engine.result_accepted.connect(on_accepted)
    engine.request_failed.connect(on_failed)
    engine.start()
    try:
        engine.dispatch(parameters)
        loop.exec()
    finally:
        engine.shutdown()

    if "error" in outcome:
        raise RegimeMapError(f"Grid evaluation failed: {outcome['error']}")
    return outcome["result"]  # type: ignore[return-value]


def format_summary(result: AcceptedResult) -> List[str]:
    lines = [f"Grid {result.columns}x{result.rows} evaluated in {result.elapsed_ms:.1f} ms"]
    for code, fraction in channel_fractions(result.grid).items():
        lines.append(f"  {code.name.lower():<11} {fraction * 100.0:6.2f} %")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    evaluator_path = config.get_evaluator_path(args.evaluator)
    if evaluator_path is None:
        logger.error(f"No EOS evaluator configured. Use --evaluator or set {config.EVALUATOR_ENV_VAR}.")
        return 1

    try:
        evaluator = load_evaluator(evaluator_path)
        parameters = parameters_from_args(args)
        result = run_once(parameters, evaluator)
    except (RegimeMapError, ValueError) as e:
        logger.error(str(e))
        return 1

    if args.json:
        summary = {
            "cols": result.columns,
            "rows": result.rows,
            "elapsed": result.elapsed_ms,
            "fractions": {code.name.lower(): f for code, f in channel_fractions(result.grid).items()},
        }
        print(json.dumps(summary, indent=2))
    else:
        print("\n".join(format_summary(result)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
