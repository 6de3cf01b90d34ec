"""CLI for replaying offline elevator bank scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from simulation import Scenario, run_scenario


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write results as JSON",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level for control loop events")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    data = json.loads(args.config.read_text())
    scenario = Scenario.from_dict(data, default_name=args.config.stem)
    results = run_scenario(scenario)

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Dispatcher: {results['dispatcher']}")
    print(f"Duration: {results['duration']} ticks")
    if scenario.drain:
        status = "drained" if results["drained"] else "not drained"
        print(f"Drain: {status} after {results['drain_ticks']} extra ticks")
    for rejected in results["rejected_calls"]:
        print(f"Rejected call at tick {rejected['tick']}: {rejected['error']}")
    print("Final metrics:")
    for key, value in results["final_metrics"].items():
        print(f"  {key}: {value}")
    if args.output:
        print(f"Saved results to {args.output}")


if __name__ == "__main__":
    main()
