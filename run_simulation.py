#!/usr/bin/env python3
"""
Attraction queue simulation runner.
Loads a scenario (YAML file or preset), runs it, and writes the client table,
charts and a metrics summary.

Usage: python3 run_simulation.py [--options]
"""

import argparse
import json
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from env_config import get_config_path, get_results_dir
from eval.export import write_results_csv
from eval.plots import plot_client_table
from eval.run_presets import main as run_presets
from eval.run_scenarios import load_config as load_scenario
from eval.run_scenarios import result_summary
from presets.definitions import get_preset_by_name
from sim.config import Configuration, SampleSet, describe
from sim.errors import ConfigurationError, InvariantViolation
from sim.runner import SimulationResult, simulate


class SimulationPipeline:
    """One run end to end, with logging and step checkpoints."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.results_dir = Path(config["results_dir"])
        self.results_dir.mkdir(parents=True, exist_ok=True)
        (self.results_dir / "logs").mkdir(exist_ok=True)

        self.log_file = (
            self.results_dir
            / "logs"
            / f"simulation_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        )

        self.start_time = time.time()
        self.scenario: Optional[Configuration] = None
        self.samples: Optional[SampleSet] = None
        self.result: Optional[SimulationResult] = None
        self.checkpoint_data: Dict[str, Any] = {
            "started_at": datetime.now().isoformat(),
            "config": {k: str(v) for k, v in config.items()},
            "completed_steps": [],
            "failed_steps": [],
            "current_step": None,
        }

    def log(self, message: str, level: str = "INFO"):
        """Log message to file and console."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        log_message = f"[{timestamp}] {level}: {message}"

        print(log_message)
        with open(self.log_file, "a") as f:
            f.write(log_message + "\n")

    def checkpoint(self, step_name: str):
        """Record a completed step."""
        self.checkpoint_data["completed_steps"].append(step_name)
        self.checkpoint_data["current_step"] = step_name

        checkpoint_file = self.results_dir / "logs" / "simulation_checkpoint.json"
        with open(checkpoint_file, "w") as f:
            json.dump(self.checkpoint_data, f, indent=2)

    def _fail(self, step_name: str, message: str) -> bool:
        self.log(message, "ERROR")
        self.checkpoint_data["failed_steps"].append(step_name)
        return False

    def step_load(self) -> bool:
        """Step 1: Load the scenario from a preset or a file."""
        self.checkpoint_data["current_step"] = "load"
        try:
            if self.config.get("preset"):
                preset = get_preset_by_name(self.config["preset"])
                self.scenario, self.samples = preset["config"], preset["samples"]
                self.log(f"Loaded preset {self.config['preset']}")
            else:
                self.scenario, self.samples = load_scenario(self.config["config_file"])
                self.log(f"Loaded scenario {self.config['config_file']}")
        except ConfigurationError as e:
            for problem in e.errors:
                self.log(f"  {problem}", "ERROR")
            return self._fail("load", f"Scenario rejected with {len(e.errors)} problem(s)")
        except (KeyError, OSError) as e:
            return self._fail("load", f"Could not load scenario: {e}")

        if self.config.get("seed") is not None:
            self.scenario = Configuration.from_dict(
                {**self.scenario.to_dict(), "seed": self.config["seed"]}
            )
        self.log(describe(self.scenario))
        self.checkpoint("load")
        return True

    def step_simulate(self) -> bool:
        """Step 2: Validate and run."""
        self.checkpoint_data["current_step"] = "simulate"
        try:
            self.result = simulate(self.scenario, self.samples)
        except ConfigurationError as e:
            for problem in e.errors:
                self.log(f"  {problem}", "ERROR")
            return self._fail("simulate", f"Configuration rejected with {len(e.errors)} problem(s)")
        except InvariantViolation as e:
            return self._fail("simulate", f"Run aborted: {e}")

        for warning in self.result.warnings:
            self.log(warning, "WARNING")
        m = self.result.metrics
        self.log(
            f"Served {m.overall.count} clients; mean wait {m.overall.mean_wait:.2f}, "
            f"utilization {m.utilization_pct:.1f}%, span {m.total_span:.2f}"
        )
        if m.vip is not None and m.regular is not None:
            self.log(
                f"VIP mean wait {m.vip.mean_wait:.2f} ({m.vip.count} clients), "
                f"regular mean wait {m.regular.mean_wait:.2f} ({m.regular.count} clients)"
            )
        self.checkpoint("simulate")
        return True

    def step_export(self) -> bool:
        """Step 3: Write the client table and summary JSON."""
        self.checkpoint_data["current_step"] = "export"
        try:
            table = write_results_csv(self.result, self.results_dir / "clients_results.csv")
            with open(self.results_dir / "summary.json", "w") as f:
                json.dump(result_summary(self.result), f, indent=2)
        except OSError as e:
            return self._fail("export", f"Export failed: {e}")
        self.log(f"Wrote {table}")
        self.checkpoint("export")
        return True

    def step_plots(self) -> bool:
        """Step 4: Charts from the exported table."""
        self.checkpoint_data["current_step"] = "plots"
        try:
            paths = plot_client_table(self.results_dir / "clients_results.csv")
        except Exception as e:
            return self._fail("plots", f"Plotting failed: {e}")
        self.log(f"Saved {len(paths)} chart(s)")
        self.checkpoint("plots")
        return True

    def step_presets(self) -> bool:
        """Optional: run every preset side by side."""
        self.checkpoint_data["current_step"] = "presets"
        try:
            run_presets(results_dir=self.results_dir, base_seed=self.config.get("seed"))
        except (ConfigurationError, InvariantViolation) as e:
            return self._fail("presets", f"Preset run failed: {e}")
        self.checkpoint("presets")
        return True

    def run(self) -> Dict[str, Any]:
        steps = [self.step_load, self.step_simulate, self.step_export]
        if self.config.get("plots", True):
            steps.append(self.step_plots)
        for step in steps:
            if not step():
                break
        if self.config.get("all_presets") and not self.checkpoint_data["failed_steps"]:
            self.step_presets()

        elapsed = time.time() - self.start_time
        self.checkpoint_data["elapsed_seconds"] = elapsed
        if self.checkpoint_data["failed_steps"]:
            self.log(f"Finished with failures: {self.checkpoint_data['failed_steps']}", "ERROR")
        else:
            self.log(f"Finished in {elapsed:.2f}s")
        return self.checkpoint_data


def load_config(config_file: Optional[str]) -> Dict[str, Any]:
    """Runner settings: defaults from .env, overridden by a JSON settings file."""
    config: Dict[str, Any] = {}
    if config_file and config_file.endswith(".json"):
        with open(config_file) as f:
            config = json.load(f)
    elif config_file:
        config["config_file"] = config_file

    defaults = {
        "config_file": str(get_config_path()),
        "results_dir": get_results_dir(),
        "preset": None,
        "seed": None,
        "plots": True,
        "all_presets": False,
    }
    for k, v in defaults.items():
        if k not in config:
            config[k] = v
    return config


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Attraction queue simulation runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default scenario (config/default.yaml or QUEUE_SIM_CONFIG)
  python3 run_simulation.py

  # A preset
  python3 run_simulation.py --preset demo_five_clients

  # A scenario file, reseeded, without charts
  python3 run_simulation.py --config config/fixed_intervals.yaml --seed 3 --no-plots
        """,
    )

    parser.add_argument("--config", type=str, help="Scenario YAML, or runner settings JSON")
    parser.add_argument("--preset", type=str, default=None, help="Preset name instead of a file")
    parser.add_argument("--results", type=str, default=None, help="Results directory")
    parser.add_argument("--seed", type=int, default=None, help="Seed for internally drawn samples")
    parser.add_argument("--no-plots", action="store_true", help="Skip chart generation")
    parser.add_argument("--all-presets", action="store_true", help="Also run every preset")

    args = parser.parse_args()

    config = load_config(args.config)
    if args.results:
        config["results_dir"] = args.results
    if args.preset:
        config["preset"] = args.preset
    if args.seed is not None:
        config["seed"] = args.seed
    if args.no_plots:
        config["plots"] = False
    if args.all_presets:
        config["all_presets"] = True

    pipeline = SimulationPipeline(config)

    try:
        result = pipeline.run()
        return 0 if not result["failed_steps"] else 1
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
