#!/usr/bin/env python3
"""Run the presentation flow in the terminal.

Usage:
    python scripts/run_flow.py [--config-dir DIR] [--memory]

Screens are written to stdout and choices read from stdin. Logs go to
stderr. The flow runs until end of input (Ctrl-D) or Ctrl-C.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from stepflow_app.config.loader import ConfigLoader
from stepflow_app.engine import FlowApplication
from stepflow_app.errors import ConfigurationError
from stepflow_app.logging.config import configure_logging
from stepflow_app.screens import ConsolePresenter, ScreenContainer


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the presentation flow")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory holding flow.yaml")
    parser.add_argument("--memory", action="store_true",
                        help="Keep progress in memory instead of SQLite")
    parser.add_argument("--fast", action="store_true",
                        help="Skip all screen and storage delays")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    overrides = {}
    if args.memory:
        overrides["persistence"] = {"backend": "memory"}
    if args.fast:
        overrides["timing"] = {
            "status_duration_ms": 0,
            "transition_ms": 0,
            "persistence_delay_ms": 0,
        }

    try:
        config = ConfigLoader.create(args.config_dir).load_config(overrides)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(
        level=config.logging.level,
        format_json=config.logging.format_json,
        stream=sys.stderr
    )

    def presenter_factory(timing):
        container = ScreenContainer(sys.stdout, sys.stdin, clear_sequence="\033[2J\033[H")
        return ConsolePresenter.builder().mount(container).with_timing(timing).build()

    app = FlowApplication(config, presenter_factory)

    try:
        flow_exit = asyncio.run(app.run())
    except (EOFError, KeyboardInterrupt):
        print("\nBye.", file=sys.stderr)
        return 0

    print(f"Flow stopped: {flow_exit.directive.value}", file=sys.stderr)
    return 0 if flow_exit.reason is None else 1


if __name__ == "__main__":
    sys.exit(main())
