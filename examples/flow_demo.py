#!/usr/bin/env python3
"""
Flow Demo - StepFlow Presentation Engine

Runs the console presenter against canned input to show the three ways
the flow can start:
- first visit: loading, four intro screens, saving, main screen
- returning visit: loading, main screen
- broken storage: loading, error screen, restart

Run: python examples/flow_demo.py
"""

import asyncio
import io

from stepflow_app.config.defaults import TimingParams
from stepflow_app.logging.config import configure_logging
from stepflow_app.persistence import InMemoryBackend, ProgressGateway, UnavailableBackend
from stepflow_app.screens import ConsolePresenter, ScreenContainer
from stepflow_app.state.machine import FlowEngine

FAST = TimingParams(status_duration_ms=0, transition_ms=0, persistence_delay_ms=0)


def build_engine(backend, user_input: str) -> tuple[FlowEngine, io.StringIO]:
    output = io.StringIO()
    container = ScreenContainer(output, io.StringIO(user_input))
    presenter = ConsolePresenter.builder().mount(container).with_timing(FAST).build()
    return FlowEngine(presenter, ProgressGateway(backend, delay_ms=0)), output


def run_until_input_ends(engine: FlowEngine):
    try:
        return asyncio.run(engine.run())
    except EOFError:
        return None


def main():
    configure_logging(level="WARNING")
    backend = InMemoryBackend()

    print("🆕 FIRST VISIT")
    print("=" * 50)
    engine, output = build_engine(backend, "\n\n\n\n2\n\n")
    run_until_input_ends(engine)
    print(output.getvalue())

    print("🔁 RETURNING VISIT (progress stored)")
    print("=" * 50)
    engine, output = build_engine(backend, "1\n")
    run_until_input_ends(engine)
    print(output.getvalue())

    print("💥 BROKEN STORAGE")
    print("=" * 50)
    engine, output = build_engine(UnavailableBackend(), "\n")
    flow_exit = run_until_input_ends(engine)
    print(output.getvalue())
    print(f"Engine exit: {flow_exit.directive.value} ({flow_exit.reason})")


if __name__ == "__main__":
    main()
