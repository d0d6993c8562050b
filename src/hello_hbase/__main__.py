"""Command-line entry point: ``python -m hello_hbase`` or ``hello-hbase``.

Takes no arguments. Settings come from the defaults in
hello_hbase.infrastructure.config, overridable with HELLO_HBASE_* variables.
"""

from __future__ import annotations

import sys
from typing import NoReturn

from hello_hbase.adapters.outbound import HappyBaseConnectionFactory, InMemoryConnectionFactory
from hello_hbase.application import DemoRunner
from hello_hbase.infrastructure.config import Config
from hello_hbase.infrastructure.container import Container
from hello_hbase.ports.outbound import ConnectionFactory


def build_connection_factory(config: Config) -> ConnectionFactory:
    """Pick the connection factory for the configured backend."""
    if config.backend == "memory":
        return InMemoryConnectionFactory()
    return HappyBaseConnectionFactory()


def main() -> NoReturn:
    """Run the walkthrough and exit with its status (0 success, 1 failure)."""
    container = Container.create()
    runner = DemoRunner(
        container.config,
        build_connection_factory(container.config),
        metrics=container.metrics,
        tracer=container.tracer,
    )
    result = runner.run()
    container.logger.info(
        "hello_hbase_exit",
        state=result.state.name,
        exit_code=result.exit_code,
    )
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
