"""
Flow application host.

Wires the progress gateway, the screen presenter and the flow engine from
configuration, runs the engine, and performs the full reset the engine
asks for when it reaches its terminal abort state.
"""

from typing import Callable, Optional

import structlog

from .config.defaults import FlowConfig, PersistenceParams, TimingParams
from .errors import PersistenceError
from .persistence.backends import InMemoryBackend, KeyValueBackend, SQLiteBackend, UnavailableBackend
from .persistence.progress_store import ProgressGateway
from .screens.base import ScreenPresenter
from .screens.catalog import ScreenCatalog
from .state.machine import FlowEngine
from .state.models import ExitDirective, FlowExit, PersistencePolicy

logger = structlog.get_logger(__name__)

PresenterFactory = Callable[[TimingParams], ScreenPresenter]
BackendFactory = Callable[[PersistenceParams], KeyValueBackend]


def create_backend(params: PersistenceParams) -> KeyValueBackend:
    """Create the configured storage backend."""
    if params.backend == "memory":
        return InMemoryBackend()

    if params.backend == "unavailable":
        return UnavailableBackend()

    try:
        return SQLiteBackend(params.db_path)
    except PersistenceError as e:
        # An unusable store is reported through the flow, not at startup
        logger.error("SQLite backend unavailable", db_path=params.db_path, error=str(e))
        return UnavailableBackend(reason=str(e))


class FlowApplication:
    """
    Host process for the presentation flow.

    The storage backend is created once and outlives resets. Presenter,
    gateway and engine are rebuilt from scratch for every run, which is
    what a restart after an abort means here.
    """

    def __init__(
        self,
        config: FlowConfig,
        presenter_factory: PresenterFactory,
        backend_factory: Optional[BackendFactory] = None,
        catalog: Optional[ScreenCatalog] = None
    ) -> None:
        self.config = config
        self.presenter_factory = presenter_factory
        self.catalog = catalog or ScreenCatalog()
        self.backend = (backend_factory or create_backend)(config.persistence)
        self.restart_count = 0
        self.logger = logger

        self.logger.info(
            "Flow application initialized",
            backend=type(self.backend).__name__,
            storage_key=config.persistence.storage_key,
            policy=config.persistence.policy
        )

    def build_engine(self) -> FlowEngine:
        """Build a fresh presenter, gateway and engine."""
        presenter = self.presenter_factory(self.config.timing)
        gateway = ProgressGateway(
            self.backend,
            key=self.config.persistence.storage_key,
            delay_ms=self.config.timing.persistence_delay_ms
        )
        return FlowEngine(
            presenter,
            gateway,
            catalog=self.catalog,
            policy=PersistencePolicy(self.config.persistence.policy)
        )

    async def run(self) -> FlowExit:
        """
        Run the flow, restarting after every abort.

        Returns:
            The exit of the last engine run: HALTED when the transition
            budget ran out, RESTART when the restart budget ran out
        """
        max_restarts = self.config.engine.max_restarts

        while True:
            engine = self.build_engine()
            flow_exit = await engine.run(max_transitions=self.config.engine.max_transitions)

            if flow_exit.directive is not ExitDirective.RESTART:
                return flow_exit

            if max_restarts is not None and self.restart_count >= max_restarts:
                self.logger.error(
                    "Restart budget exhausted",
                    restarts=self.restart_count,
                    reason=flow_exit.reason
                )
                return flow_exit

            self.restart_count += 1
            self.logger.warning(
                "Resetting flow",
                restart=self.restart_count,
                reason=flow_exit.reason
            )
