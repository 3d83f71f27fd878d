"""
Application Context
===================

Builds every long-lived component once and wires them together explicitly:

    Config ──► log level
       │
       ├──► ModelCatalog ──► ModelClient (one SDK client per provider)
       │
       ├──► MemoryJournal
       │
       ├──► IntentClassifier ──► Router
       │
       └──► AgentRegistry (nine agents, one per role)

Nothing here is global: two contexts in the same process are independent.

Lifecycle:
    async with AppContext() as app:          # startup(): providers, agent models
        outcome, result = await app.handle("[work] review the auth PR")
                                             # shutdown(): close SDK clients
"""

from switchboard.agent import AgentObserver, AgentRegistry, CancellationToken, LoggingObserver
from switchboard.memory import InMemoryJournal, MemoryJournal
from switchboard.providers import ModelCatalog, ModelClient
from switchboard.router import IntentClassifier, RouteOutcome, Router
from switchboard.types import ModelInfo, TaskResult
from switchboard.utils.config import Config, load_config
from switchboard.utils.logger import Logger, set_log_level

logger = Logger("AppContext")


class AppContext:
    """
    Owner of the application's components.

    Example:
        app = AppContext(config, models=discovered_models)
        await app.startup()
        try:
            outcome = await app.router.route("deploy the api to staging")
            if outcome.task:
                await app.registry.execute_task(outcome.task)
        finally:
            await app.shutdown()
    """

    def __init__(
        self,
        config: Config | None = None,
        models: list[ModelInfo] | None = None,
        journal: MemoryJournal | None = None,
        observer: AgentObserver | None = None
    ):
        """
        Build all components. No network activity happens here.

        Args:
            config: Configuration (loaded from the environment when omitted)
            models: Discovered models (the configured default models when omitted)
            journal: Memory collaborator (in-memory when omitted)
            observer: Progress observer for every agent (logging when omitted)
        """
        self.config = config or load_config()
        set_log_level(self.config.log_level)

        if models is not None:
            self.catalog = ModelCatalog(models)
        else:
            self.catalog = ModelCatalog.from_model_ids(self.config.configured_model_ids())

        self.client = ModelClient(self.catalog, timeout=self.config.agent.provider_timeout)
        self.journal = journal if journal is not None else InMemoryJournal()

        router_model = self._router_model()
        self.classifier = IntentClassifier(self.client, router_model)
        self.router = Router(self.journal, self.classifier, self.client, router_model)

        self.registry = AgentRegistry.default(
            self.client,
            self.config.agent,
            observer or LoggingObserver(),
            self.journal,
        )
        self._started = False

    def _router_model(self) -> str | None:
        if self.config.models.default_work_model:
            return self.config.models.default_work_model
        best = self.catalog.best_work_model()
        return best.id if best else None

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def startup(self) -> None:
        """Configure provider clients and choose a model for every agent."""
        if self._started:
            return

        for provider_config in self.config.provider_configs():
            self.client.configure_provider(provider_config)

        self.registry.initialize(
            self.catalog,
            work_model=self.config.models.default_work_model,
            personal_model=self.config.models.default_personal_model,
        )

        self._started = True
        logger.info(f"Started: {self.catalog.summary()}, {len(self.registry)} agents")

    async def shutdown(self) -> None:
        """Close provider clients."""
        if not self._started:
            return

        await self.client.close()
        self._started = False
        logger.info("Shutdown complete")

    async def __aenter__(self) -> "AppContext":
        await self.startup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    # ==========================================================================
    # Requests
    # ==========================================================================

    async def handle(
        self,
        text: str,
        cancel: CancellationToken | None = None
    ) -> tuple[RouteOutcome, TaskResult | None]:
        """
        Route a request and, if it produced a task, run it.

        Returns:
            (routing outcome, task result or None when no task was created)
        """
        outcome = await self.router.route(text)
        if outcome.task is None:
            return outcome, None

        result = await self.registry.execute_task(outcome.task, cancel)
        return outcome, result
