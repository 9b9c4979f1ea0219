"""AgentSessionFactory — builds one AgentSession per (model, case) run."""

from collections.abc import Mapping

from verifaible_bench.config.domain.model import ModelConfig
from verifaible_bench.config.domain.session import SessionConfig
from verifaible_bench.provider.domain.adapter import ProviderAdapter
from verifaible_bench.session.application.agent_session import AgentSession
from verifaible_bench.session.domain.observer import SessionObserver
from verifaible_bench.tools.domain.registry import ToolRegistry


class AgentSessionFactory:
    """Creates AgentSession instances that share adapters and the tool registry.

    Adapters are keyed by provider name and are stateless across sessions,
    so one instance per provider serves every concurrent run.
    """

    def __init__(
        self,
        adapters: Mapping[str, ProviderAdapter],
        registry: ToolRegistry,
        config: SessionConfig,
        observer: SessionObserver,
    ) -> None:
        self._adapters = adapters
        self._registry = registry
        self._config = config
        self._observer = observer

    def create(self, model: ModelConfig, case_id: str) -> AgentSession:
        """Construct a new AgentSession for the given model and case.

        Raises:
            KeyError: if no adapter was built for the model's provider.
        """
        return AgentSession(
            model=model.name,
            case_id=case_id,
            adapter=self._adapters[model.provider],
            registry=self._registry,
            config=self._config,
            observer=self._observer,
        )
