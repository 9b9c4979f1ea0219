"""Provider adapter registry — maps ProviderConfig.type to an adapter."""

from verifaible_bench.config.domain.provider import ProviderConfig
from verifaible_bench.provider.domain.adapter import ProviderAdapter
from verifaible_bench.provider.domain.observer import ProviderObserver
from verifaible_bench.provider.infrastructure.chat_completions import ChatCompletionsAdapter
from verifaible_bench.provider.infrastructure.errors import ProviderTypeNotSupportedError
from verifaible_bench.provider.infrastructure.responses import ResponsesAdapter


def create_provider_adapter(
    config: ProviderConfig, observer: ProviderObserver
) -> ProviderAdapter:
    """Return the adapter for the given provider's wire protocol.

    Raises:
        ProviderTypeNotSupportedError: if config.type is not a known protocol.
    """
    if config.type == "responses":
        return ResponsesAdapter(config=config, observer=observer)
    if config.type == "chat_completions":
        return ChatCompletionsAdapter(config=config, observer=observer)

    raise ProviderTypeNotSupportedError(provider_type=config.type)
