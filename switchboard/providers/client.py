"""
Model Client
============

One completion contract over every configured backend:

    complete(model, messages, tools, max_tokens, temperature)
        -> CompletionResponse(content, tool_calls, usage, finish_reason)

    stream_complete(model, messages, max_tokens, temperature)
        -> async iterator of text fragments

Model routing:
    "openai:gpt-4o"             -> OpenAI client, Chat Completions format
    "lmstudio:qwen2.5-7b"       -> OpenAI-compatible client on LMStudio
    "ollama:llama3:8b"          -> OpenAI-compatible client on Ollama
    "anthropic:claude-3-5-..."  -> Anthropic client, Messages format
    "gpt-4o"                    -> looked up in the model catalog

A model whose provider has no configured client fails with a
ConfigurationError before any network request is made.

Deadlines: every call is bound to `timeout` seconds (for streams, each
fragment). Running out raises ProviderTimeoutError.

Retries: none. The SDK clients are built with max_retries=0 and transport
errors propagate to the caller unmodified. Retrying a tool-calling turn can
duplicate side effects, so only callers that know a call is safe (health
checks, discovery) should retry.
"""

import asyncio
from types import ModuleType
from typing import Any, AsyncIterator

import httpx
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from switchboard.errors import ConfigurationError, ProviderTimeoutError
from switchboard.providers import anthropic_format, openai_format
from switchboard.providers.catalog import ModelCatalog, split_model_id
from switchboard.tools import MCPTool
from switchboard.types import CompletionResponse, Message, ModelProvider, ProviderConfig
from switchboard.utils.logger import Logger

logger = Logger("ModelClient")

DEFAULT_LMSTUDIO_URL = "http://localhost:1234/v1"
DEFAULT_OLLAMA_URL = "http://localhost:11434/v1"

_WIRE_FORMATS: dict[ModelProvider, ModuleType] = {
    ModelProvider.OPENAI: openai_format,
    ModelProvider.LMSTUDIO: openai_format,
    ModelProvider.OLLAMA: openai_format,
    ModelProvider.ANTHROPIC: anthropic_format,
}


class ModelClient:
    """
    Unified client for all providers.

    Example:
        client = ModelClient(catalog, timeout=30)
        client.configure_provider(ProviderConfig(ModelProvider.OPENAI, api_key="sk-..."))

        response = await client.complete(
            model="openai:gpt-4o",
            messages=[Message.system("Be brief."), Message.user("Hi")],
        )
        print(response.content)
    """

    def __init__(self, catalog: ModelCatalog | None = None, timeout: float = 60.0):
        """
        Initialize the client.

        Args:
            catalog: Published models, used to route unprefixed model ids
            timeout: Deadline in seconds for each provider call
        """
        self.catalog = catalog or ModelCatalog()
        self.timeout = timeout
        self._clients: dict[ModelProvider, Any] = {}

    # ==========================================================================
    # Provider setup
    # ==========================================================================

    def configure_provider(self, config: ProviderConfig) -> None:
        """
        Build the SDK client for a provider.

        Disabled providers, and cloud providers without an API key, are
        skipped; calls addressed to them fail with ConfigurationError.
        """
        provider = ModelProvider(config.provider)

        if not config.is_enabled:
            logger.debug(f"Provider {provider.value} is disabled")
            return

        http_timeout = httpx.Timeout(self.timeout)

        if provider == ModelProvider.OPENAI:
            if not config.api_key:
                logger.warning("OpenAI enabled without an API key, skipping")
                return
            client = AsyncOpenAI(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=http_timeout,
                max_retries=0,
            )
        elif provider == ModelProvider.LMSTUDIO:
            # LMStudio doesn't require a real key
            client = AsyncOpenAI(
                api_key="lm-studio",
                base_url=config.base_url or DEFAULT_LMSTUDIO_URL,
                timeout=http_timeout,
                max_retries=0,
            )
        elif provider == ModelProvider.OLLAMA:
            client = AsyncOpenAI(
                api_key="ollama",
                base_url=config.base_url or DEFAULT_OLLAMA_URL,
                timeout=http_timeout,
                max_retries=0,
            )
        else:
            if not config.api_key:
                logger.warning("Anthropic enabled without an API key, skipping")
                return
            client = AsyncAnthropic(
                api_key=config.api_key,
                timeout=http_timeout,
                max_retries=0,
            )

        self._clients[provider] = client
        logger.info(f"Configured provider: {provider.value}")

    def register_client(self, provider: ModelProvider | str, client: Any) -> None:
        """Install an already-built SDK client (or a compatible fake)."""
        self._clients[ModelProvider(provider)] = client

    def is_configured(self, provider: ModelProvider | str) -> bool:
        return ModelProvider(provider) in self._clients

    def configured_providers(self) -> list[ModelProvider]:
        return list(self._clients.keys())

    async def close(self) -> None:
        """Close all SDK clients."""
        for provider, client in self._clients.items():
            close = getattr(client, "close", None)
            if close is not None:
                await close()
                logger.debug(f"Closed {provider.value} client")
        self._clients.clear()

    # ==========================================================================
    # Routing
    # ==========================================================================

    def resolve(self, model: str) -> tuple[ModelProvider, str]:
        """
        Resolve a model id to (provider, backend model name).

        Raises:
            ConfigurationError: If the model is not prefixed and not in the catalog
        """
        provider, name = split_model_id(model)
        if provider is not None:
            return provider, name

        info = self.catalog.get(model)
        if info is None:
            raise ConfigurationError(f"Unknown model: {model}")
        return info.provider, info.name

    def _client_for(self, provider: ModelProvider) -> Any:
        client = self._clients.get(provider)
        if client is None:
            raise ConfigurationError(f"{provider.value} client not configured")
        return client

    # ==========================================================================
    # Completions
    # ==========================================================================

    async def complete(
        self,
        model: str,
        messages: list[Message],
        tools: list[MCPTool] | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7
    ) -> CompletionResponse:
        """
        Get one completion from a model.

        Args:
            model: Model id ("provider:name" or a catalog id)
            messages: The conversation
            tools: Tools to declare (omitted from the request when empty)
            max_tokens: Output token limit
            temperature: Sampling temperature

        Returns:
            The normalized CompletionResponse

        Raises:
            ConfigurationError: No client for the model's provider
            ProviderTimeoutError: The call exceeded the deadline
        """
        provider, name = self.resolve(model)
        client = self._client_for(provider)
        wire = _WIRE_FORMATS[provider]

        request = wire.build_request(name, messages, tools, max_tokens, temperature)
        logger.debug(
            f"Completion request to {provider.value}:{name}",
            {"messages": len(messages), "tools": len(tools or [])}
        )

        try:
            async with asyncio.timeout(self.timeout):
                response = await wire.complete(client, request)
        except TimeoutError:
            logger.warning(f"{provider.value} completion timed out after {self.timeout:g}s")
            raise ProviderTimeoutError(provider.value, self.timeout) from None
        except Exception as e:
            logger.error(f"{provider.value} completion failed", e)
            raise

        if response.usage:
            logger.debug(f"Usage: {response.usage.total_tokens} tokens ({response.finish_reason.value})")

        return response

    async def stream_complete(
        self,
        model: str,
        messages: list[Message],
        max_tokens: int = 4096,
        temperature: float = 0.7
    ) -> AsyncIterator[str]:
        """
        Stream text fragments of one completion.

        The iterator is lazy (nothing is sent before the first fragment is
        requested), finite and cannot be restarted. A failure mid-stream is
        raised from the iteration; fragments already yielded stay yielded.

        Yields:
            Text fragments in order
        """
        provider, name = self.resolve(model)
        client = self._client_for(provider)
        wire = _WIRE_FORMATS[provider]

        request = wire.build_request(name, messages, None, max_tokens, temperature)
        fragments = wire.stream_text(client, request)

        try:
            while True:
                try:
                    async with asyncio.timeout(self.timeout):
                        fragment = await anext(fragments)
                except StopAsyncIteration:
                    return
                except TimeoutError:
                    logger.warning(f"{provider.value} stream stalled for {self.timeout:g}s")
                    raise ProviderTimeoutError(provider.value, self.timeout) from None
                except Exception as e:
                    logger.error(f"{provider.value} stream failed", e)
                    raise
                yield fragment
        finally:
            await fragments.aclose()
