"""
Model Catalog
=============

Read-only view over the models published by model discovery. Discovery
itself (probing provider endpoints) happens outside this package; the
catalog only stores what it is given and answers selection questions:

    work tasks     -> cloud models preferred (Claude Sonnet / GPT-4o first)
    personal tasks -> local models preferred (largest context window first),
                      falling back to a small cloud model

from_model_ids() publishes entries for configured "provider:name" ids, so a
deployment without discovery can still select models from its config.
"""

from switchboard.types import AgentType, ModelCapabilities, ModelInfo, ModelProvider
from switchboard.utils.logger import Logger

logger = Logger("ModelCatalog")

# Known model capabilities
MODEL_CAPABILITIES: dict[str, ModelCapabilities] = {
    "gpt-4-turbo": ModelCapabilities(
        context_window=128000, supports_tools=True, supports_vision=True, max_output_tokens=4096
    ),
    "gpt-4o-mini": ModelCapabilities(
        context_window=128000, supports_tools=True, supports_vision=True, max_output_tokens=16384
    ),
    "gpt-4o": ModelCapabilities(
        context_window=128000, supports_tools=True, supports_vision=True, max_output_tokens=16384
    ),
    "gpt-3.5-turbo": ModelCapabilities(
        context_window=16385, supports_tools=True, max_output_tokens=4096
    ),
    "claude-3-5-sonnet": ModelCapabilities(
        context_window=200000, supports_tools=True, supports_vision=True, max_output_tokens=8192
    ),
    "claude-3-opus": ModelCapabilities(
        context_window=200000, supports_tools=True, supports_vision=True, max_output_tokens=4096
    ),
    "claude-3-haiku": ModelCapabilities(
        context_window=200000, supports_tools=True, supports_vision=True, max_output_tokens=4096
    ),
}

DEFAULT_CAPABILITIES = ModelCapabilities()

# Most local models have a decent context and support tool use
LOCAL_CAPABILITIES = ModelCapabilities(context_window=32768, supports_tools=True)

LOCAL_PROVIDERS = {ModelProvider.LMSTUDIO, ModelProvider.OLLAMA}

PREFERRED_WORK_MODELS = ("claude-3-5-sonnet", "gpt-4o")
SMALL_CLOUD_MODELS = ("haiku", "mini")


def split_model_id(model_id: str) -> tuple[ModelProvider | None, str]:
    """
    Split "provider:name" into its parts.

    Only a known provider counts as a prefix, so names that contain a colon
    themselves (e.g. "llama3:8b" on Ollama) survive.

    Returns:
        (provider or None, model name)
    """
    prefix, sep, rest = model_id.partition(":")
    if sep:
        try:
            return ModelProvider(prefix), rest
        except ValueError:
            pass
    return None, model_id


def capabilities_for(name: str, is_local: bool = False) -> ModelCapabilities:
    """
    Look up capabilities for a model name.

    Exact match first, then the first table key contained in the name
    (table order puts more specific names first), then local or generic
    defaults.
    """
    if name in MODEL_CAPABILITIES:
        return MODEL_CAPABILITIES[name]

    for key, caps in MODEL_CAPABILITIES.items():
        if key in name:
            return caps

    return LOCAL_CAPABILITIES if is_local else DEFAULT_CAPABILITIES


class ModelCatalog:
    """
    The published model list.

    Example:
        catalog = ModelCatalog(discovered_models)
        model = catalog.select_for(AgentType.WORK)
        print(model.id if model else "no model")
    """

    def __init__(self, models: list[ModelInfo] | None = None):
        self._models: dict[str, ModelInfo] = {}
        for model in models or []:
            self._models[model.id] = model

    @classmethod
    def from_model_ids(cls, model_ids: list[str]) -> "ModelCatalog":
        """
        Publish catalog entries for configured model ids.

        Ids without a known provider prefix are skipped with a warning.
        """
        models = []
        for model_id in model_ids:
            provider, name = split_model_id(model_id)
            if provider is None:
                logger.warning(f"Ignoring model id without provider prefix: {model_id}")
                continue
            is_local = provider in LOCAL_PROVIDERS
            models.append(ModelInfo(
                id=f"{provider.value}:{name}",
                name=name,
                provider=provider,
                is_local=is_local,
                capabilities=capabilities_for(name, is_local),
            ))
        return cls(models)

    def get(self, model_id: str) -> ModelInfo | None:
        """Find a model by full id, or by bare name when unambiguous."""
        if model_id in self._models:
            return self._models[model_id]

        matches = [m for m in self._models.values() if m.name == model_id]
        return matches[0] if len(matches) == 1 else None

    def all(self) -> list[ModelInfo]:
        return [m for m in self._models.values() if m.is_available]

    def local_models(self) -> list[ModelInfo]:
        return [m for m in self.all() if m.is_local]

    def cloud_models(self) -> list[ModelInfo]:
        return [m for m in self.all() if not m.is_local]

    def best_work_model(self) -> ModelInfo | None:
        """Cloud model for work tasks, preferring Claude Sonnet or GPT-4o."""
        cloud = self.cloud_models()
        for model in cloud:
            if any(preferred in model.name for preferred in PREFERRED_WORK_MODELS):
                return model
        return cloud[0] if cloud else None

    def best_personal_model(self) -> ModelInfo | None:
        """Local model with the largest context, else a cloud model (small ones first)."""
        local = self.local_models()
        if local:
            return max(local, key=lambda m: m.capabilities.context_window)

        cloud = self.cloud_models()
        for model in cloud:
            if any(small in model.name for small in SMALL_CLOUD_MODELS):
                return model
        return cloud[0] if cloud else None

    def select_for(self, agent_type: AgentType) -> ModelInfo | None:
        """Pick the model for an agent type."""
        if AgentType(agent_type) == AgentType.PERSONAL:
            return self.best_personal_model()
        return self.best_work_model()

    def summary(self) -> str:
        return f"{len(self.local_models())} local, {len(self.cloud_models())} cloud models available"

    def __len__(self) -> int:
        return len(self._models)
