from __future__ import annotations

from prai.core.settings import Profile, ProviderSettings
from prai.providers.anthropic import AnthropicProvider
from prai.providers.base import Provider
from prai.providers.google import GoogleProvider
from prai.providers.ollama import OllamaProvider
from prai.providers.openai import OpenAIProvider

# Keyed by the `provider` tag used in the config file
PROVIDERS: dict[str, type[Provider]] = {
    AnthropicProvider.name: AnthropicProvider,
    OllamaProvider.name: OllamaProvider,
    OpenAIProvider.name: OpenAIProvider,
    GoogleProvider.name: GoogleProvider,
}


def provider_for(target: Profile | ProviderSettings) -> Provider:
    """Instantiate the backend for a profile (or a bare provider settings model)."""
    config = target.provider if isinstance(target, Profile) else target
    return PROVIDERS[config.provider].from_config(config)


__all__ = [
    "AnthropicProvider",
    "GoogleProvider",
    "OllamaProvider",
    "OpenAIProvider",
    "PROVIDERS",
    "Provider",
    "provider_for",
]
