"""
Settings models for the prai TOML config file.

The file defines a default profile name and a list of profiles; each profile
names a provider and carries that provider's fields flat, next to `name`:

    default = "claude"

    [[profile]]
    name = "claude"
    provider = "anthropic"
    model = "claude-3-5-sonnet-latest"
    api_key = "sk-ant-..."

Environment variables prefixed PRAI__ override file values (see
apply_env_overrides). Credentials are SecretStr and always serialize as
[REDACTED].
"""
from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    SecretStr,
    ValidationError,
    model_serializer,
    model_validator,
)

from prai.core.errors import ConfigError, ProfileNotFound

logger = logging.getLogger(__name__)


# =============================================================================
# SECRETS
# =============================================================================

REDACTED = "[REDACTED]"


def _ascii_only(secret: SecretStr) -> SecretStr:
    # Keys travel in HTTP headers, which only carry ASCII
    if not secret.get_secret_value().isascii():
        raise ValueError("must contain only ASCII characters")
    return secret


# Only get_secret_value() exposes the raw key; every dump emits the placeholder
Secret = Annotated[
    SecretStr,
    AfterValidator(_ascii_only),
    PlainSerializer(lambda _secret: REDACTED, return_type=str),
]


# =============================================================================
# PROVIDER SETTINGS
# =============================================================================


class AnthropicSettings(BaseModel):
    model_config = ConfigDict(hide_input_in_errors=True)

    provider: Literal["anthropic"] = "anthropic"
    model: str
    api_key: Secret
    version: str = "2023-06-01"
    base_url: str = "https://api.anthropic.com/v1"
    max_tokens: int = Field(default=500, ge=1)
    temperature: Optional[float] = None
    top_p: Optional[float] = None


class OpenAISettings(BaseModel):
    model_config = ConfigDict(hide_input_in_errors=True)

    provider: Literal["openai"] = "openai"
    model: str
    api_key: Secret
    base_url: str = "https://api.openai.com/v1"
    max_tokens: int = Field(default=500, ge=1)
    temperature: float = 0.3
    top_p: float = 0.9
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0


class GoogleSettings(BaseModel):
    model_config = ConfigDict(hide_input_in_errors=True)

    provider: Literal["google"] = "google"
    model: str
    api_key: Secret
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    max_tokens: int = Field(default=500, ge=1)
    temperature: float = 0.3
    top_p: float = 0.9


class OllamaSettings(BaseModel):
    """Local Ollama server; no credential."""
    provider: Literal["ollama"] = "ollama"
    model: str
    url: str = "http://localhost:11434"
    temperature: float = 0.3
    top_p: float = 0.9
    num_predict: int = Field(default=500, ge=1)


ProviderSettings = Annotated[
    Union[AnthropicSettings, OllamaSettings, OpenAISettings, GoogleSettings],
    Field(discriminator="provider"),
]


# =============================================================================
# PROFILES
# =============================================================================

PROFILE_FIELDS = ("name", "role", "directive", "template")


class Profile(BaseModel):
    """A named provider configuration plus optional prompt overrides."""
    name: str
    role: Optional[str] = None
    directive: Optional[str] = None
    template: Optional[str] = None
    provider: ProviderSettings

    @model_validator(mode="before")
    @classmethod
    def split_provider_fields(cls, data: Any) -> Any:
        """Move the flat provider keys of a TOML profile table under `provider`."""
        if not isinstance(data, dict) or not isinstance(data.get("provider"), str):
            return data
        profile = {key: value for key, value in data.items() if key in PROFILE_FIELDS}
        profile["provider"] = {key: value for key, value in data.items() if key not in PROFILE_FIELDS}
        return profile

    @model_serializer(mode="wrap")
    def flatten_provider(self, handler) -> dict[str, Any]:
        data = handler(self)
        provider = data.pop("provider", None) or {}
        return {**data, **provider}


# =============================================================================
# ROOT SETTINGS
# =============================================================================


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    default: str
    profiles: list[Profile] = Field(default_factory=list, alias="profile")

    @classmethod
    def load(cls, path: Path | str, environ: Optional[Mapping[str, str]] = None) -> Settings:
        return load_settings(path, environ)

    def resolve(self, name: Optional[str] = None) -> Profile:
        """Return the named profile, or the default profile when no name is given."""
        name = name or self.default
        for profile in self.profiles:
            if profile.name == name:
                return profile
        raise ProfileNotFound(name)

    def dump_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


# =============================================================================
# LOADING
# =============================================================================

ENV_PREFIX = "PRAI__"
ENV_SEPARATOR = "__"


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Location of the config file:
    1. PRAI_CONFIG
    2. $XDG_CONFIG_HOME/prai/config.toml
    3. ~/.config/prai/config.toml
    """
    environ = os.environ if environ is None else environ
    if explicit := environ.get("PRAI_CONFIG"):
        return Path(explicit).expanduser()
    config_home = environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "prai" / "config.toml"


def _select_profile(profiles: Any, selector: str) -> Optional[dict]:
    """Pick a raw profile table by list index or case-insensitive name."""
    if not isinstance(profiles, list):
        return None
    if selector.isdigit():
        index = int(selector)
        if index < len(profiles) and isinstance(profiles[index], dict):
            return profiles[index]
        return None
    for profile in profiles:
        if isinstance(profile, dict) and str(profile.get("name", "")).lower() == selector:
            return profile
    return None


def apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    """
    Merge PRAI__ environment variables into raw config data.

    PRAI__DEFAULT=local                     -> default = "local"
    PRAI__PROFILE__CLAUDE__API_KEY=sk-...   -> api_key of profile "claude"
    PRAI__PROFILE__0__MODEL=llama3.2        -> model of the first profile
    """
    for key in sorted(environ):
        if not key.upper().startswith(ENV_PREFIX):
            continue
        value = environ[key]
        path = [part.lower() for part in key[len(ENV_PREFIX):].split(ENV_SEPARATOR)]

        if len(path) == 1 and path[0]:
            data[path[0]] = value
        elif len(path) == 3 and path[0] == "profile" and all(path):
            profile = _select_profile(data.get("profile"), path[1])
            if profile is None:
                logger.warning("Ignoring %s: no profile matches %r", key, path[1])
                continue
            profile[path[2]] = value
        else:
            logger.warning("Ignoring unsupported override %s", key)
            continue
        logger.debug("Applied environment override %s", key)

    return data


def _describe_validation_error(error: ValidationError) -> str:
    # Without input values: a rejected profile table would otherwise echo its api_key
    parts = []
    for detail in error.errors(include_input=False, include_url=False):
        location = ".".join(str(part) for part in detail["loc"])
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def load_settings(path: Path | str, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read the TOML config at `path`, apply PRAI__ overrides and validate it."""
    path = Path(path)
    try:
        with path.open("rb") as config_file:
            data = tomllib.load(config_file)
    except FileNotFoundError as missing_error:
        raise ConfigError(f"Config file not found: {path}") from missing_error
    except tomllib.TOMLDecodeError as toml_error:
        raise ConfigError(f"Invalid TOML in {path}: {toml_error}") from toml_error
    except OSError as read_error:
        raise ConfigError(f"Cannot read config file {path}: {read_error}") from read_error

    data = apply_env_overrides(data, os.environ if environ is None else environ)

    try:
        settings = Settings.model_validate(data)
    except ValidationError as validation_error:
        raise ConfigError(
            f"Invalid config structure in {path}: {_describe_validation_error(validation_error)}"
        ) from validation_error

    logger.info("Loaded %d profile(s) from %s", len(settings.profiles), path)
    return settings
