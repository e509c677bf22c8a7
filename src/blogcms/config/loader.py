import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ConfigError

DEFAULT_CONFIG_PATH = Path("blogcms.config.yaml")
DEFAULT_BASE_URL = "http://localhost:1337"
DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_WEBHOOK_EVENTS = (
    "entry.create",
    "entry.update",
    "entry.delete",
    "entry.publish",
    "entry.unpublish",
)

# Environment variable -> dotted config key
ENV_OVERRIDES = {
    "STRAPI_BASE_URL": "base_url",
    "STRAPI_API_TOKEN": "api_token",
    "STRAPI_WEBHOOK_SECRET": "webhooks.secret",
    "STRAPI_TIMEOUT_SECONDS": "timeout_seconds",
}


class WebhookConfig(BaseModel):
    """Webhook settings. Carried for a receiver that lives outside this package."""

    model_config = ConfigDict(frozen=True)

    secret: str = ""
    events: Tuple[str, ...] = DEFAULT_WEBHOOK_EVENTS


class ClientConfig(BaseModel):
    """Immutable connection settings for the CMS client."""

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    api_token: str = ""
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    webhooks: WebhookConfig = Field(default_factory=WebhookConfig)


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load raw configuration from a YAML file.

    An explicit path must exist. The default path is optional: when it is
    absent an empty dict is returned so environment/defaults apply.

    Raises:
        FileNotFoundError: If an explicit config path doesn't exist
        ConfigError: If the file does not hold a mapping
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        if path is not None:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        return {}
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ConfigError("Config must be a dictionary")
    strapi = config.get("strapi", config)
    if not isinstance(strapi, dict):
        raise ConfigError("Config 'strapi' section must be a dictionary")
    return dict(strapi)


def _apply_env_overrides(raw: Dict[str, Any], env: Mapping[str, str]) -> Dict[str, Any]:
    result = dict(raw)
    for var, key in ENV_OVERRIDES.items():
        value = env.get(var)
        if not value:
            continue
        if "." in key:
            section, field = key.split(".", 1)
            nested = dict(result.get(section) or {})
            nested[field] = value
            result[section] = nested
        else:
            result[key] = value
    return result


def load_client_config(
    path: Path | None = None,
    env: Optional[Mapping[str, str]] = None,
) -> ClientConfig:
    """
    Build the client configuration.

    Precedence: environment variables > YAML file > built-in defaults.

    Args:
        path: Optional YAML path. Defaults to blogcms.config.yaml (optional file)
        env: Environment mapping. Defaults to os.environ

    Returns:
        Frozen ClientConfig

    Raises:
        ConfigError: If values fail validation
    """
    raw = load_config(path)
    raw = _apply_env_overrides(raw, os.environ if env is None else env)

    webhooks = raw.get("webhooks")
    if webhooks is not None and not isinstance(webhooks, dict):
        raise ConfigError("Config 'webhooks' must be a dictionary")

    try:
        config = ClientConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid client config: {e}") from e

    return config.model_copy(update={"base_url": config.base_url.rstrip("/")})
