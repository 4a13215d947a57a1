"""Application configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from backendforge.models.stack import STACK_PRESETS, TechStack, get_stack_preset

STRUCTURED_FAMILY = "structured"
OPENAI_COMPATIBLE_FAMILY = "openai-compatible"


class ConfigError(ValueError):
    """Raised when configuration cannot be loaded safely."""


@dataclass(frozen=True)
class ProviderPreset:
    """Defaults for one selectable LLM provider."""

    provider: str
    display_name: str
    family: str
    default_base_url: str | None
    default_model: str


PROVIDER_PRESETS: dict[str, ProviderPreset] = {
    "google": ProviderPreset(
        provider="google",
        display_name="Google Gemini",
        family=STRUCTURED_FAMILY,
        default_base_url=None,
        default_model="gemini-2.5-flash",
    ),
    "deepseek": ProviderPreset(
        provider="deepseek",
        display_name="DeepSeek",
        family=OPENAI_COMPATIBLE_FAMILY,
        default_base_url="https://api.deepseek.com",
        default_model="deepseek-chat",
    ),
    "qwen": ProviderPreset(
        provider="qwen",
        display_name="Qwen (Alibaba Cloud)",
        family=OPENAI_COMPATIBLE_FAMILY,
        default_base_url="https://dashscope.aliyuncs.com/compatible-mode/v1",
        default_model="qwen-plus",
    ),
    "doubao": ProviderPreset(
        provider="doubao",
        display_name="Doubao (Volcano Engine)",
        family=OPENAI_COMPATIBLE_FAMILY,
        default_base_url="https://ark.cn-beijing.volces.com/api/v3",
        default_model="doubao-1-5-pro-32k-250115",
    ),
    "custom": ProviderPreset(
        provider="custom",
        display_name="Custom (OpenAI format)",
        family=OPENAI_COMPATIBLE_FAMILY,
        default_base_url=None,
        default_model="",
    ),
}

DEFAULT_PROVIDER = "google"


def _validate_provider(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in PROVIDER_PRESETS:
        raise ValueError(
            f"unknown provider {value!r}; expected one of "
            + ", ".join(sorted(PROVIDER_PRESETS))
            + "."
        )
    return normalized


class ProviderConfig(BaseModel):
    """Active provider selection, threaded explicitly into every generation call."""

    model_config = ConfigDict(frozen=True)

    provider: str = DEFAULT_PROVIDER
    api_key: str = ""
    base_url: str | None = None
    model_name: str = ""

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, value: str) -> str:
        return _validate_provider(value)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().rstrip("/")
        return normalized or None

    @classmethod
    def from_preset(
        cls,
        provider: str,
        *,
        api_key: str = "",
        base_url: str | None = None,
        model_name: str | None = None,
    ) -> ProviderConfig:
        """Build a config, filling base URL and model from the provider's preset."""
        preset = PROVIDER_PRESETS[_validate_provider(provider)]
        return cls(
            provider=preset.provider,
            api_key=api_key,
            base_url=base_url or preset.default_base_url,
            model_name=model_name or preset.default_model,
        )

    @property
    def family(self) -> str:
        return PROVIDER_PRESETS[self.provider].family

    def require_credentials(self) -> None:
        """Fail before any network call when the provider cannot be reached."""
        if not self.api_key.strip():
            raise ConfigError(
                f"No API key configured for provider '{self.provider}'. "
                "Set BACKENDFORGE_API_KEY."
            )
        if self.family == OPENAI_COMPATIBLE_FAMILY and not self.base_url:
            raise ConfigError(
                f"Provider '{self.provider}' requires a base URL. "
                "Set BACKENDFORGE_BASE_URL."
            )
        if not self.model_name.strip():
            raise ConfigError(
                f"No model configured for provider '{self.provider}'. "
                "Set BACKENDFORGE_MODEL."
            )


class Settings(BaseModel):
    """Runtime settings loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    provider: str = DEFAULT_PROVIDER
    api_key: str = ""
    base_url: str | None = None
    model_name: str | None = None
    stack_preset: str = "node-lite"
    result_path: Path = Path("./data/result.json")
    timeout_seconds: int = Field(default=60, gt=0)

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, value: str) -> str:
        return _validate_provider(value)

    @field_validator("stack_preset")
    @classmethod
    def validate_stack_preset(cls, value: str) -> str:
        normalized = value.strip()
        if normalized not in STACK_PRESETS:
            raise ValueError(
                f"unknown stack preset {value!r}; expected one of "
                + ", ".join(sorted(STACK_PRESETS))
                + "."
            )
        return normalized

    @field_validator("result_path", mode="before")
    @classmethod
    def validate_result_path(cls, value: str | Path) -> Path:
        path = Path(value).expanduser() if isinstance(value, str) else value
        if not str(path):
            raise ValueError("BACKENDFORGE_RESULT_PATH cannot be empty.")
        return path

    def provider_config(self) -> ProviderConfig:
        return ProviderConfig.from_preset(
            self.provider,
            api_key=self.api_key,
            base_url=self.base_url,
            model_name=self.model_name,
        )

    def tech_stack(self, preset: str | None = None) -> TechStack:
        """Return the configured stack, or ``preset`` when one is given."""
        try:
            return get_stack_preset(preset or self.stack_preset)
        except KeyError as exc:
            raise ConfigError(exc.args[0]) from exc


def _env_value(name: str, default: str | None = None) -> str | None:
    import os

    value = os.getenv(name, default)
    if value is None:
        return None
    return value.strip()


def load_settings() -> Settings:
    """Load settings from environment variables."""
    payload = {
        "provider": _env_value("BACKENDFORGE_PROVIDER", DEFAULT_PROVIDER),
        "api_key": _env_value("BACKENDFORGE_API_KEY", ""),
        "base_url": _env_value("BACKENDFORGE_BASE_URL") or None,
        "model_name": _env_value("BACKENDFORGE_MODEL") or None,
        "stack_preset": _env_value("BACKENDFORGE_STACK", "node-lite"),
        "result_path": _env_value("BACKENDFORGE_RESULT_PATH", "./data/result.json"),
        "timeout_seconds": _env_value("BACKENDFORGE_TIMEOUT_SECONDS", "60"),
    }

    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        messages = []
        for err in exc.errors():
            field = ".".join(str(item) for item in err["loc"])
            messages.append(f"- {field}: {err['msg']}")
        raise ConfigError(
            "Invalid configuration values:\n" + "\n".join(messages)
        ) from exc
