"""Engine settings with environment overrides."""

import os
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

DEFAULT_VARIABLE_SOURCE_URL = "https://652f91320b8d8ddac0b2b62b.mockapi.io/autocomplete"
DEFAULT_REQUEST_TIMEOUT = 30.0
# Each nesting level costs several Python frames in the parser.
DEFAULT_MAX_NESTING_DEPTH = 100

ENV_VARIABLE_SOURCE_URL = "FORMULA_VARIABLE_SOURCE_URL"
ENV_REQUEST_TIMEOUT = "FORMULA_REQUEST_TIMEOUT"
ENV_MAX_NESTING_DEPTH = "FORMULA_MAX_NESTING_DEPTH"


def _env_value(name: str, default: T, cast: Callable[[str], T]) -> T:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from e


class EngineSettings(BaseModel):
    """Settings shared by the formula engine and the variable source."""

    variable_source_url: str = DEFAULT_VARIABLE_SOURCE_URL
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    max_nesting_depth: int = Field(default=DEFAULT_MAX_NESTING_DEPTH, ge=1)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls, **overrides) -> "EngineSettings":
        """Build settings from FORMULA_* environment variables.

        Keyword overrides win over the environment, which wins over defaults.
        """
        values = {
            "variable_source_url": _env_value(
                ENV_VARIABLE_SOURCE_URL, DEFAULT_VARIABLE_SOURCE_URL, str
            ),
            "request_timeout": _env_value(
                ENV_REQUEST_TIMEOUT, DEFAULT_REQUEST_TIMEOUT, float
            ),
            "max_nesting_depth": _env_value(
                ENV_MAX_NESTING_DEPTH, DEFAULT_MAX_NESTING_DEPTH, int
            ),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Settings loaded from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = EngineSettings.from_env()
    return _settings
