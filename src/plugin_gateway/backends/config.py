"""Static backend registry config loader."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from .schemas import BackendConfig


class BackendRegistryConfig(BaseModel):
    """Container for backend launch descriptors."""

    backends: list[BackendConfig] = Field(default_factory=list)
    essential_tools: list[str] | None = None

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "BackendRegistryConfig":
        seen: set[str] = set()
        for backend in self.backends:
            if backend.backend_id in seen:
                raise ValueError(f"duplicate backend id in config: {backend.backend_id}")
            seen.add(backend.backend_id)
        return self


def load_backend_registry(config_path: str | None = None) -> BackendRegistryConfig:
    """Load backend registry config from YAML.

    Args:
        config_path: Optional custom path for the backend registry config.

    Returns:
        Parsed BackendRegistryConfig, or an empty config if the file is missing.
    """
    if config_path is None:
        path = Path(__file__).resolve().parents[3] / "config" / "backends.yaml"
    else:
        path = Path(config_path)

    if not path.exists():
        return BackendRegistryConfig()

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    return BackendRegistryConfig(**data)
