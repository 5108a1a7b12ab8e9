"""
Application settings.

Loaded from a YAML file (omegaconf handles the merging of CLI-style overrides), then validated by pydantic.
"""

from pathlib import Path
from typing import Any, Optional

from omegaconf import OmegaConf
from pydantic import BaseModel

from chesscore.core.shared_types import SelfCheckPolicy


class Settings(BaseModel):
    database_url: str = "sqlite:///chesscore.db"
    sql_echo: bool = False
    self_check_policy: SelfCheckPolicy = SelfCheckPolicy.STRICT
    log_level: str = "INFO"
    log_file: Optional[str] = None


def load_settings(
    config_path: Optional[str | Path] = None, overrides: Optional[list[str]] = None
) -> Settings:
    """Load settings from a YAML file, with optional overrides (ex. ["self_check_policy=forfeit"]).

    Without a config file the defaults are used (overrides still apply).
    """
    config = OmegaConf.create({})
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        config = OmegaConf.load(config_path)

    if overrides:
        config = OmegaConf.merge(config, OmegaConf.from_dotlist(overrides))

    values: dict[str, Any] = OmegaConf.to_container(config, resolve=True)  # type: ignore[assignment]
    return Settings(**values)
