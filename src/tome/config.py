"""Server configuration: a YAML file merged with command-line overrides."""

import argparse
from pathlib import Path

from pydantic import BaseModel, ConfigDict
import yaml

DEFAULT_CONFIG_PATH = Path("tome.yaml")


class TomeConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = "0.0.0.0"
    port: int = 8000
    content_dir: Path = Path("content")
    allowed_uploads: list[str] = [".png", ".jpg", ".jpeg", ".gif", ".svg", ".ico"]
    lock_timeout: float = 10.0  # seconds to wait for a document lock

    @property
    def media_dir(self) -> Path:
        return self.content_dir / "media"


def load_config(path: Path | None = None) -> TomeConfig:
    """Read config from YAML; a missing file means all defaults."""
    path = path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return TomeConfig()
    data = yaml.safe_load(path.read_text()) or {}
    return TomeConfig.model_validate(data)


def apply_overrides(config: TomeConfig, args: argparse.Namespace) -> TomeConfig:
    """Return config with every non-None CLI value from args laid over it."""
    updates = {
        name: getattr(args, name)
        for name in TomeConfig.model_fields
        if getattr(args, name, None) is not None
    }
    return TomeConfig.model_validate({**config.model_dump(), **updates})
