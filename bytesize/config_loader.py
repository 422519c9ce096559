from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Dict

import yaml
from pydantic import BaseModel, Field, PlainValidator, ValidationError, field_validator

from bytesize.size import Size

LOGGER = logging.getLogger(__name__)


def _coerce_size(raw: object) -> Size:
    if isinstance(raw, Size):
        return raw
    # bool is an int subclass; "true" is never a size.
    if isinstance(raw, int) and not isinstance(raw, bool):
        if raw < 0:
            raise ValueError("Size must not be negative")
        return Size(raw)
    if isinstance(raw, str):
        return Size.parse(raw.strip())
    raise ValueError(f"Expected a size string or byte count, got {type(raw).__name__}")


SizeField = Annotated[Size, PlainValidator(_coerce_size)]


class SizeConfig(BaseModel):
    limits: Dict[str, SizeField] = Field(default_factory=dict)

    @field_validator("limits", mode="before")
    @classmethod
    def normalize_limits(cls, value: object) -> object:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(name): raw for name, raw in value.items()}
        return value


def load_config(config_path: Path) -> SizeConfig:
    LOGGER.info("Loading config path=%s", config_path, extra={"category": "CONFIG"})
    if not config_path.exists():
        raise ValueError(f"Config file not found: {config_path}")

    try:
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config file: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ValueError("Configuration root must be a YAML object")

    try:
        cfg = SizeConfig.model_validate(parsed)
        LOGGER.info("Config loaded limits=%s", sorted(cfg.limits.keys()), extra={"category": "CONFIG"})
        return cfg
    except ValidationError as exc:
        LOGGER.error("Config validation failed error=%s", exc, extra={"category": "ERRORS"})
        raise ValueError(f"Invalid configuration: {exc}") from exc
