"""
Default calculation settings, read from a YAML file.
The file is `config.yaml` next to this module unless PRAYER_TIMES_CONFIG
points elsewhere; without a file the built-in defaults apply.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from prayer_times import (
    DEFAULT_OFFSETS,
    AsrSchool,
    CalculationMethod,
    HighLatitudeRule,
    PrayerOffsets,
)

logger = logging.getLogger(__name__)

CONFIG_ENV = "PRAYER_TIMES_CONFIG"
DEFAULT_CONFIG_FILE = Path(__file__).parent / "config.yaml"


class OffsetSettings(BaseModel):
    fajr: float = DEFAULT_OFFSETS.fajr
    sunrise: float = DEFAULT_OFFSETS.sunrise
    zawal: float = DEFAULT_OFFSETS.zawal
    asr: float = DEFAULT_OFFSETS.asr
    maghrib: float = DEFAULT_OFFSETS.maghrib
    isha: float = DEFAULT_OFFSETS.isha

    def to_offsets(self) -> PrayerOffsets:
        return PrayerOffsets(**self.model_dump())


class Settings(BaseModel):
    calculation_method: CalculationMethod = CalculationMethod.KARACHI
    asr_school: AsrSchool = AsrSchool.HANAFI
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_NIGHT
    offsets: OffsetSettings = Field(default_factory=OffsetSettings)
    hijri_offset: int = Field(default=0, ge=-3, le=3)
    log_level: str = "INFO"


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from `path`, the env override or the default file."""
    if path is None:
        path = os.environ.get(CONFIG_ENV) or DEFAULT_CONFIG_FILE
    path = Path(path)

    if not path.exists():
        logger.debug(f"No config file at {path}, using defaults")
        return Settings()

    logger.debug(f"Loading config from {path}")
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(data).__name__}")
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid config {path}: {e}") from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
