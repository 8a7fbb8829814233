"""
Configuration

Per-layer configuration dataclasses (unified by EngineConfig) and
process-level settings read from the environment.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .contracts.base import INITIAL_EVENT


PathLike = Union[str, Path]


@dataclass(frozen=True)
class LayoutConfig:
    """Lane geometry and the tick-distance spacing rule."""
    lane_width: int = 24
    # One extra spacer line per this many ticks of distance, minus one.
    spacing_tick_unit: int = 10

    def __post_init__(self):
        if self.lane_width <= 0:
            raise ValueError("lane_width must be positive")
        if self.spacing_tick_unit <= 0:
            raise ValueError("spacing_tick_unit must be positive")


@dataclass(frozen=True)
class SliceConfig:
    """Names used by scenario synthesis."""
    initial_event_name: str = INITIAL_EVENT
    timeline_scenario_name: str = "Timeline"


@dataclass
class EngineConfig:
    """Unified configuration for the derivation engine."""
    layout: Optional[LayoutConfig] = None
    slices: Optional[SliceConfig] = None

    def __post_init__(self):
        self.layout = self.layout or LayoutConfig()
        self.slices = self.slices or SliceConfig()


@dataclass(frozen=True)
class Settings:
    """Process-level settings for the command line entry point."""
    log_level: str = "WARNING"
    log_json: bool = False
    log_file: Optional[str] = None


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def load_settings(env_file: Optional[PathLike] = None) -> Settings:
    """
    Read settings from the environment.

    A .env file (the given one, or one in the working directory) is loaded
    first; variables already set in the environment win.
    """
    if env_file is not None:
        load_dotenv(Path(env_file))
    else:
        load_dotenv()

    return Settings(
        log_level=os.getenv("INFOFLOW_LOG_LEVEL", "WARNING").upper(),
        log_json=_env_flag(os.getenv("INFOFLOW_LOG_JSON")),
        log_file=os.getenv("INFOFLOW_LOG_FILE") or None,
    )
