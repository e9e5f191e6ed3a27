"""Application configuration."""

from macro_brief.config.settings import (
    FX_BASE,
    FX_SYMBOLS,
    INDICATOR_SERIES,
    Settings,
)

__all__ = ["FX_BASE", "FX_SYMBOLS", "INDICATOR_SERIES", "Settings"]
