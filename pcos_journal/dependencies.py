"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from pcos_journal.config import Settings, get_settings
from pcos_journal.cycles.config_loader import EngineConfig, get_engine_config

# Annotated shortcuts for route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
EngineSettings = Annotated[EngineConfig, Depends(get_engine_config)]
