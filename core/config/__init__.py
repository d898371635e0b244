# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the Zombie Watch core.
"""

from core.config.defaults import (
    ProbeDefaults,
    BatchDefaults,
    ScheduleDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "ProbeDefaults",
    "BatchDefaults",
    "ScheduleDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
