# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for probing, batching and scheduling bounds
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for the health-check engine and the scheduling state
machine. These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ProbeDefaults:
    """
    Defaults for the reachability probe.

    The timeout is a hard budget measured from request start, covering
    connect, TLS handshake and response headers together.
    """
    timeout_seconds: float = 10.0
    user_agent: str = "ZombieWatch/1.0 (Health Check)"
    verify_tls: bool = True

    # Status codes below this count as "endpoint exists and answered"
    server_error_threshold: int = 500

    @classmethod
    def from_env(cls) -> "ProbeDefaults":
        """Create from environment variables."""
        return cls(
            timeout_seconds=float(os.getenv("PROBE_TIMEOUT_SECONDS", 10.0)),
            user_agent=os.getenv("PROBE_USER_AGENT", "ZombieWatch/1.0 (Health Check)"),
            verify_tls=_env_bool("PROBE_VERIFY_TLS", True),
        )


@dataclass(frozen=True)
class BatchDefaults:
    """
    Defaults for batch health checks.

    max_batch_size bounds both total latency and outbound connection
    fan-out (one connection per candidate).
    """
    max_batch_size: int = 50

    @classmethod
    def from_env(cls) -> "BatchDefaults":
        """Create from environment variables."""
        return cls(
            max_batch_size=int(os.getenv("HEALTH_CHECK_MAX_BATCH_SIZE", 50)),
        )


@dataclass(frozen=True)
class ScheduleDefaults:
    """Inclusive bounds for watcher scheduling."""
    min_scan_frequency_minutes: int = 5
    max_scan_frequency_minutes: int = 1440  # 24 hours
    min_analysis_period_days: int = 7
    max_analysis_period_days: int = 365


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    probe: ProbeDefaults = field(default_factory=ProbeDefaults)
    batch: BatchDefaults = field(default_factory=BatchDefaults)
    schedule: ScheduleDefaults = field(default_factory=ScheduleDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            probe=ProbeDefaults.from_env(),
            batch=BatchDefaults.from_env(),
            schedule=ScheduleDefaults(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ProbeDefaults",
    "BatchDefaults",
    "ScheduleDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
