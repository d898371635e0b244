# ============================================================================
# VERSION - ZOMBIE WATCH CORE
# ============================================================================
# STATUS: Core - Release metadata
# ============================================================================
"""
Version information for the Zombie Watch health and scheduling core.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch
__version__ = "0.3.1"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-18"

SERVICE_NAME = "Zombie Watch"
