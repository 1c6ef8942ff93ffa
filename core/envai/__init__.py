"""Envai thermostat dashboard analytics package."""

# Define public API
__all__ = [
    "DashboardService",
    "DashboardSettings",
    "Reading",
    "ReadingStore",
    "load_settings",
]

# Import settings
from .settings import DashboardSettings, load_settings

# Import models
from .models import Reading

# Import store and orchestrator
from .reading_store import ReadingStore
from .dashboard import DashboardService
