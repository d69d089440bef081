"""Mini README: Metrics package initialiser.

``calculator`` derives expense metrics; ``settings_flow`` validates and
saves the settings those metrics depend on.
"""

from .calculator import (
    DerivedMetrics,
    compute_metrics,
    cost_per_square_meter,
    total_expenses,
)
from .settings_flow import SettingsService, validate_settings

__all__ = [
    "DerivedMetrics",
    "SettingsService",
    "compute_metrics",
    "cost_per_square_meter",
    "total_expenses",
    "validate_settings",
]
