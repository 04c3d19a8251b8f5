"""
Table schemas and row helpers. Imported here so init_db() sees every table.
"""

from .base import utcnow, new_uuid, epoch_ms, iso_now, today
from .tables import BUSINESSES, WEEKLY_PLANS, FORECASTS, FINANCIAL_DATA, TABLES

__all__ = [
    "utcnow", "new_uuid", "epoch_ms", "iso_now", "today",
    "BUSINESSES", "WEEKLY_PLANS", "FORECASTS", "FINANCIAL_DATA", "TABLES",
]
