"""Wonbyte utilities."""

from .catalog_loader import load_catalog_file
from .dates import (
    WEEKDAY_LABELS,
    Clock,
    system_clock,
    date_key,
    parse_date_key,
    last_n_days,
    weekday_label,
    iso_week_key,
)
from .ids import generate_id

__all__ = [
    "load_catalog_file",
    "WEEKDAY_LABELS",
    "Clock",
    "system_clock",
    "date_key",
    "parse_date_key",
    "last_n_days",
    "weekday_label",
    "iso_week_key",
    "generate_id",
]
