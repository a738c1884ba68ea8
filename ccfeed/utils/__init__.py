"""Small shared helpers."""

from .timestamps import (
    ensure_utc,
    epoch_to_iso,
    format_iso_millis,
    unix_to_timestamp,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "unix_to_timestamp",
    "format_iso_millis",
    "epoch_to_iso",
]
