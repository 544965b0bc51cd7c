"""Service layer exports for outcome formatting and shared helpers."""

from .base import format_utc, utc_timestamp
from .formatter import MISSING_CONFIG_MESSAGE, format_outcome, render_body
