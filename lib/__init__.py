# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - cache.py: Process-local value cache with a fixed TTL
# - utils.py: Date, time-zone and money helpers
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError, is_not_found
from lib.cache import TTLValue
from lib.utils import (
    DAYS_OF_WEEK,
    day_bounds_utc,
    day_of_week,
    format_long_date,
    last_sunday,
    normalize_time,
    parse_date,
    round_cents,
    to_business_date,
    to_number,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    "is_not_found",
    # Cache
    "TTLValue",
    # Utils
    "DAYS_OF_WEEK",
    "day_bounds_utc",
    "day_of_week",
    "format_long_date",
    "last_sunday",
    "normalize_time",
    "parse_date",
    "round_cents",
    "to_business_date",
    "to_number",
]
