"""Tunable defaults for views and query sources."""

from __future__ import annotations

# Number of items fetched from a query per load request.
DEFAULT_BATCH_SIZE = 50

# Upper bound on cached (unmodified) items held by a view.
DEFAULT_MAX_CACHE_SIZE = 1000

# sqlite connection pool sizing.
DEFAULT_POOL_SIZE = 5
DEFAULT_ACQUIRE_TIMEOUT = 5.0
