"""Core application configuration & tunable rules.

Everything that may evolve (retry budgets, page window ceiling, validation
limits, cache staleness) is centralized here so it can be adjusted without
diving into service logic. Values are module constants read from the
environment; tests monkeypatch the environment or mutate the dicts.

The Supabase endpoint and anonymous key are deliberately NOT read at import
time: the transport client is built per call and must fail loudly at that
moment when they are missing.
"""
from __future__ import annotations

import os


class ConfigurationError(RuntimeError):
	"""Raised when required runtime configuration is absent."""


def get_supabase_credentials() -> tuple[str, str]:
	"""Return ``(base_url, anon_key)`` or raise ConfigurationError."""
	url = (os.getenv("SUPABASE_URL") or "").strip()
	anon_key = (os.getenv("SUPABASE_ANON_KEY") or "").strip()
	if not url or not anon_key:
		raise ConfigurationError(
			"Missing Supabase environment variables: SUPABASE_URL and SUPABASE_ANON_KEY are required"
		)
	return url.rstrip("/"), anon_key


# Path suffixes appended to SUPABASE_URL
GRAPHQL_PATH = "/graphql/v1"
REST_PATH = "/rest/v1"
AUTH_PATH = "/auth/v1"

# ------------------------------- Transport -------------------------------- #
TRANSPORT_RETRY_POLICY: dict[str, int | float] = {
	"retries": 2,               # Extra attempts after the first one
	"base_delay_seconds": 1.0,  # Linear: base * attempt number
}

# ------------------------------- Pagination ------------------------------- #
PAGINATION_SETTINGS: dict[str, int] = {
	"default_page_size": 5,
	# Hard ceiling on the over-fetch window. Pages beyond what this many
	# records can cover come back empty.
	"max_fetch": 50,
}

# ---------------------------- Post validation ----------------------------- #
POST_VALIDATION: dict[str, int] = {
	"title_min_length": 1,
	"title_max_length": 255,
	"body_min_length": 10,
	"body_max_length": 10000,
}

# --------------------------------- Cache ---------------------------------- #
CACHE_SETTINGS: dict[str, object] = {
	"stale_seconds": 60,
	"use_redis": os.getenv("CACHE_USE_REDIS", "").lower() in ("true", "1", "yes"),
	"redis_url": os.getenv("REDIS_URL", "redis://localhost:6379/0"),
	"key_prefix": "blog:cache:",
	"redis_health_check_timeout": 2.0,
}

# ------------------------------- Mutations -------------------------------- #
MUTATION_SETTINGS: dict[str, int | float] = {
	"retries": 1,              # Whole-mutation retries on transport failure
	"retry_max_seconds": 30,   # Cap for the exponential delay between them
}

__all__ = [
	"ConfigurationError",
	"get_supabase_credentials",
	"GRAPHQL_PATH",
	"REST_PATH",
	"AUTH_PATH",
	"TRANSPORT_RETRY_POLICY",
	"PAGINATION_SETTINGS",
	"POST_VALIDATION",
	"CACHE_SETTINGS",
	"MUTATION_SETTINGS",
]
