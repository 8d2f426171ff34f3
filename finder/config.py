# =============================================================================
# finder/config.py  —  Process-wide Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads every setting the finder needs from the environment ONCE, at
#   startup, into an immutable FinderConfig.  The entry point calls
#   load_dotenv() first, so a local .env file works too.
#
# WHY AN EXPLICIT OBJECT?
#   Adapters get the config handed to them.  No adapter calls os.environ
#   itself, so tests build a FinderConfig directly and never touch the
#   real environment.
#
# ENVIRONMENT VARIABLES:
#   YOUTUBE_API_KEY           YouTube Data API key (video source)
#   FINDER_SOURCE_TIMEOUT     Per-source time bound in seconds (default 10)
#   FINDER_LOG_LEVEL          DEBUG / INFO / WARNING ... (default INFO)
#   FINDER_REQUIRED_SOURCES   Comma-separated kinds that must be configured,
#                             e.g. "video".  Empty by default.
#   YOUTUBE_SEARCH_URL        Endpoint overrides (staging mirrors, tests)
#   DEVTO_ARTICLES_URL
# =============================================================================

from dataclasses import dataclass, field
import os
from typing import Mapping, Optional

from finder.errors import ConfigError
from finder.models import SourceKind


YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
DEVTO_ARTICLES_URL = "https://dev.to/api/articles"
DEFAULT_SOURCE_TIMEOUT = 10.0


@dataclass(frozen=True)
class FinderConfig:
    """Immutable settings shared (read-only) by the adapters."""

    youtube_api_key: Optional[str] = None
    source_timeout: float = DEFAULT_SOURCE_TIMEOUT
    log_level: str = "INFO"
    youtube_search_url: str = YOUTUBE_SEARCH_URL
    devto_articles_url: str = DEVTO_ARTICLES_URL
    required_sources: frozenset[SourceKind] = field(default_factory=frozenset)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FinderConfig":
        """Build the config from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ConfigError: A variable is set to an unusable value.
        """
        env = os.environ if environ is None else environ

        return cls(
            youtube_api_key=env.get("YOUTUBE_API_KEY", "").strip() or None,
            source_timeout=_parse_timeout(env.get("FINDER_SOURCE_TIMEOUT")),
            log_level=env.get("FINDER_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            youtube_search_url=env.get("YOUTUBE_SEARCH_URL") or YOUTUBE_SEARCH_URL,
            devto_articles_url=env.get("DEVTO_ARTICLES_URL") or DEVTO_ARTICLES_URL,
            required_sources=_parse_kinds(env.get("FINDER_REQUIRED_SOURCES", "")),
        )


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_SOURCE_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"FINDER_SOURCE_TIMEOUT must be a number, got {raw!r}") from None
    if timeout <= 0:
        raise ConfigError(f"FINDER_SOURCE_TIMEOUT must be positive, got {raw!r}")
    return timeout


def _parse_kinds(raw: str) -> frozenset[SourceKind]:
    kinds = set()
    for name in filter(None, (part.strip().lower() for part in raw.split(","))):
        try:
            kinds.add(SourceKind(name))
        except ValueError:
            valid = ", ".join(kind.value for kind in SourceKind)
            raise ConfigError(
                f"FINDER_REQUIRED_SOURCES names unknown source {name!r} (expected one of: {valid})"
            ) from None
    return frozenset(kinds)
