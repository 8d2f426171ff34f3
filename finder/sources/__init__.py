# =============================================================================
# finder/sources/__init__.py
# =============================================================================
# One module per upstream data provider.  Every adapter satisfies the same
# contract (see base.py):
#
#     await source.fetch_resources(topic, limit) -> list[ResourceRecord]
#
# and raises SourceError for anything that goes wrong upstream.
#
# ADDING A SOURCE:
#   1. Subclass HttpResourceSource (or ResourceSource for non-HTTP data)
#   2. Give it a SourceKind and add the kind to SOURCE_PRIORITY
#   3. Append it in build_sources() below
# =============================================================================

from typing import Optional

import httpx

from finder.config import FinderConfig
from finder.errors import ConfigError
from finder.sources.base import HttpResourceSource, ResourceSource
from finder.sources.devto import DevToSource
from finder.sources.youtube import YouTubeSource

__all__ = [
    "DevToSource",
    "HttpResourceSource",
    "ResourceSource",
    "YouTubeSource",
    "build_sources",
]


def build_sources(
    config: FinderConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[ResourceSource]:
    """Create every known source adapter from the startup config.

    A source listed in ``config.required_sources`` must be fully configured;
    any other unconfigured source is kept and excluded per request instead.

    Raises:
        ConfigError: A required source is missing its configuration.
    """
    sources: list[ResourceSource] = [
        YouTubeSource(config, transport=transport),
        DevToSource(config, transport=transport),
    ]

    for source in sources:
        reason = source.missing_config()
        if reason and source.kind in config.required_sources:
            raise ConfigError(f"Required source '{source.name}' is not configured: {reason}")

    return sources
