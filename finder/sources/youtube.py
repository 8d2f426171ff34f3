# =============================================================================
# finder/sources/youtube.py  —  Video Source (YouTube Data API v3)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Searches YouTube for tutorial videos on a topic and normalizes the hits
#   into ResourceRecord(kind=video).
#
# CREDENTIAL:
#   The Data API needs a key (YOUTUBE_API_KEY).  Without one the source
#   reports itself as unconfigured via missing_config(), and the aggregator
#   skips it for every request instead of calling the API just to get a 403.
#
# FIELD MAPPING (search.list, part=snippet):
#   id.videoId            → url  (https://www.youtube.com/watch?v=<id>)
#   snippet.title         → title  (HTML entities unescaped: "&#39;" → "'")
#   snippet.channelTitle  → author
#   snippet.description   → description
#   snippet.publishedAt   → published_at
#
#   search.list carries no view counts and we make exactly one call, so
#   popularity stays empty rather than guessed.
# =============================================================================

import html
from typing import Any, Optional

from finder.models import ResourceRecord, SourceKind
from finder.sources.base import HttpResourceSource, optional_str

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class YouTubeSource(HttpResourceSource):
    kind = SourceKind.VIDEO
    name = "youtube"

    def missing_config(self) -> Optional[str]:
        if not self._config.youtube_api_key:
            return "YOUTUBE_API_KEY is not set"
        return None

    def build_request(self, topic: str, limit: int) -> tuple[str, dict[str, Any]]:
        return self._config.youtube_search_url, {
            "part": "snippet",
            "type": "video",
            "q": topic,
            "maxResults": limit,
            "key": self._config.youtube_api_key,
        }

    def parse_payload(self, payload: Any) -> list[ResourceRecord]:
        if not isinstance(payload, dict):
            raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
        items = payload["items"]
        if not isinstance(items, list):
            raise TypeError("'items' is not a list")

        records = []
        for item in items:
            if not isinstance(item, dict):
                continue
            video_id = item.get("id")
            if isinstance(video_id, dict):
                video_id = video_id.get("videoId")
            snippet = item.get("snippet")
            if not isinstance(snippet, dict):
                snippet = {}

            title = optional_str(snippet.get("title"))
            if not isinstance(video_id, str) or not video_id or not title:
                # Channel/playlist hits or truncated entries: nothing to link to.
                continue

            description = optional_str(snippet.get("description"))
            records.append(ResourceRecord(
                title=html.unescape(title),
                url=WATCH_URL.format(video_id=video_id),
                source_kind=self.kind,
                author=optional_str(snippet.get("channelTitle")),
                description=html.unescape(description) if description else None,
                published_at=optional_str(snippet.get("publishedAt")),
            ))
        return records
