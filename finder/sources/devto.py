# =============================================================================
# finder/sources/devto.py  —  Article Source (Forem / Dev.to public API)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Lists Dev.to articles tagged with the topic's words and normalizes them
#   into ResourceRecord(kind=article).  No credential needed.
#
# TOPIC → TAGS:
#   Dev.to tags are lowercase alphanumerics ("javascript", "react").  The
#   topic is split into words, connective words ("and", "for", ...) are
#   dropped, and each remaining word is folded to that alphabet.  "+" and
#   "#" are spelled out the way Dev.to spells them rather than deleted:
#       "React hooks"        → tags=react,hooks
#       "Node.js"            → tags=nodejs
#       "C++ and C#"         → tags=cpp,csharp
#   A topic with no usable characters at all ("!!!") cannot be searched and
#   fails as a SourceError before any request is made.
#
# FIELD MAPPING (/api/articles):
#   title, url, description, published_at  → same names
#   user.name                               → author
#   public_reactions_count                  → popularity
#     (older responses only carry positive_reactions_count; used as fallback)
# =============================================================================

import re
from typing import Any

from finder.errors import SourceError
from finder.models import ResourceRecord, SourceKind
from finder.sources.base import HttpResourceSource, is_absolute_url, optional_str

_NON_TAG_CHARS = re.compile(r"[^a-z0-9]")

# c++ → cpp, c# → csharp, f# → fsharp
_TAG_SPELLINGS = (("+", "p"), ("#", "sharp"))

_STOP_WORDS = frozenset({
    "a", "an", "and", "for", "in", "of", "on", "or", "the", "to", "with",
})


def topic_to_tags(topic: str) -> list[str]:
    """Fold a free-text topic into Dev.to tag names, keeping word order."""
    tags = []
    for word in topic.lower().split():
        if word in _STOP_WORDS:
            continue
        for symbol, spelling in _TAG_SPELLINGS:
            word = word.replace(symbol, spelling)
        tag = _NON_TAG_CHARS.sub("", word)
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class DevToSource(HttpResourceSource):
    kind = SourceKind.ARTICLE
    name = "devto"

    def build_request(self, topic: str, limit: int) -> tuple[str, dict[str, Any]]:
        tags = topic_to_tags(topic)
        if not tags:
            raise SourceError(self.kind, f"topic {topic!r} has no words usable as a Dev.to tag")
        return self._config.devto_articles_url, {
            "tags": ",".join(tags),
            "per_page": limit,
        }

    def parse_payload(self, payload: Any) -> list[ResourceRecord]:
        if not isinstance(payload, list):
            raise TypeError(f"expected a JSON array, got {type(payload).__name__}")

        records = []
        for article in payload:
            if not isinstance(article, dict):
                continue
            title = optional_str(article.get("title"))
            url = article.get("url")
            if not title or not is_absolute_url(url):
                continue

            user = article.get("user")
            author = optional_str(user.get("name")) if isinstance(user, dict) else None

            records.append(ResourceRecord(
                title=title,
                url=url,
                source_kind=self.kind,
                author=author,
                popularity=_reactions(article),
                description=optional_str(article.get("description")),
                published_at=optional_str(article.get("published_at")),
            ))
        return records


def _reactions(article: dict[str, Any]):
    for key in ("public_reactions_count", "positive_reactions_count"):
        value = article.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None
