"""Blogging platform adapters: DEV Community and Medium."""

from __future__ import annotations

import html
import math
import re
from typing import Any

import defusedxml.ElementTree as ET

from skillproof.schemas import EvidenceType, PlatformType, RawActivityRecord

from .base import AdapterBase, as_items, as_tag_list

_CONTENT_ENCODED = "{http://purl.org/rss/1.0/modules/content/}encoded"
_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")
WORDS_PER_MINUTE = 265


def strip_html(raw: str | None) -> str:
    if not raw:
        return ""
    text = _TAG_RE.sub(" ", raw)
    return _WS_RE.sub(" ", html.unescape(text)).strip()


class DevToAdapter(AdapterBase):
    """Translates ``GET /api/articles?username=...`` results from dev.to."""

    platform_id = "devto"
    name = "DEV Community"
    platform_type = PlatformType.BLOG_PLATFORM
    description = "Published technical articles."
    accepted_credentials = ("username", "api_key")

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        if not isinstance(payload, (dict, list)):
            raise ValueError(f"expected an article list, got {type(payload).__name__}")
        articles = as_items(payload, "articles") if isinstance(payload, dict) else as_items(payload)
        return [
            self._record(
                f"article_{article.get('id')}",
                EvidenceType.ARTICLE_PUBLICATION,
                article.get("published_at") or article.get("published_timestamp"),
                {
                    "title": article.get("title"),
                    "description": article.get("body_markdown") or article.get("description"),
                    "url": article.get("url"),
                    "tags": as_tag_list(article.get("tag_list") or article.get("tags")),
                    "reactions": article.get("positive_reactions_count") or article.get("public_reactions_count"),
                    "comments": article.get("comments_count"),
                    "reading_time_minutes": article.get("reading_time_minutes"),
                    "published_at": article.get("published_at"),
                },
            )
            for article in articles
        ]


class MediumAdapter(AdapterBase):
    """Parses the public ``https://medium.com/feed/@<user>`` RSS document."""

    platform_id = "medium"
    name = "Medium"
    platform_type = PlatformType.BLOG_PLATFORM
    description = "Articles from the public RSS feed."
    accepted_credentials = ("username", "profile_url")

    def parse(self, payload: Any) -> list[RawActivityRecord]:
        if isinstance(payload, bytes):
            raw = payload
        elif isinstance(payload, str):
            raw = payload.encode("utf-8")
        else:
            raise ValueError(f"expected RSS text, got {type(payload).__name__}")
        try:
            root = ET.fromstring(raw)
        except ET.ParseError as exc:
            raise ValueError(f"invalid RSS document: {exc}") from exc

        records: list[RawActivityRecord] = []
        for index, item in enumerate(root.iter("item")):
            title = strip_html(item.findtext("title"))
            link = (item.findtext("link") or "").strip()
            if not title or not link:
                continue
            body = strip_html(item.findtext(_CONTENT_ENCODED) or item.findtext("description"))
            words = len(body.split())
            records.append(
                self._record(
                    (item.findtext("guid") or "").strip() or f"article_{index}",
                    EvidenceType.ARTICLE_PUBLICATION,
                    item.findtext("pubDate"),
                    {
                        "title": title,
                        "url": link,
                        "description": body,
                        "tags": [strip_html(node.text) for node in item.findall("category") if node.text],
                        "reading_time_minutes": math.ceil(words / WORDS_PER_MINUTE) if words else None,
                        "published_at": item.findtext("pubDate"),
                    },
                )
            )
        return records
