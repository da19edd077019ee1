"""
Article Service

Returns full article text for a topic: built-in details for known ids,
otherwise the page is fetched and its paragraphs extracted with
site-specific selectors. Falls back to the first built-in article.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from config import get_settings
from shared.utils.constants import BROWSER_USER_AGENT
from topics.mock_data import mock_article_details
from topics.models import ArticleDetails, ArticleResponse

logger = logging.getLogger(__name__)

# Host fragment → paragraph selector; checked in order.
CONTENT_SELECTORS = [
    ("thehindu.com", ".article-content p, .content p, .story-content p"),
    ("hindustantimes.com", ".story-details p, .detail-body p, .storyDetails p"),
]
GENERIC_SELECTOR = "article p, .article p, .content p, .post-content p"

STOP_WORDS = frozenset({
    "that", "this", "with", "from", "they", "have", "been", "will", "were", "said",
    "about", "their", "there", "which", "would", "these", "those", "other", "while",
})

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def _sentences(content: str, min_length: int) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT.split(content) if len(s.strip()) > min_length]


def generate_summary(content: str) -> str:
    """First three sentences longer than 20 characters."""
    return ". ".join(_sentences(content, 20)[:3]) + "."


def extract_key_points(content: str) -> list[str]:
    """First five sentences longer than 30 characters."""
    return _sentences(content, 30)[:5]


def generate_related_topics(title: str, content: str) -> list[str]:
    """First five distinct words longer than four letters, stop words removed."""
    topics: list[str] = []
    for raw in f"{title} {content}".lower().split():
        word = raw.strip(".,;:!?\"'()[]")
        if len(word) > 4 and word not in STOP_WORDS and word not in topics:
            topics.append(word)
            if len(topics) == 5:
                break
    return [word[0].upper() + word[1:] for word in topics]


def extract_content(html: str, url: str) -> str:
    selector = next((sel for host, sel in CONTENT_SELECTORS if host in url), GENERIC_SELECTOR)
    soup = BeautifulSoup(html, "lxml")
    paragraphs = [p.get_text(strip=True) for p in soup.select(selector)]
    return "\n\n".join(p for p in paragraphs if p).strip()


def source_for_url(url: str) -> str:
    if "thehindu.com" in url:
        return "The Hindu"
    if "hindustantimes.com" in url:
        return "Hindustan Times"
    return httpx.URL(url).host or "Unknown"


class ArticleService:
    """Fetches and summarises articles behind topics."""

    def __init__(self, timeout: Optional[float] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout if timeout is not None else get_settings().article_timeout_seconds
        self._transport = transport

    async def _fetch_content(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": BROWSER_USER_AGENT},
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Error fetching article {url}: {e}")
            return ""
        return extract_content(response.text, url)

    async def get_article(self, article_id: Optional[str] = None, url: Optional[str] = None) -> ArticleResponse:
        """Raises ValueError when neither an id nor a url is given."""
        if not article_id and not url:
            raise ValueError("Article ID or URL is required")

        built_in = mock_article_details()
        if article_id and article_id in built_in:
            return ArticleResponse(article=built_in[article_id])

        if url:
            content = await self._fetch_content(url)
            if content:
                return ArticleResponse(article=ArticleDetails(
                    id=article_id or "fetched",
                    title="Fetched Article",
                    content=content,
                    summary=generate_summary(content),
                    key_points=extract_key_points(content),
                    related_topics=generate_related_topics("", content),
                    source=source_for_url(url),
                    published_at=datetime.now(timezone.utc),
                    url=url,
                ))

        logger.info(f"Falling back to sample article (id={article_id}, url={url})")
        fallback = next(iter(built_in.values()))
        return ArticleResponse(article=fallback, note="Using sample article data")
