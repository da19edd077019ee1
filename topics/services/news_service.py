"""
News Service

Fetches essay topics from newspaper RSS feeds. Feeds are fetched
concurrently; a failed feed contributes nothing, and if no feed produced
anything the built-in topics are used instead.
"""

import asyncio
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from config import get_settings
from shared.utils.constants import (
    ARTICLES_PER_FEED,
    BROWSER_USER_AGENT,
    DESCRIPTION_MAX_CHARS,
    MAX_TOPICS,
)
from topics.mock_data import mock_topics
from topics.models import Topic, TopicListResponse

logger = logging.getLogger(__name__)

ALL = "all"

NEWS_SOURCES = {
    "thehindu": {
        "name": "The Hindu",
        "feeds": {
            "national": "https://www.thehindu.com/news/national/feeder/default.rss",
            "international": "https://www.thehindu.com/news/international/feeder/default.rss",
            "business": "https://www.thehindu.com/business/feeder/default.rss",
            "sport": "https://www.thehindu.com/sport/feeder/default.rss",
            "opinion": "https://www.thehindu.com/opinion/feeder/default.rss",
            "scitech": "https://www.thehindu.com/sci-tech/feeder/default.rss",
        },
    },
    "hindustantimes": {
        "name": "Hindustan Times",
        "feeds": {
            "national": "https://www.hindustantimes.com/feeds/rss/india-news/rssfeed.xml",
            "international": "https://www.hindustantimes.com/feeds/rss/world-news/rssfeed.xml",
            "business": "https://www.hindustantimes.com/feeds/rss/business-news/rssfeed.xml",
            "sports": "https://www.hindustantimes.com/feeds/rss/sports-news/rssfeed.xml",
            "opinion": "https://www.hindustantimes.com/feeds/rss/analysis-news/rssfeed.xml",
            "lifestyle": "https://www.hindustantimes.com/feeds/rss/lifestyle/rssfeed.xml",
        },
    },
}

SOURCE_NAMES = [source["name"] for source in NEWS_SOURCES.values()]


def _parse_pub_date(value: str) -> datetime:
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _strip_html(text: str) -> str:
    return BeautifulSoup(text, "html.parser").get_text(" ", strip=True)


def parse_feed(xml: str, source_name: str, category: str) -> list[Topic]:
    """Turn an RSS document into at most ARTICLES_PER_FEED topics."""
    soup = BeautifulSoup(xml, "xml")
    topics = []
    for index, item in enumerate(soup.find_all("item")[:ARTICLES_PER_FEED]):
        title = item.find("title")
        description = item.find("description")
        link = item.find("link")
        pub_date = item.find("pubDate")

        title_text = title.get_text(strip=True) if title else ""
        description_text = description.get_text(strip=True) if description else ""
        link_text = link.get_text(strip=True) if link else ""
        if not (title_text and description_text and link_text):
            continue

        topics.append(Topic(
            id=f"{source_name}-{category}-{index}",
            title=title_text,
            description=_strip_html(description_text)[:DESCRIPTION_MAX_CHARS] + "...",
            url=link_text,
            source_name=source_name,
            category=category,
            published_at=_parse_pub_date(pub_date.get_text(strip=True)) if pub_date else datetime.now(timezone.utc),
        ))
    return topics


def filter_topics(topics: list[Topic], source: str = ALL, category: str = ALL) -> list[Topic]:
    """Filter by source key and category substring, newest first, capped at MAX_TOPICS."""
    filtered = topics
    if source != ALL:
        source_name = NEWS_SOURCES[source]["name"] if source in NEWS_SOURCES else None
        filtered = [t for t in filtered if t.source_name == source_name]
    if category != ALL:
        needle = category.lower()
        filtered = [t for t in filtered if needle in t.category.lower()]
    filtered = sorted(filtered, key=lambda t: t.published_at, reverse=True)
    return filtered[:MAX_TOPICS]


class NewsService:
    """Lists essay topics from RSS feeds."""

    def __init__(self, timeout: Optional[float] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout if timeout is not None else get_settings().news_feed_timeout_seconds
        self._transport = transport

    def _feeds_for(self, source: str, category: str) -> list[tuple[str, str, str]]:
        """(url, source name, category) for every feed matching the request."""
        feeds = []
        for key, feed_source in NEWS_SOURCES.items():
            if source not in (ALL, key):
                continue
            for feed_category, url in feed_source["feeds"].items():
                if category in (ALL, feed_category):
                    feeds.append((url, feed_source["name"], feed_category))
        return feeds

    async def _fetch_feed(self, client: httpx.AsyncClient, url: str, source_name: str, category: str) -> list[Topic]:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Error fetching RSS feed {url}: {e}")
            return []
        return parse_feed(response.text, source_name, category)

    async def list_topics(self, source: str = ALL, category: str = ALL) -> TopicListResponse:
        feeds = self._feeds_for(source, category)
        fetched: list[Topic] = []

        if feeds:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": BROWSER_USER_AGENT},
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                results = await asyncio.gather(
                    *(self._fetch_feed(client, url, name, cat) for url, name, cat in feeds),
                    return_exceptions=True,
                )
            for result in results:
                if isinstance(result, Exception):
                    logger.warning(f"Feed parsing failed: {result}")
                    continue
                fetched.extend(result)

        note = None
        if not fetched:
            logger.info("No topics fetched from RSS feeds, using built-in topics")
            fetched = mock_topics()
            note = "Using built-in topics because the news feeds were unavailable"

        topics = filter_topics(fetched, source, category)
        return TopicListResponse(articles=topics, total=len(topics), sources=SOURCE_NAMES, note=note)
