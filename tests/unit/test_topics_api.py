"""Tests for topics/api/routes.py"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from topics.api.routes import router
from topics.mock_data import mock_article_details
from topics.models import ArticleResponse, Topic, TopicListResponse


@pytest.fixture
def api():
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def _listing():
    topic = Topic(
        id="The Hindu-national-0",
        title="Monsoon session opens",
        description="Parliament begins...",
        url="https://www.thehindu.com/a.ece",
        source_name="The Hindu",
        category="national",
        published_at=datetime(2026, 7, 6, tzinfo=timezone.utc),
    )
    return TopicListResponse(articles=[topic], total=1, sources=["The Hindu", "Hindustan Times"])


class TestListTopics:

    @patch("topics.api.routes.NewsService")
    def test_passes_filters(self, mock_cls, api):
        mock_cls.return_value.list_topics = AsyncMock(return_value=_listing())

        resp = api.get("/topics", params={"source": "thehindu", "category": "national"})

        assert resp.status_code == 200
        assert resp.json()["total"] == 1
        assert resp.json()["articles"][0]["source_name"] == "The Hindu"
        mock_cls.return_value.list_topics.assert_awaited_once_with(source="thehindu", category="national")

    @patch("topics.api.routes.NewsService")
    def test_defaults_to_all(self, mock_cls, api):
        mock_cls.return_value.list_topics = AsyncMock(return_value=_listing())

        api.get("/topics")
        mock_cls.return_value.list_topics.assert_awaited_once_with(source="all", category="all")


class TestGetArticle:

    def test_requires_id_or_url(self, api):
        resp = api.get("/topics/article")
        assert resp.status_code == 400

    @patch("topics.api.routes.ArticleService")
    def test_by_id(self, mock_cls, api):
        article = mock_article_details()["1"]
        mock_cls.return_value.get_article = AsyncMock(return_value=ArticleResponse(article=article))

        resp = api.get("/topics/article", params={"id": "1"})

        assert resp.status_code == 200
        assert resp.json()["article"]["id"] == "1"
        mock_cls.return_value.get_article.assert_awaited_once_with(article_id="1", url=None)
