"""Unit tests for topics/services/article_service.py"""

import httpx
import pytest

from topics.services.article_service import (
    ArticleService,
    extract_content,
    extract_key_points,
    generate_related_topics,
    generate_summary,
    source_for_url,
)


HINDU_HTML = """
<html><body>
  <nav><p>Menu item</p></nav>
  <div class="article-content">
    <p>The monsoon session of Parliament opened on Monday with a packed agenda.</p>
    <p></p>
    <p>Several bills on electoral reform are expected to be debated this week.</p>
  </div>
</body></html>
"""

GENERIC_HTML = """
<html><body>
  <article><p>First paragraph of a generic article.</p><p>Second paragraph.</p></article>
  <footer><p>Copyright</p></footer>
</body></html>
"""

CONTENT = (
    "Renewable energy capacity grew sharply this year across several states. "
    "Solar parks in Rajasthan led the expansion. Short one. "
    "Wind installations in Tamil Nadu also contributed significantly to the total. "
    "Analysts expect storage investments to follow soon."
)


class TestTextHelpers:

    def test_summary_takes_three_long_sentences(self):
        summary = generate_summary(CONTENT)
        assert summary == (
            "Renewable energy capacity grew sharply this year across several states. "
            "Solar parks in Rajasthan led the expansion. "
            "Wind installations in Tamil Nadu also contributed significantly to the total."
        )

    def test_key_points_require_thirty_characters(self):
        points = extract_key_points(CONTENT)
        assert "Short one" not in points
        assert points[0].startswith("Renewable energy capacity")
        assert len(points) == 4

    def test_related_topics(self):
        topics = generate_related_topics("Solar power: India's future", "Solar growth with their plans")
        assert topics == ["Solar", "Power", "India's", "Future", "Growth"]


class TestExtractContent:

    def test_site_specific_selector(self):
        content = extract_content(HINDU_HTML, "https://www.thehindu.com/news/a.ece")
        assert content.split("\n\n") == [
            "The monsoon session of Parliament opened on Monday with a packed agenda.",
            "Several bills on electoral reform are expected to be debated this week.",
        ]

    def test_generic_selector(self):
        content = extract_content(GENERIC_HTML, "https://news.example.org/story")
        assert content == "First paragraph of a generic article.\n\nSecond paragraph."

    def test_nothing_matched(self):
        assert extract_content("<html><body><div>No paragraphs</div></body></html>", "https://x.org") == ""


class TestSourceForUrl:

    @pytest.mark.parametrize("url,source", [
        ("https://www.thehindu.com/a", "The Hindu"),
        ("https://www.hindustantimes.com/b", "Hindustan Times"),
        ("https://news.example.org/c", "news.example.org"),
    ])
    def test_source(self, url, source):
        assert source_for_url(url) == source


class TestGetArticle:

    async def test_requires_id_or_url(self):
        with pytest.raises(ValueError):
            await ArticleService(timeout=1).get_article()

    async def test_built_in_id(self):
        def handler(request):
            raise AssertionError("no fetch expected")

        service = ArticleService(timeout=1, transport=httpx.MockTransport(handler))
        response = await service.get_article(article_id="2")

        assert response.note is None
        assert response.article.id == "2"
        assert response.article.source == "Hindustan Times"

    async def test_fetches_url(self):
        url = "https://www.thehindu.com/news/national/a1.ece"

        def handler(request):
            assert str(request.url) == url
            assert "Mozilla" in request.headers["user-agent"]
            return httpx.Response(200, text=HINDU_HTML)

        service = ArticleService(timeout=1, transport=httpx.MockTransport(handler))
        response = await service.get_article(article_id="The Hindu-national-0", url=url)

        article = response.article
        assert response.note is None
        assert article.id == "The Hindu-national-0"
        assert article.title == "Fetched Article"
        assert article.source == "The Hindu"
        assert article.url == url
        assert article.content.startswith("The monsoon session")
        assert len(article.key_points) == 2

    async def test_fetch_failure_uses_sample(self):
        service = ArticleService(timeout=1, transport=httpx.MockTransport(lambda request: httpx.Response(404)))
        response = await service.get_article(url="https://www.thehindu.com/missing.ece")

        assert response.note == "Using sample article data"
        assert response.article.id == "1"

    async def test_empty_page_uses_sample(self):
        service = ArticleService(
            timeout=1,
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html></html>")),
        )
        response = await service.get_article(url="https://example.org/blank")

        assert response.note == "Using sample article data"
