"""Topic discovery API endpoints."""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from topics.models import ArticleResponse, TopicListResponse
from topics.services.article_service import ArticleService
from topics.services.news_service import ALL, NewsService

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("", response_model=TopicListResponse)
async def list_topics(
    source: str = Query(ALL, description="thehindu, hindustantimes or all"),
    category: str = Query(ALL, description="Feed category or category substring"),
):
    """Essay topics from newspaper feeds, newest first."""
    return await NewsService().list_topics(source=source, category=category)


@router.get("/article", response_model=ArticleResponse)
async def get_article(id: Optional[str] = None, url: Optional[str] = None):
    """Full article details for a topic, by id or url."""
    if not id and not url:
        raise HTTPException(status_code=400, detail="Article ID or URL is required")
    return await ArticleService().get_article(article_id=id, url=url)
