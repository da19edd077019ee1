"""Topic and article models."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class Topic(BaseModel):
    """A news item offered as an essay prompt."""
    id: str
    title: str
    description: str
    url: str
    source_name: str
    category: str
    published_at: datetime


class TopicListResponse(BaseModel):
    articles: List[Topic]
    total: int
    sources: List[str]
    note: Optional[str] = None


class ArticleDetails(BaseModel):
    """Full article text plus derived reading aids."""
    id: str
    title: str
    content: str
    summary: str
    key_points: List[str] = Field(default_factory=list)
    related_topics: List[str] = Field(default_factory=list)
    source: str
    published_at: datetime
    author: Optional[str] = None
    url: str


class ArticleResponse(BaseModel):
    article: ArticleDetails
    note: Optional[str] = None
