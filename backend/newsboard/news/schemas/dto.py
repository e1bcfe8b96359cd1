"""Pydantic schemas for the news API."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class NewsItemOut(BaseModel):
	id: int
	title: str
	url: Optional[str] = None
	domain: Optional[str] = None
	text: Optional[str] = None
	author_id: int
	created_at: datetime
	up: int = 0
	down: int = 0
	score: float = 0.0
	rank: float = 0.0
	deleted: bool = False


class NewsPageResponse(BaseModel):
	title: str
	items: List[NewsItemOut] = Field(default_factory=list)
	more: Optional[str] = None
	next_start: Optional[int] = None


class RecomputeResponse(BaseModel):
	status: str = "ok"
	updated: int = 0


class AdminStatsResponse(BaseModel):
	news_count: int = 0
	last_news_id: int = 0
