"""Domain models for news items and list pagination."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Mapping, Optional, TypeVar

from newsboard.news.domain.exceptions import InvariantViolation

R = TypeVar("R")

LINK_PLACEHOLDER = "$"


class SourceKind(str, Enum):
	"""Indices a news list page can be served from."""

	TOP = "top"
	LATEST = "latest"
	BY_USER = "by_user"
	SAVED = "saved"


def _get_int(mapping: Mapping[str, Any], name: str, default: int = 0) -> int:
	raw = mapping.get(name)
	if raw in (None, ""):
		return default
	return int(float(raw))


def _get_float(mapping: Mapping[str, Any], name: str) -> float:
	raw = mapping.get(name)
	if raw in (None, ""):
		return 0.0
	return float(raw)


def _get_optional_str(mapping: Mapping[str, Any], name: str) -> Optional[str]:
	raw = mapping.get(name)
	if raw in (None, ""):
		return None
	return str(raw)


@dataclass(slots=True)
class VoteAggregate:
	"""Up/down vote totals for a single news item."""

	up: int = 0
	down: int = 0

	@property
	def net(self) -> int:
		return self.up - self.down


@dataclass(slots=True)
class NewsItem:
	"""A submitted story as persisted in the `news:{id}` hash."""

	id: int
	title: str
	created_at: datetime
	author_id: int
	url: Optional[str] = None
	text: Optional[str] = None
	score: float = 0.0
	rank: float = 0.0
	up: int = 0
	down: int = 0
	deleted: bool = False

	def __post_init__(self) -> None:
		if self.id <= 0:
			raise InvariantViolation("news_id_not_positive")
		if self.url and self.text:
			raise InvariantViolation("news_url_and_text")

	@property
	def ctime(self) -> int:
		return int(self.created_at.timestamp())

	@property
	def votes(self) -> VoteAggregate:
		return VoteAggregate(up=self.up, down=self.down)

	def age_seconds(self, now: datetime) -> float:
		return max(0.0, (now - self.created_at).total_seconds())

	@classmethod
	def from_mapping(cls, mapping: Mapping[str, Any]) -> "NewsItem":
		"""Construct an item from a Redis hash mapping.

		Unparseable numeric fields raise InvariantViolation.
		"""

		try:
			news_id = _get_int(mapping, "id")
			created_at = datetime.fromtimestamp(_get_int(mapping, "ctime"), tz=timezone.utc)
			author_id = _get_int(mapping, "user_id")
			score = _get_float(mapping, "score")
			rank = _get_float(mapping, "rank")
			up = _get_int(mapping, "up")
			down = _get_int(mapping, "down")
			deleted = _get_int(mapping, "del") == 1
		except (TypeError, ValueError, OverflowError, OSError) as exc:
			raise InvariantViolation("news_record_malformed") from exc
		return cls(
			id=news_id,
			title=str(mapping.get("title") or ""),
			created_at=created_at,
			author_id=author_id,
			url=_get_optional_str(mapping, "url"),
			text=_get_optional_str(mapping, "text"),
			score=score,
			rank=rank,
			up=up,
			down=down,
			deleted=deleted,
		)

	def to_mapping(self) -> dict[str, str]:
		return {
			"id": str(self.id),
			"title": self.title,
			"url": self.url or "",
			"text": self.text or "",
			"user_id": str(self.author_id),
			"ctime": str(self.ctime),
			"score": repr(self.score),
			"rank": repr(self.rank),
			"up": str(self.up),
			"down": str(self.down),
			"del": "1" if self.deleted else "0",
		}


@dataclass(slots=True, frozen=True)
class Cursor:
	"""Offset pagination state passed between "show more" requests.

	`link_template` holds a single `$` that is replaced by the next offset.
	"""

	start: int
	page_size: int
	link_template: str

	def validate(self) -> "Cursor":
		"""Return a usable cursor or raise; negative starts are clamped to zero."""

		if self.page_size <= 0:
			raise InvariantViolation("page_size_not_positive")
		if LINK_PLACEHOLDER not in self.link_template:
			raise InvariantViolation("link_template_placeholder_missing")
		if self.start < 0:
			return Cursor(start=0, page_size=self.page_size, link_template=self.link_template)
		return self

	def link_for(self, offset: int) -> str:
		return self.link_template.replace(LINK_PLACEHOLDER, str(offset), 1)


@dataclass(slots=True)
class Page(Generic[R]):
	"""One rendered window of a list plus the optional "more" affordance."""

	items: list[R] = field(default_factory=list)
	total: int = 0
	more_link: Optional[str] = None
	next_cursor: Optional[Cursor] = None

	@property
	def has_more(self) -> bool:
		return self.next_cursor is not None


__all__ = [
	"Cursor",
	"LINK_PLACEHOLDER",
	"NewsItem",
	"Page",
	"SourceKind",
	"VoteAggregate",
]
