"""Custom exceptions for news ranking and listing."""

from __future__ import annotations

from fastapi import status

if hasattr(status, "HTTP_422_UNPROCESSABLE_CONTENT"):
	_HTTP_422 = status.HTTP_422_UNPROCESSABLE_CONTENT
else:  # pragma: no cover - older Starlette builds
	_HTTP_422 = status.HTTP_422_UNPROCESSABLE_ENTITY


class NewsError(Exception):
	"""Base class for news related errors."""

	status_code: int = status.HTTP_400_BAD_REQUEST
	detail: str = "news_error"

	def __init__(self, detail: str | None = None) -> None:
		super().__init__(detail or self.detail)
		if detail:
			self.detail = detail


class NotFoundError(NewsError):
	"""Raised when a news item or user does not exist."""

	status_code = status.HTTP_404_NOT_FOUND
	detail = "not_found"


class TransientStoreError(NewsError):
	"""Raised when the index store is unreachable or a write lost a race."""

	status_code = status.HTTP_503_SERVICE_UNAVAILABLE
	detail = "store_unavailable"


class InvariantViolation(NewsError):
	"""Raised for arguments or records that break a documented invariant."""

	status_code = _HTTP_422
	detail = "invariant_violation"
