"""Normalization helpers shared by the API client variants."""

from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING

from cursor_exporter.models.records import TeamMember

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cursor_exporter.models.wire import TeamMemberPayload

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 100


def unique_members(payloads: Iterable[TeamMemberPayload]) -> list[TeamMember]:
    """Convert member payloads, keeping the first entry for each email."""
    members: list[TeamMember] = []
    seen: set[str] = set()
    for payload in payloads:
        if payload.email and payload.email in seen:
            logger.warning("Duplicate team member email in response: %s", payload.email)
            continue
        seen.add(payload.email)
        members.append(TeamMember(name=payload.name, email=payload.email, role=payload.role))
    return members


def page_limit_error(max_pages: int) -> str:
    return f"pagination did not finish within {max_pages} pages"


def as_utc(value: dt.datetime) -> dt.datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.UTC)
    return value.astimezone(dt.UTC)
