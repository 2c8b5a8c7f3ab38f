from __future__ import annotations

import datetime as _dt
import logging

from .contracts import Notice, NoticeLevel

logger = logging.getLogger(__name__)

_MAX_DETAIL_CHARS = 200


def _ts_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat()


def _sanitize_detail(detail: str) -> str:
    # Single line, capped length.
    detail = " ".join((detail or "").split())
    if len(detail) > _MAX_DETAIL_CHARS:
        detail = detail[:_MAX_DETAIL_CHARS] + "..."
    return detail


def make_notice(level: NoticeLevel, title: str, detail: str = "") -> Notice:
    notice = Notice(
        ts_iso=_ts_iso(),
        level=level,
        title=title,
        detail=_sanitize_detail(detail),
    )
    if level == "error":
        logger.warning("notice %s: %s", title, notice.detail)
    else:
        logger.debug("notice %s", title)
    return notice
