"""
Translate analytics filter parameters into MongoDB filter documents.

Absent filters add no clause, so an empty filter set matches every document.
Clauses that are present are combined with $and.
"""

import re
from datetime import datetime, timezone, timedelta
from typing import Optional

from app.models.analytics import AnalyticsFilters

ACTIVE_STUDENT_DEFAULT_WINDOW = timedelta(hours=24)

_RANGE_DAYS = {
    "7days": 7,
    "30days": 30,
}


def window_start(filters: AnalyticsFilters, now: Optional[datetime] = None) -> Optional[datetime]:
    """Lower bound of the selected date range, or None when unbounded"""
    now = now or datetime.now(timezone.utc)
    if filters.date_range in _RANGE_DAYS:
        return now - timedelta(days=_RANGE_DAYS[filters.date_range])
    if filters.date_range == "custom":
        return filters.start_date
    return None


def window_end(filters: AnalyticsFilters) -> Optional[datetime]:
    """Inclusive upper bound; only custom ranges have one"""
    if filters.date_range == "custom":
        return filters.end_date
    return None


def _bound(start: Optional[datetime], end: Optional[datetime], as_string: bool) -> dict:
    bound = {}
    if start is not None:
        bound["$gte"] = _bound_value(start, as_string)
    if end is not None:
        bound["$lte"] = _bound_value(end, as_string)
    return bound


def _bound_value(value: datetime, as_string: bool):
    if as_string:
        return value.isoformat()
    # BSON dates come back naive UTC from PyMongo
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def time_window_clauses(field: str, start: Optional[datetime], end: Optional[datetime]) -> list:
    """
    Range clauses on `field` for both timestamp encodings.

    This service writes ISO-8601 strings, but seed scripts and other writers
    store BSON dates, and MongoDB never compares a string with a date.
    Returns [] when the window is unbounded.
    """
    if start is None and end is None:
        return []
    return [
        {field: _bound(start, end, as_string=True)},
        {field: _bound(start, end, as_string=False)},
    ]


def build_date_filter(filters: AnalyticsFilters, now: Optional[datetime] = None) -> dict:
    """Questions created (or asked) inside the selected window"""
    start, end = window_start(filters, now), window_end(filters)
    clauses = time_window_clauses("createdAt", start, end) + time_window_clauses("askedAt", start, end)
    if not clauses:
        return {}
    return {"$or": clauses}


def build_category_filter(filters: AnalyticsFilters) -> dict:
    if not filters.category or filters.category == "all":
        return {}
    return {"subject": filters.category}


def build_search_filter(filters: AnalyticsFilters) -> dict:
    """Case-insensitive substring match on topic or question text"""
    term = filters.search.strip()
    if not term:
        return {}
    search_regex = {"$regex": re.escape(term), "$options": "i"}
    return {"$or": [{"topic": search_regex}, {"text": search_regex}]}


def combine_filters(*clauses: dict) -> dict:
    """AND together the non-empty clauses"""
    clauses = [c for c in clauses if c]
    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def build_question_filter(filters: AnalyticsFilters, now: Optional[datetime] = None) -> dict:
    """Full question predicate: date range AND category AND search"""
    return combine_filters(
        build_date_filter(filters, now),
        build_category_filter(filters),
        build_search_filter(filters),
    )


def build_active_student_filter(filters: AnalyticsFilters, now: Optional[datetime] = None) -> dict:
    """
    Students whose lastActive falls in the selected window.
    With no range selected the window is the last 24 hours; "all" counts every student.
    """
    now = now or datetime.now(timezone.utc)
    query = {"role": "student"}

    if filters.date_range == "all":
        return query
    if filters.date_range is None:
        start, end = now - ACTIVE_STUDENT_DEFAULT_WINDOW, None
    else:
        start, end = window_start(filters, now), window_end(filters)

    clauses = time_window_clauses("lastActive", start, end)
    if clauses:
        query["$or"] = clauses
    return query
