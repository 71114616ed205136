"""Validation utilities for query parameters shared by several routes."""

from datetime import datetime, timezone, timedelta
from typing import Optional, Tuple

from fastapi import HTTPException, Query

from app.config import VALID_SUBJECTS, DATE_RANGES, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from app.models.analytics import AnalyticsFilters


def parse_date_param(value: str, name: str, end_of_day: bool = False) -> datetime:
    """
    Parse an ISO date or datetime. Naive values are taken as UTC.
    A bare date used as an upper bound covers the whole day.
    """
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{name} must be an ISO-8601 date")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    if end_of_day and len(value) == 10:
        parsed = parsed + timedelta(days=1) - timedelta(microseconds=1)
    return parsed.astimezone(timezone.utc)


def validate_subject_param(subject: Optional[str], name: str = "subject") -> Optional[str]:
    """Accept None, "all", or one of the subjects"""
    if subject is None or subject == "all" or subject in VALID_SUBJECTS:
        return subject
    raise HTTPException(
        status_code=400,
        detail=f"{name} must be 'all' or one of: {', '.join(VALID_SUBJECTS)}"
    )


def get_analytics_filters(
    dateRange: Optional[str] = None,
    category: Optional[str] = "all",
    search: Optional[str] = "",
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
) -> AnalyticsFilters:
    """FastAPI dependency: parse the analytics query string"""
    if dateRange == "":
        dateRange = None
    if dateRange is not None and dateRange not in DATE_RANGES:
        raise HTTPException(
            status_code=400,
            detail=f"dateRange must be one of: {', '.join(DATE_RANGES)}"
        )

    category = validate_subject_param(category or "all", "category")

    start_date = end_date = None
    if dateRange == "custom":
        if not startDate:
            raise HTTPException(status_code=400, detail="startDate is required for a custom dateRange")
        start_date = parse_date_param(startDate, "startDate")
        if endDate:
            end_date = parse_date_param(endDate, "endDate", end_of_day=True)
            if start_date > end_date:
                raise HTTPException(status_code=400, detail="startDate must not be after endDate")

    return AnalyticsFilters(
        date_range=dateRange,
        start_date=start_date,
        end_date=end_date,
        category=category,
        search=search or "",
    )


def get_pagination(
    limit: int = Query(DEFAULT_PAGE_LIMIT),
    skip: int = Query(0),
) -> Tuple[int, int]:
    """FastAPI dependency: bounded limit/skip pair"""
    if limit < 1 or limit > MAX_PAGE_LIMIT:
        raise HTTPException(status_code=400, detail=f"limit must be between 1 and {MAX_PAGE_LIMIT}")
    if skip < 0:
        raise HTTPException(status_code=400, detail="skip must be zero or more")
    return limit, skip
