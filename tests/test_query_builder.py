import re
from datetime import datetime, timezone, timedelta

from app.models.analytics import AnalyticsFilters
from app.services.query_builder import (
    build_active_student_filter,
    build_date_filter,
    build_question_filter,
    build_search_filter,
    combine_filters,
    window_start,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def test_no_filters_match_everything():
    assert build_question_filter(AnalyticsFilters(), NOW) == {}


def test_all_range_and_all_category_add_no_constraint():
    filters = AnalyticsFilters(date_range="all", category="all", search="")
    assert build_question_filter(filters, NOW) == {}


def test_seven_day_window():
    filters = AnalyticsFilters(date_range="7days")
    assert window_start(filters, NOW) == NOW - timedelta(days=7)

    start = NOW - timedelta(days=7)
    iso_bound = {"$gte": start.isoformat()}
    date_bound = {"$gte": start.replace(tzinfo=None)}
    assert build_date_filter(filters, NOW) == {"$or": [
        {"createdAt": iso_bound},
        {"createdAt": date_bound},
        {"askedAt": iso_bound},
        {"askedAt": date_bound},
    ]}


def test_thirty_day_window():
    assert window_start(AnalyticsFilters(date_range="30days"), NOW) == NOW - timedelta(days=30)


def test_custom_range_has_both_bounds():
    start = datetime(2026, 9, 1, tzinfo=timezone.utc)
    end = datetime(2026, 9, 30, 23, 59, 59, tzinfo=timezone.utc)
    filters = AnalyticsFilters(date_range="custom", start_date=start, end_date=end)

    query = build_date_filter(filters, NOW)
    assert {"createdAt": {"$gte": start.isoformat(), "$lte": end.isoformat()}} in query["$or"]
    assert {"askedAt": {"$gte": datetime(2026, 9, 1), "$lte": datetime(2026, 9, 30, 23, 59, 59)}} in query["$or"]
    assert len(query["$or"]) == 4


def test_category_becomes_subject_equality():
    filters = AnalyticsFilters(category="Science")
    assert build_question_filter(filters, NOW) == {"subject": "Science"}


def test_search_is_escaped_case_insensitive_substring():
    query = build_search_filter(AnalyticsFilters(search="  x+y (mod 2) "))
    regex = {"$regex": re.escape("x+y (mod 2)"), "$options": "i"}
    assert query == {"$or": [{"topic": regex}, {"text": regex}]}


def test_blank_search_is_no_search():
    assert build_search_filter(AnalyticsFilters(search="   ")) == {}
    assert build_question_filter(AnalyticsFilters(search=""), NOW) == build_question_filter(AnalyticsFilters(), NOW)


def test_clauses_are_anded():
    filters = AnalyticsFilters(date_range="7days", category="Math", search="algebra")
    query = build_question_filter(filters, NOW)

    assert list(query) == ["$and"]
    assert len(query["$and"]) == 3
    assert {"subject": "Math"} in query["$and"]


def test_combine_filters_drops_empty_clauses():
    assert combine_filters({}, {"a": 1}, {}) == {"a": 1}
    assert combine_filters() == {}


def test_active_students_default_to_last_day():
    query = build_active_student_filter(AnalyticsFilters(), NOW)
    start = NOW - timedelta(hours=24)
    assert query == {"role": "student", "$or": [
        {"lastActive": {"$gte": start.isoformat()}},
        {"lastActive": {"$gte": start.replace(tzinfo=None)}},
    ]}


def test_active_students_follow_selected_range():
    query = build_active_student_filter(AnalyticsFilters(date_range="30days"), NOW)
    start = NOW - timedelta(days=30)
    assert {"lastActive": {"$gte": start.isoformat()}} in query["$or"]
    assert {"lastActive": {"$gte": start.replace(tzinfo=None)}} in query["$or"]


def test_date_bounds_are_converted_to_utc():
    start = datetime(2026, 9, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    filters = AnalyticsFilters(date_range="custom", start_date=start)

    query = build_date_filter(filters, NOW)

    assert {"createdAt": {"$gte": datetime(2026, 9, 1, 0, 0)}} in query["$or"]


def test_active_students_all_range_counts_every_student():
    assert build_active_student_filter(AnalyticsFilters(date_range="all"), NOW) == {"role": "student"}
