"""
Analytics aggregations over the questions and users collections.
Results are recomputed from the live collections on every call.
"""

import asyncio
import math
from datetime import datetime
from typing import Optional, List, Dict

from app.config import DEFAULT_TOP_LIMIT, SEARCH_TOP_LIMIT
from app.models.analytics import AnalyticsFilters
from app.services.query_builder import (
    build_active_student_filter,
    build_date_filter,
    build_question_filter,
    combine_filters,
)
from app.utils.serialization import serialize_doc

TOP_QUESTION_FIELDS = {"text": 1, "askCount": 1, "upvotes": 1, "subject": 1, "topic": 1}


def result_limit(filters: AnalyticsFilters) -> int:
    """Top-N size: wider under an active search so the caller can narrow further"""
    return SEARCH_TOP_LIMIT if filters.has_search else DEFAULT_TOP_LIMIT


async def count_active_students(db, filters: AnalyticsFilters, now: Optional[datetime] = None) -> int:
    return await db.users.count_documents(build_active_student_filter(filters, now))


async def average_accuracy(db, date_filter: dict) -> int:
    """Mean accuracyRating of rated questions, rounded half up into 0-100; 0 when none are rated"""
    pipeline = [
        {"$match": combine_filters(date_filter, {"accuracyRating": {"$exists": True, "$ne": None}})},
        {"$group": {"_id": None, "average": {"$avg": "$accuracyRating"}}},
    ]
    result = await db.questions.aggregate(pipeline).to_list(1)
    if not result or result[0].get("average") is None:
        return 0
    return max(0, min(100, math.floor(result[0]["average"] + 0.5)))


async def common_struggles(db, question_filter: dict, limit: int = DEFAULT_TOP_LIMIT) -> List[Dict]:
    """
    Most asked topics. Ties on count keep the order in which each topic first
    appeared, using the smallest ObjectId in the group as its insertion time.
    """
    pipeline = [
        {"$match": combine_filters(question_filter, {"topic": {"$exists": True, "$nin": [None, ""]}})},
        {"$group": {"_id": "$topic", "studentCount": {"$sum": 1}, "firstSeen": {"$min": "$_id"}}},
        {"$sort": {"studentCount": -1, "firstSeen": 1}},
        {"$limit": limit},
        {"$project": {"_id": 0, "topic": "$_id", "studentCount": 1}},
    ]
    return await db.questions.aggregate(pipeline).to_list(limit)


async def category_distribution(db, question_filter: dict) -> List[Dict]:
    """Question count per subject, largest first"""
    pipeline = [
        {"$match": question_filter},
        {"$group": {"_id": "$subject", "count": {"$sum": 1}, "firstSeen": {"$min": "$_id"}}},
        {"$sort": {"count": -1, "firstSeen": 1}},
        {"$project": {"_id": 0, "name": "$_id", "count": 1}},
    ]
    return await db.questions.aggregate(pipeline).to_list(None)


async def top_questions(db, question_filter: dict, limit: int = DEFAULT_TOP_LIMIT) -> List[Dict]:
    """Most repeated questions; equal askCounts keep insertion order"""
    docs = await db.questions.find(
        question_filter, TOP_QUESTION_FIELDS
    ).sort([("askCount", -1), ("_id", 1)]).limit(limit).to_list(limit)
    return serialize_doc(docs)


async def get_usage_trends(db, filters: AnalyticsFilters, now: Optional[datetime] = None) -> Dict:
    """Payload for the usage trends screen"""
    question_filter = build_question_filter(filters, now)
    active, accuracy, struggles = await asyncio.gather(
        count_active_students(db, filters, now),
        average_accuracy(db, build_date_filter(filters, now)),
        common_struggles(db, question_filter, result_limit(filters)),
    )
    return {
        "activeStudents": active,
        "avgAccuracy": accuracy,
        "commonStruggles": struggles,
    }


async def get_system_dashboard(db, filters: AnalyticsFilters, now: Optional[datetime] = None) -> Dict:
    """Payload for the system dashboard screen"""
    question_filter = build_question_filter(filters, now)
    distribution, top = await asyncio.gather(
        category_distribution(db, question_filter),
        top_questions(db, question_filter, result_limit(filters)),
    )
    return {
        "categoryDistribution": distribution,
        "topQuestions": top,
    }
