"""
Mock payloads served when MongoDB cannot be queried.

Each read endpoint makes a single attempt against the store; on a store error
or timeout it returns a copy of the matching fixture below. Nothing is
remembered between requests, so the next request tries the store again.
Bump FALLBACK_VERSION whenever a fixture changes shape.
"""

import asyncio
import copy
from typing import Any, Awaitable, Callable, Dict

from pymongo.errors import PyMongoError

from app.config import logger, QUERY_TIMEOUT_SECONDS

FALLBACK_VERSION = 1

USAGE_TRENDS_FALLBACK: Dict[str, Any] = {
    "activeStudents": 3,
    "avgAccuracy": 85,
    "commonStruggles": [
        {"topic": "Calculus Derivatives", "studentCount": 250},
        {"topic": "Biology", "studentCount": 200},
        {"topic": "World War I", "studentCount": 180},
        {"topic": "Algebra", "studentCount": 150},
        {"topic": "Grammar", "studentCount": 120},
    ],
}

SYSTEM_DASHBOARD_FALLBACK: Dict[str, Any] = {
    "categoryDistribution": [
        {"name": "Math", "count": 560},
        {"name": "Science", "count": 515},
        {"name": "History", "count": 340},
        {"name": "English", "count": 250},
    ],
    "topQuestions": [
        {"id": "1", "text": "What are Calculus Derivatives?", "askCount": 250, "upvotes": 75,
         "subject": "Math", "topic": "Calculus Derivatives"},
        {"id": "2", "text": "What is the powerhouse of the cell?", "askCount": 200, "upvotes": 60,
         "subject": "Science", "topic": "Biology"},
        {"id": "3", "text": "Explain the main causes of WWI", "askCount": 180, "upvotes": 55,
         "subject": "History", "topic": "World War I"},
        {"id": "4", "text": "How do I solve quadratic equations?", "askCount": 150, "upvotes": 45,
         "subject": "Math", "topic": "Algebra"},
        {"id": "5", "text": "What is a verb?", "askCount": 120, "upvotes": 35,
         "subject": "English", "topic": "Grammar"},
    ],
}

# History lists. "my" and "community" fall back to an empty page.
EMPTY_QUESTION_LIST_FALLBACK: Dict[str, Any] = {
    "success": True,
    "questions": [],
    "count": 0,
}

FEATURED_QUESTIONS_FALLBACK: Dict[str, Any] = {
    "success": True,
    "questions": [
        {
            "id": q["id"],
            "text": q["text"],
            "subject": q["subject"],
            "topic": q["topic"],
            "answer": None,
            "askedAt": None,
            "askCount": q["askCount"],
            "upvotes": q["upvotes"],
        }
        for q in SYSTEM_DASHBOARD_FALLBACK["topQuestions"]
    ],
    "count": len(SYSTEM_DASHBOARD_FALLBACK["topQuestions"]),
}


async def run_with_fallback(
    label: str,
    query: Callable[[], Awaitable[Dict[str, Any]]],
    fallback: Dict[str, Any],
    timeout: float = QUERY_TIMEOUT_SECONDS,
) -> Dict[str, Any]:
    """
    Run `query` once within `timeout` seconds.
    Store errors and timeouts return a deep copy of `fallback` instead.
    """
    try:
        return await asyncio.wait_for(query(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"⚠️ {label}: store query exceeded {timeout}s, returning mock data")
    except PyMongoError as e:
        logger.warning(f"⚠️ {label}: store unavailable ({type(e).__name__}: {e}), returning mock data")
    return copy.deepcopy(fallback)
