"""
Question persistence and history queries.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict

from bson import ObjectId
from pymongo import ReturnDocument

from app.models.question import Question
from app.utils.serialization import serialize_doc

HISTORY_FIELDS = {
    "text": 1, "subject": 1, "topic": 1, "answer": 1, "aiResponse": 1,
    "askedAt": 1, "askCount": 1, "upvotes": 1,
}

# A question counts as featured once it passes either threshold
FEATURED_MIN_UPVOTES = 5
FEATURED_MIN_ASK_COUNT = 3


async def save_question(db, text: str, subject: str, topic: Optional[str],
                        answer: str, asked_by: Optional[str]) -> Dict:
    """
    Store an answered question.

    A signed-in user asking the same text in the same subject again bumps
    askCount on the existing document with a single atomic $inc. Anonymous
    submissions always insert a new document.
    Returns {"questionId", "askCount", "timestamp"}.
    """
    now = datetime.now(timezone.utc).isoformat()

    if asked_by:
        existing = await db.questions.find_one_and_update(
            {"text": text, "subject": subject, "askedBy": asked_by},
            {"$inc": {"askCount": 1}, "$set": {"answer": answer, "lastAskedAt": now}},
            projection={"askCount": 1},
            return_document=ReturnDocument.AFTER,
        )
        if existing:
            return {"questionId": str(existing["_id"]), "askCount": existing["askCount"], "timestamp": now}

    question = Question(
        text=text,
        subject=subject,
        topic=topic,
        answer=answer,
        askedBy=asked_by,
        askedAt=now,
        createdAt=now,
    )
    result = await db.questions.insert_one(question.model_dump(exclude_none=True))
    return {"questionId": str(result.inserted_id), "askCount": question.askCount, "timestamp": now}


async def upvote_question(db, question_id: str) -> Optional[int]:
    """Increment upvotes; returns the new total, or None if no such question"""
    updated = await db.questions.find_one_and_update(
        {"_id": ObjectId(question_id)},
        {"$inc": {"upvotes": 1}},
        projection={"upvotes": 1},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        return None
    return updated["upvotes"]


def _history_item(doc: dict) -> dict:
    item = serialize_doc(doc)
    legacy_answer = item.pop("aiResponse", None)
    item["answer"] = item.get("answer") or legacy_answer
    return item


def _subject_clause(subject: Optional[str]) -> dict:
    if subject and subject != "all":
        return {"subject": subject}
    return {}


async def _find_history(db, query: dict, sort: list, limit: int, skip: int,
                        fields: dict = HISTORY_FIELDS) -> List[Dict]:
    docs = await db.questions.find(query, fields).sort(sort).skip(skip).limit(limit).to_list(limit)
    return [_history_item(d) for d in docs]


async def find_my_questions(db, user_id: str, subject: Optional[str], limit: int, skip: int) -> List[Dict]:
    query = {"askedBy": user_id, **_subject_clause(subject)}
    return await _find_history(db, query, [("askedAt", -1)], limit, skip)


async def find_community_questions(db, user_id: Optional[str], subject: Optional[str],
                                   limit: int, skip: int) -> List[Dict]:
    """Other users' questions, most upvoted first, with askedBy anonymised"""
    query = _subject_clause(subject)
    if user_id:
        query["askedBy"] = {"$ne": user_id}

    questions = await _find_history(
        db, query, [("upvotes", -1), ("askedAt", -1)], limit, skip,
        fields={**HISTORY_FIELDS, "askedBy": 1},
    )
    for q in questions:
        q["askedBy"] = "community" if q.get("askedBy") else None
    return questions


async def find_featured_questions(db, subject: Optional[str], limit: int, skip: int) -> List[Dict]:
    query = {
        "$or": [
            {"upvotes": {"$gte": FEATURED_MIN_UPVOTES}},
            {"askCount": {"$gte": FEATURED_MIN_ASK_COUNT}},
        ],
        **_subject_clause(subject),
    }
    return await _find_history(db, query, [("upvotes", -1), ("askCount", -1), ("askedAt", -1)], limit, skip)
