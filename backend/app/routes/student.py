"""Student routes: question submission, upvotes and question history."""

from datetime import datetime, timezone
from typing import Optional, Tuple

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import PyMongoError

from app.database import db
from app.config import logger
from app.deps import get_optional_user, get_current_user
from app.models.user import AuthUser
from app.models.question import QuestionSubmit
from app.services.llm import generate_answer, UpstreamError
from app.services.questions import (
    save_question,
    upvote_question,
    find_my_questions,
    find_community_questions,
    find_featured_questions,
)
from app.services.fallback import (
    run_with_fallback,
    EMPTY_QUESTION_LIST_FALLBACK,
    FEATURED_QUESTIONS_FALLBACK,
)
from app.utils.validation import get_pagination, validate_subject_param

router = APIRouter(prefix="/student", tags=["student"])


# ============== ASK ==============

@router.post("/question", status_code=201)
async def submit_question(
    submission: QuestionSubmit,
    user: Optional[AuthUser] = Depends(get_optional_user)
):
    """Answer a homework question with the LLM and record it"""
    asked_by = user.uid if user else None
    logger.info(f"Question from {asked_by or 'anonymous'} ({submission.subject}): {submission.question[:80]}")

    try:
        answer = await generate_answer(submission.question, submission.subject, submission.topic)
    except UpstreamError as e:
        raise HTTPException(status_code=e.status_code, detail={"error": e.message, "code": e.code})

    saved = {
        "questionId": None,
        "askCount": 1,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    try:
        saved = await save_question(
            db, submission.question, submission.subject, submission.topic, answer, asked_by
        )
    except PyMongoError as e:
        # The student still gets the answer; only the history entry is lost
        logger.error(f"Failed to save question: {e}")

    return {
        "success": True,
        "question": submission.question,
        "answer": answer,
        "subject": submission.subject,
        "topic": submission.topic,
        "questionId": saved["questionId"],
        "askCount": saved["askCount"],
        "wordCount": len(answer.split()),
        "timestamp": saved["timestamp"],
    }


@router.post("/question/{question_id}/upvote")
async def upvote(question_id: str):
    """Add one upvote to a question"""
    if not ObjectId.is_valid(question_id):
        raise HTTPException(status_code=400, detail="Invalid question id")

    upvotes = await upvote_question(db, question_id)
    if upvotes is None:
        raise HTTPException(status_code=404, detail="Question not found")

    return {"success": True, "questionId": question_id, "upvotes": upvotes}


# ============== HISTORY ==============

def _question_list(questions: list) -> dict:
    return {"success": True, "questions": questions, "count": len(questions)}


@router.get("/questions/my")
async def my_questions(
    subject: Optional[str] = None,
    page: Tuple[int, int] = Depends(get_pagination),
    user: AuthUser = Depends(get_current_user)
):
    """The caller's own questions, newest first"""
    subject = validate_subject_param(subject)
    limit, skip = page

    async def query():
        return _question_list(await find_my_questions(db, user.uid, subject, limit, skip))

    return await run_with_fallback("questions/my", query, EMPTY_QUESTION_LIST_FALLBACK)


@router.get("/questions/community")
async def community_questions(
    subject: Optional[str] = None,
    page: Tuple[int, int] = Depends(get_pagination),
    user: Optional[AuthUser] = Depends(get_optional_user)
):
    """Other students' questions, most upvoted first"""
    subject = validate_subject_param(subject)
    limit, skip = page
    user_id = user.uid if user else None

    async def query():
        return _question_list(await find_community_questions(db, user_id, subject, limit, skip))

    return await run_with_fallback("questions/community", query, EMPTY_QUESTION_LIST_FALLBACK)


@router.get("/questions/featured")
async def featured_questions(
    subject: Optional[str] = None,
    page: Tuple[int, int] = Depends(get_pagination),
):
    """Popular questions: well upvoted or asked repeatedly"""
    subject = validate_subject_param(subject)
    limit, skip = page

    async def query():
        return _question_list(await find_featured_questions(db, subject, limit, skip))

    return await run_with_fallback("questions/featured", query, FEATURED_QUESTIONS_FALLBACK)
