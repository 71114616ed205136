"""Question-related Pydantic models"""

from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional
from datetime import datetime, timezone

from app.config import VALID_SUBJECTS, MAX_QUESTION_LENGTH, MAX_TOPIC_LENGTH


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Question(BaseModel):
    """A stored homework question and its AI answer"""
    model_config = ConfigDict(extra="ignore")
    text: str
    subject: str
    topic: Optional[str] = None
    answer: str
    askCount: int = Field(default=1, ge=1)
    upvotes: int = Field(default=0, ge=0)
    accuracyRating: Optional[float] = Field(default=None, ge=0, le=100)
    askedBy: Optional[str] = None  # Firebase uid
    askedAt: str = Field(default_factory=_now_iso)
    createdAt: str = Field(default_factory=_now_iso)


class QuestionSubmit(BaseModel):
    """
    Body of POST /student/question.
    The question may arrive as either `question` or `text`; after validation
    `question` holds the trimmed text and `topic` is trimmed or None.
    """
    model_config = ConfigDict(extra="ignore")
    question: Optional[str] = None
    text: Optional[str] = None
    subject: Optional[str] = None
    topic: Optional[str] = None

    @model_validator(mode="after")
    def check_submission(self):
        text = (self.question or "").strip() or (self.text or "").strip()
        if not text:
            raise ValueError("Question text is required")
        if len(text) > MAX_QUESTION_LENGTH:
            raise ValueError(f"Question text must be at most {MAX_QUESTION_LENGTH} characters")

        if not self.subject:
            raise ValueError("Subject is required")
        if self.subject not in VALID_SUBJECTS:
            raise ValueError(f"Subject must be one of: {', '.join(VALID_SUBJECTS)}")

        topic = (self.topic or "").strip() or None
        if topic and len(topic) > MAX_TOPIC_LENGTH:
            raise ValueError(f"Topic must be at most {MAX_TOPIC_LENGTH} characters")

        self.question = text
        self.text = text
        self.topic = topic
        return self
