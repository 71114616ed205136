"""Pydantic models for the Homework Helper API"""

from .user import User, AuthUser
from .question import Question, QuestionSubmit
from .analytics import (
    AnalyticsFilters,
    CommonStruggle,
    UsageTrends,
    CategoryCount,
    TopQuestion,
    SystemDashboard,
)
