"""Analytics Pydantic models"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class AnalyticsFilters(BaseModel):
    """Parsed query parameters shared by the analytics endpoints"""
    date_range: Optional[str] = None  # 7days, 30days, all, custom
    start_date: Optional[datetime] = None  # custom only
    end_date: Optional[datetime] = None  # custom only, inclusive
    category: str = "all"
    search: str = ""

    @property
    def has_search(self) -> bool:
        return bool(self.search.strip())


class CommonStruggle(BaseModel):
    topic: str
    studentCount: int


class UsageTrends(BaseModel):
    activeStudents: int
    avgAccuracy: int  # 0-100
    commonStruggles: List[CommonStruggle]


class CategoryCount(BaseModel):
    name: Optional[str] = None
    count: int


class TopQuestion(BaseModel):
    id: Optional[str] = None
    text: Optional[str] = None
    askCount: int = 1
    upvotes: int = 0
    subject: Optional[str] = None
    topic: Optional[str] = None


class SystemDashboard(BaseModel):
    categoryDistribution: List[CategoryCount]
    topQuestions: List[TopQuestion]
