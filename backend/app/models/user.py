"""User-related Pydantic models"""

from pydantic import BaseModel, ConfigDict
from typing import Optional


class User(BaseModel):
    """Stored user document. lastActive is written by the app on activity."""
    model_config = ConfigDict(extra="ignore")
    email: str
    role: str = "student"  # student or admin
    lastActive: Optional[str] = None


class AuthUser(BaseModel):
    """Caller identity taken from a verified Firebase ID token"""
    model_config = ConfigDict(extra="ignore")
    uid: str
    email: Optional[str] = None
    admin: bool = False  # custom claim set through the Firebase Admin SDK
