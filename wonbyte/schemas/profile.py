"""
User profile schemas for Wonbyte.

A plain settings record; the only rules are field defaults and the
enumerated choices below.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class LearningStyle(str, Enum):
    VISUAL = "visual"
    AUDITORY = "auditory"
    KINESTHETIC = "kinesthetic"
    BALANCED = "balanced"


class GradeLevel(str, Enum):
    ELEM1 = "elem1"
    ELEM2 = "elem2"
    ELEM3 = "elem3"
    ELEM4 = "elem4"
    ELEM5 = "elem5"
    ELEM6 = "elem6"
    MIDDLE1 = "middle1"
    MIDDLE2 = "middle2"
    MIDDLE3 = "middle3"


class UserProfile(BaseModel):
    nickname: str = ""
    grade_level: GradeLevel = GradeLevel.ELEM4
    avatar: Optional[str] = None
    interests: list[str] = []
    learning_style: LearningStyle = LearningStyle.BALANCED
    daily_goal: int = Field(default=20, ge=1)  # minutes per day
    created_date: datetime
