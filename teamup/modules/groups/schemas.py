from enum import Enum
from pydantic import BaseModel, Field, field_validator
from teamup.core.schemas import PatchModel
from typing import Optional, List
from datetime import datetime


class GroupTag(str, Enum):
    STUDY = "STUDY"
    PROJECT = "PROJECT"
    HACKATHON = "HACKATHON"
    CASECOMPETITION = "CASECOMPETITION"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None


class GroupCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    owner_id: str = Field(min_length=1)
    members: List[str] = []
    tags: List[GroupTag] = []
    closed: bool = False
    date: str = ""


class GroupUpdate(PatchModel):
    """Patch body. owner_id is intentionally absent so it can never change."""
    title: Optional[str] = None
    description: Optional[str] = None
    members: Optional[List[str]] = None
    tags: Optional[List[GroupTag]] = None
    closed: Optional[bool] = None
    date: Optional[str] = None


class GroupResponse(BaseModel):
    id: str
    title: str
    description: str = ""
    owner_id: str
    members: List[str] = []
    tags: List[GroupTag] = []
    closed: bool = False
    date: str = ""
    created_at: datetime

    @field_validator("members", "tags", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []

    @field_validator("description", "date", mode="before")
    @classmethod
    def _none_as_blank(cls, value):
        return value or ""

    class Config:
        from_attributes = True


class GroupDeleteResult(BaseModel):
    group_id: str
    bulletins_deleted: int


class GroupNotifyRequest(BaseModel):
    subject: str = ""
    message: str = ""
