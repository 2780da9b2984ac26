from pydantic import BaseModel, Field, field_validator
from teamup.core.schemas import PatchModel
from typing import Optional, List
from datetime import datetime
from teamup.modules.groups.schemas import GroupTag


class BulletinCreate(BaseModel):
    author_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = ""
    group_ids: List[str] = []
    date: str = ""
    image: str = ""
    tags: List[GroupTag] = []


class BulletinUpdate(PatchModel):
    title: Optional[str] = None
    description: Optional[str] = None
    group_ids: Optional[List[str]] = None
    date: Optional[str] = None
    image: Optional[str] = None
    tags: Optional[List[GroupTag]] = None


class BulletinResponse(BaseModel):
    id: str
    author_id: str
    title: str
    description: str = ""
    group_ids: List[str] = []
    date: str = ""
    image: str = ""
    tags: List[GroupTag] = []
    created_at: datetime

    @field_validator("group_ids", "tags", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []

    @field_validator("description", "date", "image", mode="before")
    @classmethod
    def _none_as_blank(cls, value):
        return value or ""

    class Config:
        from_attributes = True
