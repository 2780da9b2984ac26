from pydantic import BaseModel, field_validator
from typing import Optional, List


class MemberResponse(BaseModel):
    id: str
    username: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    bio: Optional[str] = None
    skills: List[str] = []

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def _none_as_blank(cls, value):
        return value or ""

    @field_validator("skills", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or []

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.username

    class Config:
        from_attributes = True
