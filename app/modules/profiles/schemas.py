from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    github: Optional[str] = None
    twitter: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Name is required.")
        return value


class ProfileResponse(BaseModel):
    id: str
    full_name: Optional[str] = ""
    bio: Optional[str] = None
    website: Optional[str] = None
    github: Optional[str] = None
    twitter: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def initials(self) -> str:
        if not self.full_name:
            return "U"
        return "".join(part[0] for part in self.full_name.split())

    class Config:
        from_attributes = True


class ProfileProjectSummary(BaseModel):
    id: str
    title: str
    created_at: datetime


class ProfileCommentSummary(BaseModel):
    id: str
    content: str
    created_at: datetime
    project_id: str


class ProfilePageResponse(BaseModel):
    profile: ProfileResponse
    initials: str
    projects: List[ProfileProjectSummary]
    comments: List[ProfileCommentSummary]
