import uuid
from datetime import datetime, timezone
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field as PydanticField, StrictInt
from sqlalchemy import JSON, DateTime, Text, UniqueConstraint
from sqlmodel import Field, SQLModel

T = TypeVar("T")

Difficulty = Literal["beginner", "intermediate", "advanced"]
ProjectStatus = Literal["idea", "planning", "in_progress", "completed", "on_hold"]


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


# Database models, table names inferred from class name.
# Owner and author columns hold the auth service's user id; users are not stored locally.

class Project(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: str = Field(index=True, max_length=255)
    name: str = Field(max_length=100)
    description: str = Field(sa_type=Text)  # type: ignore
    category: str = Field(max_length=255)
    difficulty: str = Field(default="intermediate", max_length=20)
    estimated_duration: str = Field(max_length=255)
    tech_stack: list[str] = Field(default_factory=list, sa_type=JSON)  # type: ignore
    features: list[str] = Field(default_factory=list, sa_type=JSON)  # type: ignore
    requirements: list[str] = Field(default_factory=list, sa_type=JSON)  # type: ignore
    is_public: bool = Field(default=False, index=True)
    status: str = Field(default="idea", max_length=20)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class Vote(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_vote_project_user"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    project_id: uuid.UUID = Field(
        foreign_key="project.id", nullable=False, ondelete="CASCADE", index=True
    )
    user_id: str = Field(index=True, max_length=255)
    vote_type: int
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class Comment(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    project_id: uuid.UUID = Field(
        foreign_key="project.id", nullable=False, ondelete="CASCADE", index=True
    )
    user_id: str = Field(max_length=255)
    author_email: str | None = Field(default=None, max_length=255)
    content: str = Field(sa_type=Text)  # type: ignore
    parent_id: uuid.UUID | None = Field(
        default=None, foreign_key="comment.id", ondelete="CASCADE", index=True
    )
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


# API payloads. Request bodies accept the camelCase names the web client sends.

class ProjectCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = PydanticField(min_length=1, max_length=100)
    description: str = PydanticField(min_length=10, max_length=1000)
    category: str = PydanticField(min_length=1)
    difficulty: Difficulty
    estimated_duration: str = PydanticField(min_length=1, alias="estimatedDuration")
    tech_stack: list[str] = PydanticField(default_factory=list, alias="techStack")
    features: list[str] = PydanticField(default_factory=list)
    requirements: list[str] = PydanticField(default_factory=list)


class ProjectUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = PydanticField(default=None, min_length=1, max_length=100)
    description: str | None = PydanticField(default=None, min_length=10, max_length=1000)
    category: str | None = PydanticField(default=None, min_length=1)
    difficulty: Difficulty | None = None
    estimated_duration: str | None = PydanticField(default=None, min_length=1, alias="estimatedDuration")
    tech_stack: list[str] | None = PydanticField(default=None, alias="techStack")
    features: list[str] | None = None
    requirements: list[str] | None = None
    status: ProjectStatus | None = None
    is_public: bool | None = PydanticField(default=None, alias="isPublic")


class ProjectPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    name: str
    description: str
    category: str
    difficulty: str
    estimated_duration: str
    tech_stack: list[str] = []
    features: list[str] = []
    requirements: list[str] = []
    is_public: bool = False
    status: str = "idea"
    created_at: datetime | None = None
    updated_at: datetime | None = None
    upvotes: int = 0
    downvotes: int = 0
    user_vote: int | None = None


class ProjectsPage(BaseModel):
    projects: list[ProjectPublic]
    total: int
    page: int
    totalPages: int


class SearchParams(BaseModel):
    category: str | None = None
    difficulty: str | None = None
    search: str | None = None
    tech_stack: list[str] | None = None
    is_public: bool | None = None


class PublicProjectFilters(BaseModel):
    category: str | None = None
    difficulty: str | None = None
    search: str | None = None
    sort_by: str = "created_at"
    sort_order: str = "desc"


class VoteCreate(BaseModel):
    voteType: StrictInt


class VoteResult(BaseModel):
    action: Literal["created", "updated", "removed"]
    voteType: int
    upvotes: int
    downvotes: int
    userVote: int | None = None


class CommentCreate(BaseModel):
    content: str
    parentId: uuid.UUID | None = None


class CommentPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    project_id: uuid.UUID
    user_id: str
    author_email: str | None = None
    content: str
    parent_id: uuid.UUID | None = None
    created_at: datetime | None = None


class CommentWithReplies(CommentPublic):
    replies: list[CommentPublic] = []


class CommentsPage(BaseModel):
    comments: list[CommentWithReplies]
    total: int
    page: int
    totalPages: int


class ProjectDetails(BaseModel):
    project: ProjectPublic
    comments: list[CommentWithReplies]


# Chat payloads

class ChatMessage(BaseModel):
    role: str = PydanticField(min_length=1)
    content: str = PydanticField(min_length=1)


class ChatMessageRequest(BaseModel):
    message: str = PydanticField(min_length=1, max_length=1000)
    sessionId: str | None = None
    userId: str | None = None
    context: str | None = PydanticField(default=None, max_length=200)
    additionalParams: dict[str, Any] | None = None


class ChatConversationRequest(BaseModel):
    messages: list[ChatMessage] = PydanticField(min_length=1)
    sessionId: str | None = None
    userId: str | None = None
    context: str | None = PydanticField(default=None, max_length=200)
    additionalParams: dict[str, Any] | None = None


class ChatReply(BaseModel):
    response: str
    sessionId: str
    timestamp: str


class ChatContextInfo(BaseModel):
    name: str
    description: str
    parameters: list[str]


class ChatContexts(BaseModel):
    contexts: list[ChatContextInfo]


class ExtractRequest(BaseModel):
    content: str = PydanticField(min_length=1)


# Generic envelope

class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


class Message(BaseModel):
    success: bool = True
    message: str
