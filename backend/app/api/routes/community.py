import logging
import uuid
from typing import Any

from fastapi import APIRouter, Query
from sqlmodel import Session

from app import crud
from app.api.deps import CurrentUser, OptionalUser, SessionDep
from app.api.handlers import reported_as
from app.core.errors import NotFound, ValidationFailed
from app.models import (
    ApiResponse,
    CommentCreate,
    CommentPublic,
    CommentsPage,
    Difficulty,
    Project,
    ProjectDetails,
    ProjectsPage,
    PublicProjectFilters,
    VoteCreate,
    VoteResult,
)

router = APIRouter()
logger = logging.getLogger(__name__)

COMMENT_MAX_LENGTH = 1000


def _visible_project(session: Session, project_id: uuid.UUID, viewer_id: str | None) -> Project:
    """Private projects only exist for their owner."""
    project = crud.get_project(session=session, project_id=project_id)
    if not project or (not project.is_public and project.user_id != viewer_id):
        raise NotFound("Project not found")
    return project


@router.get("/projects", response_model=ApiResponse[ProjectsPage])
def read_public_projects(
    session: SessionDep,
    current_user: OptionalUser,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
    category: str | None = None,
    difficulty: Difficulty | None = None,
    search: str | None = None,
    sortBy: str = "created_at",
    sortOrder: str = "desc",
) -> Any:
    filters = PublicProjectFilters(
        category=category,
        difficulty=difficulty,
        search=search,
        sort_by=sortBy,
        sort_order=sortOrder,
    )
    with reported_as("Failed to retrieve public projects"):
        projects = crud.get_public_projects(
            session=session,
            page=page,
            limit=limit,
            filters=filters,
            viewer_id=current_user.id if current_user else None,
        )
    return ApiResponse(message="Public projects retrieved successfully", data=projects)


@router.get("/projects/{project_id}", response_model=ApiResponse[ProjectDetails])
def read_project_details(
    project_id: uuid.UUID, session: SessionDep, current_user: OptionalUser
) -> Any:
    viewer_id = current_user.id if current_user else None
    with reported_as("Failed to retrieve project details"):
        _visible_project(session, project_id, viewer_id)
        project = crud.get_project_by_id(session=session, project_id=project_id, user_id=viewer_id)
        comments = crud.get_project_comments(session=session, project_id=project_id)
    return ApiResponse(
        message="Project details retrieved successfully",
        data=ProjectDetails(project=project, comments=comments.comments),
    )


@router.post("/projects/{project_id}/vote", response_model=ApiResponse[VoteResult])
def vote_on_project(
    project_id: uuid.UUID, vote_in: VoteCreate, session: SessionDep, current_user: CurrentUser
) -> Any:
    if vote_in.voteType not in (crud.VOTE_UP, crud.VOTE_DOWN):
        raise ValidationFailed("Vote type must be -1 (downvote) or 1 (upvote)")
    with reported_as("Failed to record vote"):
        _visible_project(session, project_id, current_user.id)
        result = crud.vote_project(
            session=session,
            project_id=project_id,
            user_id=current_user.id,
            vote_type=vote_in.voteType,
        )
    logger.info("vote_on_project - %s (project=%s, user=%s)", result.action, project_id, current_user.id)
    return ApiResponse(message="Vote recorded successfully", data=result)


@router.post(
    "/projects/{project_id}/comments",
    status_code=201,
    response_model=ApiResponse[CommentPublic],
)
def add_comment(
    project_id: uuid.UUID, comment_in: CommentCreate, session: SessionDep, current_user: CurrentUser
) -> Any:
    content = comment_in.content.strip()
    if not content:
        raise ValidationFailed("Comment content is required")
    if len(content) > COMMENT_MAX_LENGTH:
        raise ValidationFailed("Comment must be less than 1000 characters")

    with reported_as("Failed to add comment"):
        _visible_project(session, project_id, current_user.id)
        comment = crud.add_comment(
            session=session,
            project_id=project_id,
            user_id=current_user.id,
            content=content,
            parent_id=comment_in.parentId,
            author_email=current_user.email,
        )
    return ApiResponse(message="Comment added successfully", data=comment)


@router.get("/projects/{project_id}/comments", response_model=ApiResponse[CommentsPage])
def read_comments(
    project_id: uuid.UUID,
    session: SessionDep,
    current_user: OptionalUser,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> Any:
    with reported_as("Failed to retrieve comments"):
        _visible_project(session, project_id, current_user.id if current_user else None)
        comments = crud.get_project_comments(
            session=session, project_id=project_id, page=page, limit=limit
        )
    return ApiResponse(message="Comments retrieved successfully", data=comments)
