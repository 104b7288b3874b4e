import logging
import uuid
from typing import Any

from fastapi import APIRouter, Query

from app import crud
from app.api.deps import CurrentUser, OptionalUser, SessionDep
from app.api.handlers import reported_as
from app.core.errors import NotFound
from app.models import (
    ApiResponse,
    Difficulty,
    Message,
    ProjectCreate,
    ProjectPublic,
    ProjectsPage,
    ProjectUpdate,
    SearchParams,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=ApiResponse[ProjectPublic])
def create_new_project(
    *, session: SessionDep, current_user: CurrentUser, project_in: ProjectCreate
) -> Any:
    logger.info("create_project - start (user=%s)", current_user.id)
    with reported_as("Failed to create project"):
        project = crud.create_project(session=session, project_in=project_in, owner_id=current_user.id)
    return ApiResponse(message="Project created successfully", data=project)


@router.get("", response_model=ApiResponse[ProjectsPage])
def read_projects(
    session: SessionDep,
    current_user: CurrentUser,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> Any:
    with reported_as("Failed to retrieve projects"):
        projects = crud.get_user_projects(
            session=session, user_id=current_user.id, page=page, limit=limit
        )
    return ApiResponse(message="Projects retrieved successfully", data=projects)


@router.get("/search", response_model=ApiResponse[ProjectsPage])
def search_projects(
    session: SessionDep,
    current_user: OptionalUser,
    category: str | None = None,
    difficulty: Difficulty | None = None,
    search: str | None = None,
    techStack: str | None = Query(default=None, description="Comma separated technologies"),
    isPublic: bool | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> Any:
    params = SearchParams(
        category=category,
        difficulty=difficulty,
        search=search,
        tech_stack=[tech.strip() for tech in techStack.split(",") if tech.strip()] if techStack else None,
        is_public=isPublic,
    )
    with reported_as("Failed to search projects"):
        projects = crud.search_projects(
            session=session,
            params=params,
            page=page,
            limit=limit,
            viewer_id=current_user.id if current_user else None,
        )
    return ApiResponse(message="Projects searched successfully", data=projects)


@router.get("/{id}", response_model=ApiResponse[ProjectPublic])
def read_project(id: uuid.UUID, session: SessionDep, current_user: OptionalUser) -> Any:
    viewer_id = current_user.id if current_user else None
    with reported_as("Failed to retrieve project"):
        project = crud.get_project_by_id(session=session, project_id=id, user_id=viewer_id)
    if not project or (not project.is_public and project.user_id != viewer_id):
        raise NotFound("Project not found")
    return ApiResponse(message="Project retrieved successfully", data=project)


@router.put("/{id}", response_model=ApiResponse[ProjectPublic])
def update_project(
    *, id: uuid.UUID, session: SessionDep, current_user: CurrentUser, project_in: ProjectUpdate
) -> Any:
    with reported_as("Failed to update project"):
        project = crud.update_project(
            session=session, project_id=id, project_in=project_in, user_id=current_user.id
        )
    if not project:
        raise NotFound("Project not found or you do not have permission to update it")
    logger.info("update_project - success (project=%s)", id)
    return ApiResponse(message="Project updated successfully", data=project)


@router.delete("/{id}", response_model=Message)
def delete_project(id: uuid.UUID, session: SessionDep, current_user: CurrentUser) -> Message:
    with reported_as("Failed to delete project"):
        deleted = crud.delete_project(session=session, project_id=id, user_id=current_user.id)
    if not deleted:
        raise NotFound("Project not found or you do not have permission to delete it")
    return Message(message="Project deleted successfully")
