import json
import logging
import math
import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import case, delete, func, or_
from sqlalchemy import String, cast
from sqlmodel import Session, col, select

from app.core.errors import ValidationFailed
from app.models import (
    Comment,
    CommentPublic,
    CommentsPage,
    CommentWithReplies,
    Project,
    ProjectCreate,
    ProjectPublic,
    ProjectsPage,
    ProjectUpdate,
    PublicProjectFilters,
    SearchParams,
    Vote,
    VoteResult,
    get_datetime_utc,
)

logger = logging.getLogger(__name__)

VOTE_UP = 1
VOTE_DOWN = -1


def _page_window(page: int, limit: int) -> tuple[int, int, int]:
    page = max(page, 1)
    limit = max(limit, 1)
    return page, limit, (page - 1) * limit


def _total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def _vote_counts():
    return (
        select(
            col(Vote.project_id).label("project_id"),
            func.sum(case((col(Vote.vote_type) == VOTE_UP, 1), else_=0)).label("upvotes"),
            func.sum(case((col(Vote.vote_type) == VOTE_DOWN, 1), else_=0)).label("downvotes"),
        )
        .group_by(col(Vote.project_id))
        .subquery()
    )


def _projects_with_votes(*conditions: Any):
    counts = _vote_counts()
    upvotes = func.coalesce(counts.c.upvotes, 0)
    downvotes = func.coalesce(counts.c.downvotes, 0)
    statement = (
        select(Project, upvotes.label("upvotes"), downvotes.label("downvotes"))
        .outerjoin(counts, counts.c.project_id == Project.id)
        .where(*conditions)
    )
    return statement, upvotes, downvotes


def _count_projects(session: Session, *conditions: Any) -> int:
    statement = select(func.count()).select_from(Project).where(*conditions)
    return session.exec(statement).one()


def _user_votes(session: Session, user_id: str | None, project_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, int]:
    if not user_id or not project_ids:
        return {}
    statement = select(Vote).where(Vote.user_id == user_id, col(Vote.project_id).in_(project_ids))
    return {vote.project_id: vote.vote_type for vote in session.exec(statement).all()}


def _to_public(
    project: Project,
    upvotes: int = 0,
    downvotes: int = 0,
    user_vote: int | None = None,
) -> ProjectPublic:
    return ProjectPublic(
        **project.model_dump(),
        upvotes=int(upvotes or 0),
        downvotes=int(downvotes or 0),
        user_vote=user_vote,
    )


PUBLIC_SORT_FIELDS = ("created_at", "updated_at", "name", "upvotes", "downvotes", "score")


def _sort_column(sort_by: str, upvotes: Any, downvotes: Any) -> Any:
    columns = {
        "created_at": col(Project.created_at),
        "updated_at": col(Project.updated_at),
        "name": col(Project.name),
        "upvotes": upvotes,
        "downvotes": downvotes,
        "score": upvotes - downvotes,
    }
    return columns.get(sort_by, col(Project.created_at))


def _page_of_projects(
    session: Session,
    conditions: list[Any],
    *,
    page: int,
    limit: int,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    viewer_id: str | None = None,
) -> ProjectsPage:
    page, limit, offset = _page_window(page, limit)
    statement, upvotes, downvotes = _projects_with_votes(*conditions)
    sort_column = _sort_column(sort_by, upvotes, downvotes)
    ordering = sort_column.asc() if sort_order == "asc" else sort_column.desc()
    statement = statement.order_by(ordering, col(Project.created_at).desc())
    rows = session.exec(statement.offset(offset).limit(limit)).all()

    votes = _user_votes(session, viewer_id, [project.id for project, _, _ in rows])
    total = _count_projects(session, *conditions)
    return ProjectsPage(
        projects=[_to_public(project, up, down, votes.get(project.id)) for project, up, down in rows],
        total=total,
        page=page,
        totalPages=_total_pages(total, limit),
    )


def _search_condition(term: str):
    pattern = f"%{term}%"
    return or_(col(Project.name).ilike(pattern), col(Project.description).ilike(pattern))


def create_project(*, session: Session, project_in: ProjectCreate, owner_id: str) -> ProjectPublic:
    """New projects always start as private ideas."""
    db_project = Project.model_validate(
        project_in.model_dump(),
        update={"user_id": owner_id, "status": "idea", "is_public": False},
    )
    session.add(db_project)
    session.commit()
    session.refresh(db_project)
    logger.info("Created project %s for user %s", db_project.id, owner_id)
    return _to_public(db_project)


def get_project(*, session: Session, project_id: uuid.UUID) -> Project | None:
    return session.get(Project, project_id)


def get_user_projects(
    *, session: Session, user_id: str, page: int = 1, limit: int = 10
) -> ProjectsPage:
    return _page_of_projects(
        session,
        [Project.user_id == user_id],
        page=page,
        limit=limit,
        viewer_id=user_id,
    )


def get_public_projects(
    *,
    session: Session,
    page: int = 1,
    limit: int = 12,
    filters: PublicProjectFilters | None = None,
    viewer_id: str | None = None,
) -> ProjectsPage:
    filters = filters or PublicProjectFilters()
    conditions: list[Any] = [col(Project.is_public).is_(True)]
    if filters.category:
        conditions.append(Project.category == filters.category)
    if filters.difficulty:
        conditions.append(Project.difficulty == filters.difficulty)
    if filters.search:
        conditions.append(_search_condition(filters.search))

    sort_by = filters.sort_by if filters.sort_by in PUBLIC_SORT_FIELDS else "created_at"
    return _page_of_projects(
        session,
        conditions,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=filters.sort_order,
        viewer_id=viewer_id,
    )


def search_projects(
    *,
    session: Session,
    params: SearchParams,
    page: int = 1,
    limit: int = 10,
    viewer_id: str | None = None,
) -> ProjectsPage:
    """Public projects, plus the viewer's own private ones, matching every given filter."""
    visibility = col(Project.is_public).is_(True)
    if viewer_id:
        visibility = or_(visibility, Project.user_id == viewer_id)
    conditions: list[Any] = [visibility]

    if params.category:
        conditions.append(Project.category == params.category)
    if params.difficulty:
        conditions.append(Project.difficulty == params.difficulty)
    if params.search:
        conditions.append(_search_condition(params.search))
    if params.is_public is not None:
        conditions.append(col(Project.is_public).is_(params.is_public))
    for tech in params.tech_stack or []:
        tech = tech.strip()
        if tech:
            # Stored arrays go through json.dumps, so match the element encoded the same way.
            conditions.append(cast(Project.tech_stack, String).contains(json.dumps(tech), autoescape=True))

    return _page_of_projects(session, conditions, page=page, limit=limit, viewer_id=viewer_id)


def get_vote_summary(*, session: Session, project_id: uuid.UUID) -> tuple[int, int]:
    counts = _vote_counts()
    row = session.exec(
        select(counts.c.upvotes, counts.c.downvotes).where(counts.c.project_id == project_id)
    ).first()
    if row is None:
        return 0, 0
    upvotes, downvotes = row
    return int(upvotes or 0), int(downvotes or 0)


def get_project_by_id(
    *, session: Session, project_id: uuid.UUID, user_id: str | None = None
) -> ProjectPublic | None:
    project = session.get(Project, project_id)
    if not project:
        return None
    upvotes, downvotes = get_vote_summary(session=session, project_id=project_id)
    user_vote = _user_votes(session, user_id, [project_id]).get(project_id)
    return _to_public(project, upvotes, downvotes, user_vote)


def _owned_project(session: Session, project_id: uuid.UUID, user_id: str) -> Project | None:
    statement = select(Project).where(Project.id == project_id, Project.user_id == user_id)
    return session.exec(statement).first()


def update_project(
    *, session: Session, project_id: uuid.UUID, project_in: ProjectUpdate, user_id: str
) -> ProjectPublic | None:
    """Returns None when the project does not exist or belongs to someone else."""
    db_project = _owned_project(session, project_id, user_id)
    if not db_project:
        return None
    update_data = project_in.model_dump(exclude_unset=True, exclude_none=True)
    db_project.sqlmodel_update(update_data, update={"updated_at": get_datetime_utc()})
    session.add(db_project)
    session.commit()
    session.refresh(db_project)
    return get_project_by_id(session=session, project_id=project_id, user_id=user_id)


def delete_project(*, session: Session, project_id: uuid.UUID, user_id: str) -> bool:
    db_project = _owned_project(session, project_id, user_id)
    if not db_project:
        return False
    session.exec(delete(Comment).where(Comment.project_id == project_id, col(Comment.parent_id).is_not(None)))  # type: ignore
    session.exec(delete(Comment).where(Comment.project_id == project_id))  # type: ignore
    session.exec(delete(Vote).where(Vote.project_id == project_id))  # type: ignore
    session.delete(db_project)
    session.commit()
    logger.info("Deleted project %s", project_id)
    return True


def vote_project(
    *, session: Session, project_id: uuid.UUID, user_id: str, vote_type: int
) -> VoteResult:
    """
    Cast, switch or withdraw a vote. Repeating the same vote removes it.
    Check-then-act without locking: concurrent votes by one user may race.
    """
    statement = select(Vote).where(Vote.project_id == project_id, Vote.user_id == user_id)
    existing = session.exec(statement).first()

    if existing and existing.vote_type == vote_type:
        session.delete(existing)
        action, user_vote = "removed", None
    elif existing:
        existing.vote_type = vote_type
        session.add(existing)
        action, user_vote = "updated", vote_type
    else:
        session.add(Vote(project_id=project_id, user_id=user_id, vote_type=vote_type))
        action, user_vote = "created", vote_type
    session.commit()

    upvotes, downvotes = get_vote_summary(session=session, project_id=project_id)
    return VoteResult(
        action=action,
        voteType=vote_type,
        upvotes=upvotes,
        downvotes=downvotes,
        userVote=user_vote,
    )


def add_comment(
    *,
    session: Session,
    project_id: uuid.UUID,
    user_id: str,
    content: str,
    parent_id: uuid.UUID | None = None,
    author_email: str | None = None,
) -> CommentPublic:
    if parent_id is not None:
        parent = session.get(Comment, parent_id)
        if not parent or parent.project_id != project_id:
            raise ValidationFailed("Parent comment not found on this project")
        if parent.parent_id is not None:
            raise ValidationFailed("Replies can only be added to top-level comments")

    db_comment = Comment(
        project_id=project_id,
        user_id=user_id,
        author_email=author_email,
        content=content,
        parent_id=parent_id,
    )
    session.add(db_comment)
    session.commit()
    session.refresh(db_comment)
    return CommentPublic.model_validate(db_comment)


def get_project_comments(
    *, session: Session, project_id: uuid.UUID, page: int = 1, limit: int = 20
) -> CommentsPage:
    """Top-level comments newest first, each with its direct replies oldest first."""
    page, limit, offset = _page_window(page, limit)
    top_level = (Comment.project_id == project_id, col(Comment.parent_id).is_(None))

    comments = session.exec(
        select(Comment)
        .where(*top_level)
        .order_by(col(Comment.created_at).desc())
        .offset(offset)
        .limit(limit)
    ).all()
    total = session.exec(select(func.count()).select_from(Comment).where(*top_level)).one()

    replies_by_parent: dict[uuid.UUID, list[CommentPublic]] = {}
    if comments:
        replies = session.exec(
            select(Comment)
            .where(col(Comment.parent_id).in_([comment.id for comment in comments]))
            .order_by(col(Comment.created_at).asc())
        ).all()
        for reply in replies:
            replies_by_parent.setdefault(reply.parent_id, []).append(CommentPublic.model_validate(reply))

    return CommentsPage(
        comments=[
            CommentWithReplies(
                **CommentPublic.model_validate(comment).model_dump(),
                replies=replies_by_parent.get(comment.id, []),
            )
            for comment in comments
        ],
        total=total,
        page=page,
        totalPages=_total_pages(total, limit),
    )
