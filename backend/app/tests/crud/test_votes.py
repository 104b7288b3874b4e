import pytest
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app import crud
from app.models import Vote
from app.tests.conftest import make_project_in


@pytest.fixture
def project(session: Session):
    return crud.create_project(session=session, project_in=make_project_in(), owner_id="alice")


def test_first_vote_is_created(session: Session, project):
    result = crud.vote_project(session=session, project_id=project.id, user_id="bob", vote_type=1)

    assert result.action == "created"
    assert result.voteType == 1
    assert (result.upvotes, result.downvotes) == (1, 0)
    assert result.userVote == 1


def test_same_vote_twice_removes_it(session: Session, project):
    crud.vote_project(session=session, project_id=project.id, user_id="bob", vote_type=1)
    result = crud.vote_project(session=session, project_id=project.id, user_id="bob", vote_type=1)

    assert result.action == "removed"
    assert result.userVote is None
    assert (result.upvotes, result.downvotes) == (0, 0)
    assert session.exec(select(Vote)).all() == []


def test_opposite_vote_updates_in_place(session: Session, project):
    crud.vote_project(session=session, project_id=project.id, user_id="carol", vote_type=1)
    after_first = crud.vote_project(session=session, project_id=project.id, user_id="bob", vote_type=1)
    switched = crud.vote_project(session=session, project_id=project.id, user_id="bob", vote_type=-1)

    assert switched.action == "updated"
    assert switched.userVote == -1
    assert switched.upvotes == after_first.upvotes - 1
    assert switched.downvotes == after_first.downvotes + 1
    assert session.exec(select(func.count()).select_from(Vote)).one() == 2


def test_aggregates_match_vote_rows(session: Session, project):
    for user_id, vote_type in (("u1", 1), ("u2", 1), ("u3", -1), ("u4", 1)):
        crud.vote_project(session=session, project_id=project.id, user_id=user_id, vote_type=vote_type)

    assert crud.get_vote_summary(session=session, project_id=project.id) == (3, 1)

    stored = crud.get_project_by_id(session=session, project_id=project.id)
    assert stored is not None
    assert (stored.upvotes, stored.downvotes) == (3, 1)


def test_one_vote_row_per_user(session: Session, project):
    session.add(Vote(project_id=project.id, user_id="bob", vote_type=1))
    session.commit()
    session.add(Vote(project_id=project.id, user_id="bob", vote_type=-1))

    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()
