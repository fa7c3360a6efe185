# tests/conftest.py
import pytest
from faker import Faker
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.infrastructure.db.session import Base
from app.infrastructure.models import User
from app.infrastructure.repositories.assignment_repo import AssignmentRepo
from app.infrastructure.repositories.bid_repo import BidRepo
from app.infrastructure.repositories.signup_repo import SignUpRepo
from app.infrastructure.repositories.team_repo import TeamRepo
from app.infrastructure.repositories.topic_repo import TopicRepo

FAKE = Faker()


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


class Seed:
    """Builds assignments, topics, users, teams and bids through the repositories."""

    def __init__(self, db):
        self.db = db

    def assignment(self, max_team_size: int = 4, is_intelligent: bool = True):
        return AssignmentRepo(self.db).create(FAKE.catch_phrase(), max_team_size, is_intelligent)

    def topic(self, assignment, max_choosers: int = 1):
        return TopicRepo(self.db).create(assignment.id, FAKE.bs(), max_choosers)

    def users(self, n: int):
        users = [User(username=FAKE.user_name()) for _ in range(n)]
        self.db.add_all(users)
        self.db.commit()
        return users

    def team(self, assignment, users, bids=None):
        """bids: {topic: priority}"""
        team = TeamRepo(self.db).create(assignment.id, FAKE.color_name(), [u.id for u in users])
        for topic, priority in (bids or {}).items():
            BidRepo(self.db).create(team.id, topic.id, priority)
        return team

    def signup(self, team, topic, is_waitlisted: bool = False):
        return SignUpRepo(self.db).create(team.id, topic.id, is_waitlisted)


@pytest.fixture
def seed(db):
    return Seed(db)


class StubTeamBuilder:
    """Stands in for the team builder web service; records what it was sent."""

    def __init__(self, teams=None, error=None):
        self.teams = teams or []
        self.error = error
        self.calls = []

    def __call__(self, bidding_data):
        self.calls.append(bidding_data)
        if self.error:
            raise self.error
        return self.teams


@pytest.fixture
def make_team_builder():
    return StubTeamBuilder
