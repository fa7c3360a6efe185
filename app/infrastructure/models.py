# app/infrastructure/models.py
"""
SQLAlchemy ORM models for topic bidding and team allocation.
"""
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from app.infrastructure.db.session import Base


def now():
    return datetime.now(timezone.utc)


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    max_team_size = Column(Integer, nullable=False, default=4)
    # set when topics should be allocated automatically from bids
    is_intelligent = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=now)

    # Relationships
    teams = relationship("Team", back_populates="assignment", order_by="Team.id")
    topics = relationship("SignUpTopic", back_populates="assignment", order_by="SignUpTopic.id")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(200), nullable=True)
    created_at = Column(DateTime, default=now)

    # Relationships
    team_memberships = relationship("TeamMember", back_populates="user")


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=now)

    # Relationships
    assignment = relationship("Assignment", back_populates="teams")
    members = relationship(
        "TeamMember", back_populates="team", order_by="TeamMember.id",
        cascade="all, delete-orphan",
    )
    bids = relationship("Bid", back_populates="team", cascade="all, delete-orphan")
    signups = relationship("SignedUpTeam", back_populates="team", cascade="all, delete-orphan")

    @property
    def member_ids(self):
        return [m.user_id for m in self.members]


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(Integer, primary_key=True)
    team_id = Column(Integer, ForeignKey("teams.id"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    joined_at = Column(DateTime, default=now)

    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="uq_team_member"),
    )

    # Relationships
    team = relationship("Team", back_populates="members")
    user = relationship("User", back_populates="team_memberships")


class SignUpTopic(Base):
    __tablename__ = "sign_up_topics"

    id = Column(Integer, primary_key=True)
    assignment_id = Column(Integer, ForeignKey("assignments.id"), index=True, nullable=False)
    topic_name = Column(String(300), nullable=False)
    max_choosers = Column(Integer, nullable=False, default=0)

    # Relationships
    assignment = relationship("Assignment", back_populates="topics")
    signups = relationship("SignedUpTeam", back_populates="topic")


class Bid(Base):
    __tablename__ = "bids"

    id = Column(Integer, primary_key=True)
    team_id = Column(Integer, ForeignKey("teams.id"), index=True, nullable=False)
    topic_id = Column(Integer, ForeignKey("sign_up_topics.id"), index=True, nullable=False)
    priority = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("team_id", "topic_id", name="uq_team_topic_bid"),
    )

    # Relationships
    team = relationship("Team", back_populates="bids")
    topic = relationship("SignUpTopic")


class SignedUpTeam(Base):
    __tablename__ = "signed_up_teams"

    id = Column(Integer, primary_key=True)
    team_id = Column(Integer, ForeignKey("teams.id"), index=True, nullable=False)
    topic_id = Column(Integer, ForeignKey("sign_up_topics.id"), index=True, nullable=False)
    is_waitlisted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=now)

    # Relationships
    team = relationship("Team", back_populates="signups")
    topic = relationship("SignUpTopic", back_populates="signups")
