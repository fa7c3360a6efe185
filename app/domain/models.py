from pydantic import BaseModel, Field
from typing import List
from enum import Enum


class UserBidding(BaseModel):
    pid: int
    ranks: List[int] = Field(default_factory=list)

class BiddingData(BaseModel):
    users: List[UserBidding] = Field(default_factory=list)
    max_team_size: int

class TeamSnapshot(BaseModel):
    id: int
    member_ids: List[int] = Field(default_factory=list)

class TopicBid(BaseModel):
    topic_id: int
    priority: int

class TeamBidding(BaseModel):
    team_id: int
    size: int
    bids: List[TopicBid] = Field(default_factory=list)

class SlotAssignment(BaseModel):
    team_id: int
    topic_id: int

class AllocationState(str, Enum):
    """Stages of a team assignment run."""
    BUILDING_PROFILE = "building_profile"
    AWAITING_ORACLE = "awaiting_oracle"
    FORMING_TEAMS = "forming_teams"
    RANKING_TEAMS = "ranking_teams"
    ALLOCATING_SLOTS = "allocating_slots"
    DONE = "done"
    FAILED = "failed"

class AllocationReport(BaseModel):
    assignment_id: int
    state: AllocationState
    new_team_ids: List[int] = Field(default_factory=list)
    removed_team_ids: List[int] = Field(default_factory=list)
    assignments: List[SlotAssignment] = Field(default_factory=list)
    unassigned_team_ids: List[int] = Field(default_factory=list)
