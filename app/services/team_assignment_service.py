# app/services/team_assignment_service.py
"""
Forms teams from users' topic bids and assigns topics to them.

A run walks through the AllocationState stages:
build the bidding profile, ask the team builder for teams, create those teams
with merged bids, drop teams left empty, rank the unassigned teams and give
each the most preferred topic that still has a free slot.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Dict, List

from sqlalchemy.orm import Session

from app.domain import allocation, bidding
from app.domain.errors import AssignmentNotFound, MalformedOracleResponse, OraclePreconditionViolation
from app.domain.grouping import TeamBuilder, duplicated_user_ids
from app.domain.models import AllocationReport, AllocationState, BiddingData, TeamSnapshot
from app.infrastructure.repositories.assignment_repo import AssignmentRepo
from app.infrastructure.repositories.bid_repo import BidRepo
from app.infrastructure.repositories.signup_repo import SignUpRepo
from app.infrastructure.repositories.team_repo import TeamRepo
from app.infrastructure.repositories.topic_repo import TopicRepo

logger = logging.getLogger(__name__)

# assignment_id -> [lock, number of runs holding or waiting for it]
_run_locks: Dict[int, list] = {}
_run_locks_guard = threading.Lock()


@contextmanager
def assignment_run_lock(assignment_id: int):
    """Serialize runs for the same assignment. Different assignments run freely."""
    with _run_locks_guard:
        entry = _run_locks.setdefault(assignment_id, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _run_locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                del _run_locks[assignment_id]


class TeamAssignmentService:
    def __init__(
        self,
        db: Session,
        team_builder: TeamBuilder,
        assignment_repo: AssignmentRepo = None,
        team_repo: TeamRepo = None,
        topic_repo: TopicRepo = None,
        bid_repo: BidRepo = None,
        signup_repo: SignUpRepo = None,
    ):
        self.db = db
        self.team_builder = team_builder
        self.assignment_repo = assignment_repo or AssignmentRepo(db)
        self.team_repo = team_repo or TeamRepo(db)
        self.topic_repo = topic_repo or TopicRepo(db)
        self.bid_repo = bid_repo or BidRepo(db)
        self.signup_repo = signup_repo or SignUpRepo(db)
        self.state = None

    def _transition(self, state: AllocationState):
        logger.debug(f"Team assignment: {self.state} -> {state}")
        self.state = state

    def assign_teams_to_topics(self, assignment_id: int) -> AllocationReport:
        """
        Run team formation and topic allocation for one assignment.
        Raises AssignmentNotFound, OracleUnavailable or OraclePreconditionViolation.
        Any error marks the run FAILED and is re-raised unchanged.
        """
        with assignment_run_lock(assignment_id):
            assignment = self.assignment_repo.get(assignment_id)
            if not assignment:
                raise AssignmentNotFound(assignment_id)
            # another run may have changed the row while this one waited
            self.db.refresh(assignment)

            report = AllocationReport(assignment_id=assignment_id, state=AllocationState.BUILDING_PROFILE)
            self.state = None
            try:
                self._transition(AllocationState.BUILDING_PROFILE)
                topic_ids = [t.id for t in self.topic_repo.list_offered(assignment_id)]
                bidding_data = self.generate_bidding_data(assignment_id, topic_ids, assignment.max_team_size)

                self._transition(AllocationState.AWAITING_ORACLE)
                teams_response = self.fetch_teams(bidding_data)

                self._transition(AllocationState.FORMING_TEAMS)
                report.new_team_ids = self.create_new_teams(assignment_id, topic_ids, teams_response, bidding_data)
                report.removed_team_ids = self.team_repo.remove_empty(assignment_id)
                if report.removed_team_ids:
                    logger.info(f"Removed empty teams {report.removed_team_ids}")

                self._transition(AllocationState.RANKING_TEAMS)
                if not assignment.is_intelligent:
                    raise OraclePreconditionViolation(
                        f"This action is not allowed. The assignment {assignment.name} "
                        "does not enable intelligent assignments."
                    )
                ranked = self.rank_unassigned_teams(assignment_id, topic_ids)

                self._transition(AllocationState.ALLOCATING_SLOTS)
                report.assignments = self.assign_available_slots(ranked, topic_ids)
                assigned = {a.team_id for a in report.assignments}
                report.unassigned_team_ids = [t.team_id for t in ranked if t.team_id not in assigned]
                # revert to the default sign-up behaviour for future runs
                self.assignment_repo.clear_intelligent(assignment)

                self._transition(AllocationState.DONE)
            except Exception:
                self.db.rollback()
                logger.exception(f"Team assignment failed for assignment {assignment_id} in state {self.state}")
                self._transition(AllocationState.FAILED)
                raise

            report.state = self.state
            logger.info(
                f"Assignment {assignment_id}: {len(report.new_team_ids)} teams formed, "
                f"{len(report.assignments)} topics assigned, {len(report.unassigned_team_ids)} teams unassigned"
            )
            return report

    def _team_snapshots(self, assignment_id: int) -> List[TeamSnapshot]:
        return [
            TeamSnapshot(id=team_id, member_ids=member_ids)
            for team_id, member_ids in self.team_repo.member_ids_by_team(assignment_id).items()
        ]

    def generate_bidding_data(self, assignment_id: int, topic_ids: List[int], max_team_size: int) -> BiddingData:
        teams = self._team_snapshots(assignment_id)
        team_ids = [t.id for t in teams]
        priorities = self.bid_repo.priorities_for(team_ids, topic_ids)
        confirmed = self.signup_repo.confirmed_team_ids(team_ids)
        return bidding.generate_bidding_data(topic_ids, teams, priorities, confirmed, max_team_size)

    def fetch_teams(self, bidding_data: BiddingData) -> List[List[int]]:
        if not bidding_data.users:
            logger.info("No user expressed a topic preference, skipping team builder")
            return []
        teams_response = self.team_builder(bidding_data)
        duplicated = duplicated_user_ids(teams_response)
        if duplicated:
            raise MalformedOracleResponse(
                f"Team builder placed users {duplicated} in more than one team", teams_response
            )
        return teams_response

    def create_new_teams(
        self, assignment_id: int, topic_ids: List[int], teams_response: List[List[int]], bidding_data: BiddingData
    ) -> List[int]:
        created = []
        for user_ids in teams_response:
            if not user_ids:
                continue
            team = self.team_repo.create_with_users(assignment_id, user_ids)
            member_ranks = bidding.select_member_ranks(user_ids, bidding_data.users, len(topic_ids))
            merged = bidding.merge_bids_from_different_users(topic_ids, member_ranks)
            self.bid_repo.create_many(team.id, merged)
            logger.info(f"Created team {team.id} with users {user_ids} and {len(merged)} bids")
            created.append(team.id)
        return created

    def rank_unassigned_teams(self, assignment_id: int, topic_ids: List[int]):
        teams = self._team_snapshots(assignment_id)
        team_ids = [t.id for t in teams]
        signed_up = self.signup_repo.signed_up_team_ids(team_ids)
        unassigned = [t for t in teams if t.id not in signed_up]
        priorities = self.bid_repo.priorities_for([t.id for t in unassigned], topic_ids)
        teams_bidding_info = allocation.construct_teams_bidding_info(unassigned, topic_ids, priorities)
        return allocation.rank_teams(teams_bidding_info)

    def assign_available_slots(self, ranked, topic_ids: List[int]):
        ledger = allocation.CapacityLedger(
            capacity=self.topic_repo.capacities(topic_ids),
            committed=self.signup_repo.committed_counts(topic_ids),
        )
        assignments, _ = allocation.assign_available_slots(ranked, ledger)
        for a in assignments:
            self.signup_repo.create(a.team_id, a.topic_id)
            logger.debug(f"Team {a.team_id} signed up for topic {a.topic_id}")
        return assignments
