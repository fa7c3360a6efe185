from app.infrastructure.db.session import SessionLocal
from app.infrastructure.models import Team, TeamMember
from sqlalchemy.sql import exists
from typing import Dict, List, Optional

class TeamRepo:
    def __init__(self, db=None):
        self.db = db or SessionLocal()

    def create(self, assignment_id: int, name: str, member_ids: List[int] = None) -> Team:
        t = Team(assignment_id=assignment_id, name=name)
        for uid in member_ids or []:
            t.members.append(TeamMember(user_id=uid))
        self.db.add(t)
        self.db.commit()
        self.db.refresh(t)
        return t

    def get(self, team_id: int) -> Optional[Team]:
        return self.db.query(Team).filter(Team.id == team_id).first()

    def list_by_assignment(self, assignment_id: int) -> List[Team]:
        return self.db.query(Team).filter(Team.assignment_id == assignment_id).order_by(Team.id).all()

    def member_ids_by_team(self, assignment_id: int) -> Dict[int, List[int]]:
        """{team_id: [user_id, ...]} for every team of the assignment, members in join order."""
        members = {team_id: [] for (team_id,) in (
            self.db.query(Team.id).filter(Team.assignment_id == assignment_id).order_by(Team.id).all()
        )}
        rows = (
            self.db.query(TeamMember.team_id, TeamMember.user_id)
            .join(Team, Team.id == TeamMember.team_id)
            .filter(Team.assignment_id == assignment_id)
            .order_by(TeamMember.id)
            .all()
        )
        for team_id, user_id in rows:
            members[team_id].append(user_id)
        return members

    def create_with_users(self, assignment_id: int, user_ids: List[int]) -> Team:
        """
        Create a team holding `user_ids`. Users leave whatever team they were in
        for the same assignment.
        """
        previous = (
            self.db.query(TeamMember)
            .join(Team, Team.id == TeamMember.team_id)
            .filter(Team.assignment_id == assignment_id, TeamMember.user_id.in_(user_ids))
            .all()
        )
        for m in previous:
            self.db.delete(m)
        self.db.flush()

        t = Team(assignment_id=assignment_id, name="")
        self.db.add(t)
        self.db.flush()
        t.name = f"Team_{t.id}"
        for uid in user_ids:
            self.db.add(TeamMember(team_id=t.id, user_id=uid))
        self.db.commit()
        self.db.refresh(t)
        return t

    def remove_empty(self, assignment_id: int) -> List[int]:
        """Delete teams of the assignment that have no members left. Returns their ids."""
        # member collections loaded before users moved teams are stale
        self.db.expire_all()
        empty = (
            self.db.query(Team)
            .filter(
                Team.assignment_id == assignment_id,
                ~exists().where(TeamMember.team_id == Team.id),
            )
            .order_by(Team.id)
            .all()
        )
        removed = [t.id for t in empty]
        for t in empty:
            self.db.delete(t)
        self.db.commit()
        return removed
