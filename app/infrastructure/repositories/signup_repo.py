from app.infrastructure.db.session import SessionLocal
from app.infrastructure.models import SignedUpTeam
from sqlalchemy import func
from typing import Dict, List, Set

class SignUpRepo:
    def __init__(self, db=None):
        self.db = db or SessionLocal()

    def create(self, team_id: int, topic_id: int, is_waitlisted: bool = False) -> SignedUpTeam:
        s = SignedUpTeam(team_id=team_id, topic_id=topic_id, is_waitlisted=is_waitlisted)
        self.db.add(s)
        self.db.commit()
        self.db.refresh(s)
        return s

    def confirmed_team_ids(self, team_ids: List[int]) -> Set[int]:
        """Teams among `team_ids` holding a slot (not waitlisted)."""
        if not team_ids:
            return set()
        rows = (
            self.db.query(SignedUpTeam.team_id)
            .filter(SignedUpTeam.team_id.in_(team_ids), SignedUpTeam.is_waitlisted.is_(False))
            .distinct()
            .all()
        )
        return {team_id for (team_id,) in rows}

    def signed_up_team_ids(self, team_ids: List[int]) -> Set[int]:
        """Teams among `team_ids` with any sign-up record, confirmed or waitlisted."""
        if not team_ids:
            return set()
        rows = (
            self.db.query(SignedUpTeam.team_id)
            .filter(SignedUpTeam.team_id.in_(team_ids))
            .distinct()
            .all()
        )
        return {team_id for (team_id,) in rows}

    def committed_counts(self, topic_ids: List[int]) -> Dict[int, int]:
        """Number of confirmed teams per topic."""
        if not topic_ids:
            return {}
        rows = (
            self.db.query(SignedUpTeam.topic_id, func.count(SignedUpTeam.id))
            .filter(SignedUpTeam.topic_id.in_(topic_ids), SignedUpTeam.is_waitlisted.is_(False))
            .group_by(SignedUpTeam.topic_id)
            .all()
        )
        return {topic_id: count for topic_id, count in rows}

    def list_by_topic(self, topic_id: int) -> List[SignedUpTeam]:
        return self.db.query(SignedUpTeam).filter(SignedUpTeam.topic_id == topic_id).all()
