from app.infrastructure.db.session import SessionLocal
from app.infrastructure.models import Bid
from typing import Dict, List, Tuple

class BidRepo:
    def __init__(self, db=None):
        self.db = db or SessionLocal()

    def create(self, team_id: int, topic_id: int, priority: int) -> Bid:
        b = Bid(team_id=team_id, topic_id=topic_id, priority=priority)
        self.db.add(b)
        self.db.commit()
        self.db.refresh(b)
        return b

    def create_many(self, team_id: int, priorities: Dict[int, int]) -> List[Bid]:
        """One bid per topic in `priorities` ({topic_id: priority}) for the team."""
        bids = [Bid(team_id=team_id, topic_id=topic_id, priority=p) for topic_id, p in priorities.items()]
        self.db.add_all(bids)
        self.db.commit()
        return bids

    def list_by_team(self, team_id: int) -> List[Bid]:
        return self.db.query(Bid).filter(Bid.team_id == team_id).order_by(Bid.priority, Bid.topic_id).all()

    def priorities_for(self, team_ids: List[int], topic_ids: List[int]) -> Dict[Tuple[int, int], int]:
        """All bids of the given teams on the given topics, keyed by (team_id, topic_id)."""
        if not team_ids or not topic_ids:
            return {}
        rows = (
            self.db.query(Bid.team_id, Bid.topic_id, Bid.priority)
            .filter(Bid.team_id.in_(team_ids), Bid.topic_id.in_(topic_ids))
            .all()
        )
        return {(team_id, topic_id): priority for team_id, topic_id, priority in rows}
