from app.infrastructure.db.session import SessionLocal
from app.infrastructure.models import SignUpTopic
from typing import Dict, List

class TopicRepo:
    def __init__(self, db=None):
        self.db = db or SessionLocal()

    def create(self, assignment_id: int, topic_name: str, max_choosers: int) -> SignUpTopic:
        t = SignUpTopic(assignment_id=assignment_id, topic_name=topic_name, max_choosers=max_choosers)
        self.db.add(t)
        self.db.commit()
        self.db.refresh(t)
        return t

    def list_by_assignment(self, assignment_id: int) -> List[SignUpTopic]:
        return (
            self.db.query(SignUpTopic)
            .filter(SignUpTopic.assignment_id == assignment_id)
            .order_by(SignUpTopic.id)
            .all()
        )

    def list_offered(self, assignment_id: int) -> List[SignUpTopic]:
        """Topics with at least one slot, in id order."""
        return (
            self.db.query(SignUpTopic)
            .filter(SignUpTopic.assignment_id == assignment_id, SignUpTopic.max_choosers > 0)
            .order_by(SignUpTopic.id)
            .all()
        )

    def capacities(self, topic_ids: List[int]) -> Dict[int, int]:
        if not topic_ids:
            return {}
        rows = (
            self.db.query(SignUpTopic.id, SignUpTopic.max_choosers)
            .filter(SignUpTopic.id.in_(topic_ids))
            .all()
        )
        return {topic_id: max_choosers for topic_id, max_choosers in rows}
