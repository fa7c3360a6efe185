from app.infrastructure.db.session import SessionLocal
from app.infrastructure.models import Assignment
from typing import Optional

class AssignmentRepo:
    def __init__(self, db=None):
        self.db = db or SessionLocal()

    def create(self, name: str, max_team_size: int, is_intelligent: bool = False) -> Assignment:
        a = Assignment(name=name, max_team_size=max_team_size, is_intelligent=is_intelligent)
        self.db.add(a)
        self.db.commit()
        self.db.refresh(a)
        return a

    def get(self, assignment_id: int) -> Optional[Assignment]:
        return self.db.query(Assignment).filter(Assignment.id == assignment_id).first()

    def clear_intelligent(self, assignment: Assignment) -> Assignment:
        assignment.is_intelligent = False
        self.db.add(assignment)
        self.db.commit()
        self.db.refresh(assignment)
        return assignment
