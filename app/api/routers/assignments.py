# app/api/routers/assignments.py
"""
Assignment endpoints: run team formation and topic allocation, list teams.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.adapters.team_builder_client import TeamBuilderClient
from app.domain.errors import AssignmentNotFound, OraclePreconditionViolation, OracleUnavailable
from app.domain.grouping import TeamBuilder
from app.domain.models import AllocationReport
from app.infrastructure.db.session import get_db
from app.infrastructure.repositories.assignment_repo import AssignmentRepo
from app.infrastructure.repositories.team_repo import TeamRepo
from app.services.team_assignment_service import TeamAssignmentService

router = APIRouter()


def get_team_builder() -> TeamBuilder:
    return TeamBuilderClient()


@router.post("/{assignment_id}/assign_teams", response_model=AllocationReport,
             summary="Form teams from bids and assign topics to them")
def assign_teams(assignment_id: int, db: Session = Depends(get_db),
                 team_builder: TeamBuilder = Depends(get_team_builder)):
    service = TeamAssignmentService(db, team_builder)
    try:
        return service.assign_teams_to_topics(assignment_id)
    except AssignmentNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OraclePreconditionViolation as e:
        raise HTTPException(status_code=409, detail=str(e))
    except OracleUnavailable as e:
        raise HTTPException(status_code=502, detail={"error": str(e), "payload": e.payload})


@router.get("/{assignment_id}/teams", summary="List teams with members, bids and topics")
def list_teams(assignment_id: int, db: Session = Depends(get_db)):
    if not AssignmentRepo(db).get(assignment_id):
        raise HTTPException(status_code=404, detail="assignment not found")
    teams = TeamRepo(db).list_by_assignment(assignment_id)
    return {
        "assignment_id": assignment_id,
        "teams": [
            {
                "id": t.id,
                "name": t.name,
                "members": t.member_ids,
                "bids": [{"topic_id": b.topic_id, "priority": b.priority}
                         for b in sorted(t.bids, key=lambda b: (b.priority, b.topic_id))],
                "topics": [{"topic_id": s.topic_id, "is_waitlisted": s.is_waitlisted} for s in t.signups],
            }
            for t in teams
        ],
    }
