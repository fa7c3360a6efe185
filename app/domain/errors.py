# app/domain/errors.py
"""
Errors raised by a team assignment run.

Every fatal condition stops the run and reaches the caller as one of these.
Topics without a capacity record and teams without preferences are not errors.
"""
from typing import Any, Optional


class TeamAssignmentError(Exception):
    """Base class for failures of a team assignment run."""


class AssignmentNotFound(TeamAssignmentError):
    def __init__(self, assignment_id: int):
        super().__init__(f"Assignment {assignment_id} not found")
        self.assignment_id = assignment_id


class OracleUnavailable(TeamAssignmentError):
    """The team builder web service could not be reached or answered with an error."""

    def __init__(self, message: str, payload: Optional[Any] = None):
        if payload is not None:
            message = f"{message}: {payload}"
        super().__init__(message)
        self.payload = payload


class MalformedOracleResponse(OracleUnavailable):
    """The team builder answered, but not with a list of teams."""


class OraclePreconditionViolation(TeamAssignmentError):
    """Topic allocation was requested for an assignment that did not opt in."""
