# app/adapters/team_builder_client.py
"""
HTTP adapter for the external team builder web service.

The service receives every unassigned user's topic priorities and the
assignment's maximum team size, and answers with users grouped into teams:

    request:  {"users": [{"pid": 1, "ranks": [1, 0, 2]}, ...], "max_team_size": 4}
    response: {"teams": [[1, 2], [3]]}

Configuration:
- TEAM_BUILDER_URL, TEAM_BUILDER_TIMEOUT (see app/config/settings.py)
"""

import logging
from typing import List

import requests
from pydantic import BaseModel, ValidationError

from app.config.settings import settings
from app.domain.errors import MalformedOracleResponse, OracleUnavailable
from app.domain.models import BiddingData

logger = logging.getLogger(__name__)


class TeamsResponse(BaseModel):
    teams: List[List[int]]


class TeamBuilderClient:
    def __init__(self, url: str = None, timeout: float = None, session: requests.Session = None):
        self.url = url or settings.TEAM_BUILDER_URL
        self.timeout = timeout or settings.TEAM_BUILDER_TIMEOUT
        self.session = session or requests.Session()

    def __call__(self, bidding_data: BiddingData) -> List[List[int]]:
        return self.build_teams(bidding_data)

    def build_teams(self, bidding_data: BiddingData) -> List[List[int]]:
        """POST the bidding data and return the user ids grouped into teams."""
        logger.info(f"Requesting teams for {len(bidding_data.users)} users from {self.url}")
        try:
            r = self.session.post(
                self.url,
                json=bidding_data.model_dump(),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.HTTPError as e:
            raise OracleUnavailable("Failed to fetch teams from web service", e.response.text) from e
        except requests.RequestException as e:
            raise OracleUnavailable("Failed to fetch teams from web service", str(e)) from e

        try:
            teams = TeamsResponse.model_validate(r.json()).teams
        except (ValueError, ValidationError) as e:
            raise MalformedOracleResponse("Unexpected response from team builder", r.text) from e

        logger.debug(f"Team builder returned {len(teams)} teams")
        return teams
