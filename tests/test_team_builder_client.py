# tests/test_team_builder_client.py
import pytest
import requests

from app.adapters.team_builder_client import TeamBuilderClient
from app.domain.errors import MalformedOracleResponse, OracleUnavailable
from app.domain.models import BiddingData, UserBidding

URL = "http://team-builder.test/match_topics"


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def make_response(status_code: int, body: str) -> requests.Response:
    r = requests.Response()
    r.status_code = status_code
    r._content = body.encode("utf-8")
    r.encoding = "utf-8"
    r.url = URL
    return r


def bidding_data():
    return BiddingData(
        users=[UserBidding(pid=1, ranks=[1, 0]), UserBidding(pid=2, ranks=[0, 1])],
        max_team_size=2,
    )


def test_posts_bidding_data_and_returns_teams():
    session = FakeSession(make_response(200, '{"teams": [[1, 2], [3]]}'))
    client = TeamBuilderClient(URL, timeout=5, session=session)

    assert client(bidding_data()) == [[1, 2], [3]]

    url, kwargs = session.calls[0]
    assert url == URL
    assert kwargs["json"] == {
        "users": [{"pid": 1, "ranks": [1, 0]}, {"pid": 2, "ranks": [0, 1]}],
        "max_team_size": 2,
    }
    assert kwargs["timeout"] == 5

def test_error_status_carries_response_body():
    session = FakeSession(make_response(503, "service restarting"))
    client = TeamBuilderClient(URL, session=session)

    with pytest.raises(OracleUnavailable) as exc:
        client(bidding_data())
    assert exc.value.payload == "service restarting"
    assert "service restarting" in str(exc.value)

def test_network_failure_is_oracle_unavailable():
    session = FakeSession(error=requests.ConnectionError("connection refused"))
    client = TeamBuilderClient(URL, session=session)

    with pytest.raises(OracleUnavailable) as exc:
        client(bidding_data())
    assert "connection refused" in exc.value.payload

def test_unparsable_body_is_malformed():
    session = FakeSession(make_response(200, "<html>oops</html>"))
    client = TeamBuilderClient(URL, session=session)

    with pytest.raises(MalformedOracleResponse) as exc:
        client(bidding_data())
    assert exc.value.payload == "<html>oops</html>"

def test_body_without_teams_is_malformed():
    session = FakeSession(make_response(200, '{"groups": [[1, 2]]}'))
    client = TeamBuilderClient(URL, session=session)

    with pytest.raises(MalformedOracleResponse):
        client(bidding_data())
