# app/domain/bidding.py
"""
Pure domain logic for bidding profiles.

Functions included:
- construct_users_bidding_info
- generate_bidding_data
- select_member_ranks
- merge_bids_from_different_users

Priorities are aligned positionally with a fixed list of offered topic ids.
A priority of 0 means "no preference"; lower positive numbers are preferred.
No DB access: callers pass in a mapping {(team_id, topic_id): priority}
fetched in one batch.
"""
from typing import Dict, Iterable, List, Set, Tuple

from app.domain.models import BiddingData, TeamSnapshot, UserBidding

PriorityMap = Dict[Tuple[int, int], int]


def team_priority_vector(team_id: int, topic_ids: List[int], priorities: PriorityMap) -> List[int]:
    """Priorities of one team in topic order, 0 where the team did not bid."""
    return [priorities.get((team_id, topic_id), 0) for topic_id in topic_ids]


def construct_users_bidding_info(
    topic_ids: List[int],
    teams: Iterable[TeamSnapshot],
    priorities: PriorityMap,
    confirmed_team_ids: Set[int],
) -> List[UserBidding]:
    """
    Build one bidding record per user of every team that has not signed up yet.

    Teams holding a confirmed slot are skipped, as are teams that expressed no
    preference at all. Members of the same team share the team's vector.

    Example:
    >>> teams = [TeamSnapshot(id=10, member_ids=[1, 2]), TeamSnapshot(id=11, member_ids=[3])]
    >>> construct_users_bidding_info([100, 101], teams, {(10, 101): 1}, set())
    [UserBidding(pid=1, ranks=[0, 1]), UserBidding(pid=2, ranks=[0, 1])]
    """
    users_bidding_info = []
    for team in teams:
        if team.id in confirmed_team_ids:
            continue
        ranks = team_priority_vector(team.id, topic_ids, priorities)
        if not any(ranks):
            continue
        for user_id in team.member_ids:
            users_bidding_info.append(UserBidding(pid=user_id, ranks=list(ranks)))
    return users_bidding_info


def generate_bidding_data(
    topic_ids: List[int],
    teams: Iterable[TeamSnapshot],
    priorities: PriorityMap,
    confirmed_team_ids: Set[int],
    max_team_size: int,
) -> BiddingData:
    """The request body sent to the team builder."""
    users = construct_users_bidding_info(topic_ids, teams, priorities, confirmed_team_ids)
    return BiddingData(users=users, max_team_size=max_team_size)


def select_member_ranks(
    user_ids: List[int], users_bidding_info: List[UserBidding], topic_count: int
) -> List[List[int]]:
    """
    Ranking vectors of the given members, in member order.
    A member without a bidding record counts as an all-zero vector.
    """
    ranks_by_user = {info.pid: info.ranks for info in users_bidding_info}
    return [list(ranks_by_user.get(uid, [0] * topic_count)) for uid in user_ids]


def merge_bids_from_different_users(topic_ids: List[int], member_ranks: List[List[int]]) -> Dict[int, int]:
    """
    Merge members' ranking vectors into one team bid per topic.

    Zeros are ignored; the most preferred (lowest) priority any member gave a
    topic wins. Topics nobody bid on are left out.

    Example:
    >>> merge_bids_from_different_users([100, 101, 102], [[2, 1, 0], [1, 3, 0]])
    {100: 1, 101: 1}
    """
    merged = {}
    for index, topic_id in enumerate(topic_ids):
        values = [ranks[index] for ranks in member_ranks if index < len(ranks) and ranks[index]]
        if values:
            merged[topic_id] = min(values)
    return merged
