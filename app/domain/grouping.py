# app/domain/grouping.py

from typing import List, Callable

from app.domain.models import BiddingData

# a team builder must implement:
# def team_builder(bidding_data: BiddingData) -> List[List[int]]
# bidding_data.users: one record per user: {"pid": int, "ranks": [priority per offered topic]}
# returns the user ids partitioned into teams, e.g. [[1, 2], [3]]

TeamBuilder = Callable[[BiddingData], List[List[int]]]


def duplicated_user_ids(teams: List[List[int]]) -> List[int]:
    """
    User ids placed more than once across the partition, in first-seen order.

    Example:
    >>> duplicated_user_ids([[1, 2], [2, 3], [3, 3]])
    [2, 3]
    """
    seen = set()
    duplicated = []
    for user_ids in teams:
        for uid in user_ids:
            if uid in seen and uid not in duplicated:
                duplicated.append(uid)
            seen.add(uid)
    return duplicated
