# app/domain/allocation.py
"""
Pure domain logic for ranking teams and allocating topic slots.

Functions included:
- construct_teams_bidding_info
- rank_teams
- assign_available_slots

Capacity is tracked in an explicit CapacityLedger owned by the caller for one run.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from app.domain.bidding import PriorityMap
from app.domain.models import SlotAssignment, TeamBidding, TeamSnapshot, TopicBid


@dataclass
class CapacityLedger:
    capacity: Dict[int, int] = field(default_factory=dict)
    committed: Dict[int, int] = field(default_factory=dict)

    def available(self, topic_id: int) -> int:
        # a topic without a capacity record has no slots
        return self.capacity.get(topic_id, 0) - self.committed.get(topic_id, 0)

    def has_room(self, topic_id: int) -> bool:
        return self.available(topic_id) > 0

    def commit(self, topic_id: int):
        if not self.has_room(topic_id):
            raise ValueError(f"Topic {topic_id} has no free slot")
        self.committed[topic_id] = self.committed.get(topic_id, 0) + 1

    def copy(self) -> "CapacityLedger":
        return CapacityLedger(capacity=dict(self.capacity), committed=dict(self.committed))


def construct_teams_bidding_info(
    teams: Iterable[TeamSnapshot], topic_ids: List[int], priorities: PriorityMap
) -> List[TeamBidding]:
    """
    Bids of every team over the offered topics, most preferred first.
    Teams without any bid are not eligible for allocation and are left out.
    """
    position = {topic_id: i for i, topic_id in enumerate(topic_ids)}
    teams_bidding_info = []
    for team in teams:
        bids = [
            TopicBid(topic_id=topic_id, priority=priorities[(team.id, topic_id)])
            for topic_id in topic_ids
            if priorities.get((team.id, topic_id), 0)
        ]
        if not bids:
            continue
        bids.sort(key=lambda b: (b.priority, position[b.topic_id]))
        teams_bidding_info.append(TeamBidding(team_id=team.id, size=len(team.member_ids), bids=bids))
    return teams_bidding_info


def rank_teams(teams_bidding_info: List[TeamBidding]) -> List[TeamBidding]:
    """
    Order teams for allocation: larger teams first, then teams with fewer bids,
    then the older (lower id) team.

    Example:
    >>> a = TeamBidding(team_id=1, size=2, bids=[TopicBid(topic_id=5, priority=1)])
    >>> b = TeamBidding(team_id=2, size=3, bids=[TopicBid(topic_id=5, priority=1)])
    >>> [t.team_id for t in rank_teams([a, b])]
    [2, 1]
    """
    return sorted(teams_bidding_info, key=lambda t: (-t.size, len(t.bids), t.team_id))


def assign_available_slots(
    ranked_teams: List[TeamBidding], ledger: CapacityLedger
) -> Tuple[List[SlotAssignment], CapacityLedger]:
    """
    Greedy single pass: each team, in rank order, gets the first of its bids
    (most preferred first) whose topic still has a free slot, and nothing more.

    The given ledger is left untouched; the returned one holds the new commitments.
    """
    ledger = ledger.copy()
    assignments = []
    for team in ranked_teams:
        for bid in team.bids:
            if ledger.has_room(bid.topic_id):
                ledger.commit(bid.topic_id)
                assignments.append(SlotAssignment(team_id=team.team_id, topic_id=bid.topic_id))
                break
    return assignments, ledger
