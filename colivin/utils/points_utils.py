"""
Points Utilities

FLOW OVERVIEW
- award_points(house, user, points, reason)
  • Upserts the MemberPoints row of the member and adds `points`. Does not commit;
    the caller commits together with the action that earned the points.
- get_leaderboard(house, current_user)
  • Every current member with their points (0 when they never earned any),
    sorted by points descending then display name, with a 1-based position.
"""

import logging

from ..models import MemberPoints
from .prom_metrics import observe_points

logger = logging.getLogger(__name__)


def award_points(house, user, points, reason):
    """Add `points` to the leaderboard row of `user` in `house`"""
    if points <= 0:
        return None

    row = MemberPoints.get_or_create(house.id, user.id)
    row.points = (row.points or 0) + points

    observe_points(reason, points)
    logger.info(f"Awarded {points} points to {user.display_name} in house {house.id} ({reason})")
    return row


def get_leaderboard(house, current_user=None):
    """Ranked members of a house"""
    points = MemberPoints.points_by_user(house.id)

    rows = [
        {
            'user_id': membership.user.user_id,
            'display_name': membership.user.display_name,
            'points': points.get(membership.user_id, 0),
            'is_current_user': current_user is not None and membership.user_id == current_user.id
        }
        for membership in house.ordered_members()
    ]
    rows.sort(key=lambda row: (-row['points'], row['display_name'].lower()))

    for position, row in enumerate(rows, start=1):
        row['position'] = position
    return rows
