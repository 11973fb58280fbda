"""Goal status from current weekly rate vs required weekly rate."""

import math
from enum import Enum

CATCH_UP_TOLERANCE = 1.2


class GoalStatus(str, Enum):
    ON_TRACK = "on-track"
    CATCH_UP = "catch-up"
    OFF_TRACK = "off-track"


def calculate_goal_status(current_rate: float, required_rate: float) -> GoalStatus:
    """
    Classify pace against the pace a goal requires.

    catch-up means the required rate is within 20% above the current rate.
    Non-finite rates count as zero.
    """
    current = current_rate if current_rate is not None and math.isfinite(current_rate) else 0.0
    required = required_rate if required_rate is not None and math.isfinite(required_rate) else 0.0

    if required <= 0:
        return GoalStatus.ON_TRACK
    if current <= 0:
        return GoalStatus.OFF_TRACK
    if current >= required:
        return GoalStatus.ON_TRACK
    if required <= current * CATCH_UP_TOLERANCE:
        return GoalStatus.CATCH_UP
    return GoalStatus.OFF_TRACK
