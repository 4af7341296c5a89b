"""Value objects shared by the stats modules."""

from enum import Enum


class TrendDirection(str, Enum):
    """Direction of a member's recent-window trend."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class MilestoneType(str, Enum):
    """Milestone categories.

    HIGH_AVERAGE was labelled ``perfect_game`` by the old dashboard even though
    it fires on a 180+ session average, not a 300 game.
    """

    FIRST_200 = "first_200"
    HIGH_AVERAGE = "high_average"
    ATTENDANCE = "attendance_milestone"
    IMPROVEMENT = "improvement_milestone"


class InconsistencyTier(str, Enum):
    TORNADO = "tornado"
    ROLLER_COASTER = "roller_coaster"
    CAROUSEL = "carousel"
    TRAIN = "train"
    STEADY = "steady"


class LaneRating(str, Enum):
    JACKPOT = "jackpot"
    LUCKY = "lucky"
    GOOD = "good"
    ORDINARY = "ordinary"
    UNLUCKY = "unlucky"
