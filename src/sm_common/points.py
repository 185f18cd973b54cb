"""Integer point utilities.

All balances, thresholds and awards are plain ints. No float, no Decimal.
"""


def validate_award_points(points: object) -> int:
    """Return points unchanged if it is a non-negative int, else raise ValueError.

    bool is rejected even though it subclasses int.
    """
    if isinstance(points, bool) or not isinstance(points, int) or points < 0:
        raise ValueError(f"Award points must be a non-negative integer, got {points!r}")
    return points


def points_to_display(points: int) -> str:
    """Format points for display: 1 -> '1 pt', 1250 -> '1,250 pts', -40 -> '-40 pts'."""
    unit = "pt" if abs(points) == 1 else "pts"
    return f"{points:,} {unit}"
