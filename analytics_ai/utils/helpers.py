"""
Helper Functions

This module contains utility functions used throughout the application.
"""


def trunc_div(total: int, count: int) -> int:
    """Integer division truncating toward zero (0 when count is 0)"""
    if count == 0:
        return 0
    q = abs(total) // abs(count)
    return q if (total >= 0) == (count > 0) else -q


def error_rate(errors: int, count: int) -> float:
    """Percentage of errors, 0.0 for an empty bucket"""
    return (errors / count * 100.0) if count else 0.0


def format_rate(rate: float) -> str:
    """Render a percentage with one decimal place"""
    return f"{rate:.1f}"
