"""
Skill demand trends computed from stored job records.

Trends are never persisted; every call recomputes them from the records
passed in.
"""

import math
from typing import Any, Dict, Iterable, List


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (non-negative input)."""
    return int(math.floor(value + 0.5))


def demand_pct(count: int, total_jobs: int) -> int:
    return round_half_up(count / total_jobs * 100)


def count_skills(records: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Skill -> number of occurrences, in first-seen order."""
    freq: Dict[str, int] = {}
    for record in records:
        for skill in record.get("skills", []):
            freq[skill] = freq.get(skill, 0) + 1
    return freq


def get_trends(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Build trend entries sorted by count, highest first.

    Args:
        records: Job records, each with a "skills" list

    Returns:
        List of {"skill", "count", "pct"} dicts; empty when there are no
        records. Skills with equal counts keep their first-seen order.
    """
    total_jobs = len(records)
    if total_jobs == 0:
        return []

    trends = [
        {"skill": skill, "count": count, "pct": demand_pct(count, total_jobs)}
        for skill, count in count_skills(records).items()
    ]
    trends.sort(key=lambda t: t["count"], reverse=True)
    return trends


def format_trends(trends: List[Dict[str, Any]], limit: int = 0) -> str:
    """Render trends as a fixed-width text table."""
    if not trends:
        return "No skill data yet."
    rows = trends[:limit] if limit else trends
    width = max(len("Skill"), max(len(t["skill"]) for t in rows))
    lines = [f"{'Skill':<{width}}  {'Jobs':>5}  {'Demand':>6}"]
    for t in rows:
        lines.append(f"{t['skill']:<{width}}  {t['count']:>5}  {t['pct']:>5}%")
    return "\n".join(lines)
