"""
Alert generation for the portal dashboard.

Each rule looks at the snapshot independently; every rule that fires adds one
alert (the rating-gap rule adds one per member). The result is stably sorted
by priority, so rules with equal priority keep evaluation order.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Union

from portal.schemas.alert import Alert
from portal.schemas.snapshot import DelegationRecord, PerformanceReviewRecord, PortalSnapshot
from portal.services.scoring import AAMVA_CARES, category_average, round_half_up

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

FRIDAY = 4  # datetime.weekday()
REFLECTION_WINDOW = timedelta(days=7)
GAP_THRESHOLD = 1.5
MIN_IMPULSES_FOR_RATE = 5
LOW_REDIRECT_RATE = 50


def local_now() -> datetime:
    return datetime.now().astimezone()


def current_quarter(today: Union[date, datetime]) -> str:
    return f"Q{(today.month - 1) // 3 + 1}"


def is_reflection_day(today: Union[date, datetime]) -> bool:
    return today.weekday() == FRIDAY


def parse_timestamp(value: object, tz=None) -> Optional[datetime]:
    """Parse an ISO date/datetime string from the SPA; None if unusable."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None and tz is not None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def format_date(value: Union[str, date, datetime]) -> str:
    """Short US-style date (M/D/YYYY) as shown next to saved entries."""
    if isinstance(value, str):
        parsed = parse_timestamp(value)
        if parsed is None:
            return value
        value = parsed
    return f"{value.month}/{value.day}/{value.year}"


# ---------------------------------------------------------------------------
# Delegation rules
# ---------------------------------------------------------------------------

def _reflection_alert(delegation: DelegationRecord, now: datetime) -> Optional[Alert]:
    if not is_reflection_day(now):
        return None
    for reflection in delegation.saved_reflections:
        reflected_at = parse_timestamp(reflection.get("date"), tz=now.tzinfo)
        if reflected_at is None:
            continue
        if now - reflected_at < REFLECTION_WINDOW:
            return None
    return Alert(
        type="warning",
        icon="Calendar",
        title="Weekly Reflection Due",
        message="It's Friday! Time for your weekly delegation reflection.",
        link="delegation.html#weekly",
        priority=1,
    )


def _quarterly_alert(delegation: DelegationRecord, now: datetime) -> Optional[Alert]:
    quarter = current_quarter(now)
    checklist = delegation.quarterly_checklist.get(quarter)
    if checklist is None:
        return None
    done = sum(1 for item in checklist.items if item.done)
    total = len(checklist.items)
    if done >= total / 2:
        return None
    return Alert(
        type="info",
        icon="Target",
        title=f"{quarter} Goals Behind",
        message=f"Only {done}/{total} quarterly goals completed. Review your progress.",
        link="delegation.html#quarterly",
        priority=2,
    )


def _impulse_alert(delegation: DelegationRecord) -> Optional[Alert]:
    impulse = delegation.impulse_counter
    if impulse.caught <= MIN_IMPULSES_FOR_RATE:
        return None
    rate = impulse.redirected / impulse.caught * 100
    if rate >= LOW_REDIRECT_RATE:
        return None
    return Alert(
        type="warning",
        icon="AlertTriangle",
        title="Impulse Redirect Rate Low",
        message=f"Your redirect rate is {int(round_half_up(rate, 0))}%. Aim for 70%+.",
        link="delegation.html",
        priority=2,
    )


def _stretch_alert(delegation: DelegationRecord) -> Optional[Alert]:
    missing = [m for m in delegation.team_members if not m.stretch_project]
    if not missing:
        return None
    return Alert(
        type="info",
        icon="Users",
        title="Stretch Projects Needed",
        message=f"{len(missing)} team member(s) don't have stretch projects assigned.",
        link="delegation.html#team",
        priority=3,
    )


# ---------------------------------------------------------------------------
# Performance review rules
# ---------------------------------------------------------------------------

def _summary_alert(review: PerformanceReviewRecord) -> Optional[Alert]:
    missing = [m for m in review.team_members.values() if not m.summary.strip()]
    if not missing:
        return None
    return Alert(
        type="warning",
        icon="FileText",
        title="Missing Review Summaries",
        message=f"{len(missing)} team member(s) need review summaries written.",
        link="performance.html",
        priority=1,
    )


def _gap_alerts(review: PerformanceReviewRecord) -> List[Alert]:
    alerts = []
    for key, member in review.team_members.items():
        name = member.name or key
        cares = category_average(key, AAMVA_CARES, review)
        if cares.gap < GAP_THRESHOLD:
            continue
        alerts.append(Alert(
            type="info",
            icon="MessageSquare",
            title=f"Rating Gap: {name}",
            message=(
                f"Large gap between self ({cares.self_score}) and manager "
                f"({cares.manager_score}) ratings. Discuss in 1:1."
            ),
            link=f"performance.html?member={name}",
            priority=3,
        ))
    return alerts


def generate_alerts(snapshot: PortalSnapshot, clock: Clock = local_now) -> List[Alert]:
    """
    Evaluate every alert rule against the snapshot.

    Args:
        snapshot: Loaded portal data; not modified.
        clock: Returns "now"; inject a fixed clock for deterministic output.

    Returns:
        List[Alert]: Triggered alerts ordered by ascending priority.
    """
    now = clock()
    if now.tzinfo is None:
        now = now.astimezone()
    delegation = snapshot.delegation
    review = snapshot.performance_review

    candidates = [
        _reflection_alert(delegation, now),
        _quarterly_alert(delegation, now),
        _impulse_alert(delegation),
        _stretch_alert(delegation),
        _summary_alert(review),
    ]
    alerts = [a for a in candidates if a is not None]
    alerts.extend(_gap_alerts(review))

    logger.debug(f"Generated {len(alerts)} alert(s)")
    return sorted(alerts, key=lambda a: a.priority)
