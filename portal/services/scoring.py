"""
Review scoring helpers.

Pure functions over a PerformanceReviewRecord. Averages are rounded to one
decimal place (half-up, as shown in the portal) before they feed the overall
score. A missing rating counts as 0 and still occupies a slot in the
denominator, so incomplete reviews pull the average down.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from portal.schemas.scores import MemberScorecard, ScorePair, TeamScorecards
from portal.schemas.snapshot import PerformanceReviewRecord, Rating

AAMVA_CARES = "aamvaCares"
COMPETENCIES = "competencies"

# (threshold, label, color) from the top tier down
RATING_TIERS = [
    (4.5, "Outstanding", "text-green-600 bg-green-50"),
    (3.5, "Exceeds", "text-blue-600 bg-blue-50"),
    (2.5, "Meets", "text-yellow-600 bg-yellow-50"),
    (1.5, "Needs Improvement", "text-red-600 bg-red-50"),
]
BOTTOM_LABEL = "Unsatisfactory"
BOTTOM_COLOR = "text-red-600 bg-red-50"


def round_half_up(value: float, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _average(ratings: List[Rating]) -> ScorePair:
    if not ratings:
        return ScorePair()
    count = len(ratings)
    self_total = sum(r.self_rating or 0 for r in ratings)
    manager_total = sum(r.manager_rating or 0 for r in ratings)
    return ScorePair(
        self_score=round_half_up(self_total / count, 1),
        manager_score=round_half_up(manager_total / count, 1),
    )


def category_average(member_name: str, category: str, review: PerformanceReviewRecord) -> ScorePair:
    """Average self/manager ratings for one rubric; (0, 0) if member or category is absent."""
    member = review.team_members.get(member_name)
    if member is None:
        return ScorePair()
    ratings = member.category(category)
    if not ratings:
        return ScorePair()
    return _average(list(ratings.values()))


def goals_average(member_name: str, review: PerformanceReviewRecord) -> ScorePair:
    member = review.team_members.get(member_name)
    if member is None:
        return ScorePair()
    return _average(member.goals)


def overall_score(member_name: str, review: PerformanceReviewRecord) -> float:
    """Weighted sum of the manager averages, rounded to 2 decimals."""
    weights = review.weights
    cares = category_average(member_name, AAMVA_CARES, review).manager_score
    competencies = category_average(member_name, COMPETENCIES, review).manager_score
    goals = goals_average(member_name, review).manager_score
    total = cares * weights.aamva_cares + competencies * weights.competencies + goals * weights.goals
    return round_half_up(total, 2)


def _tier(rating: Optional[float]):
    value = rating or 0
    for threshold, label, color in RATING_TIERS:
        if value >= threshold:
            return label, color
    return BOTTOM_LABEL, BOTTOM_COLOR


def rating_label(rating: Optional[float]) -> str:
    return _tier(rating)[0]


def rating_color(rating: Optional[float]) -> str:
    return _tier(rating)[1]


def member_scorecard(member_name: str, review: PerformanceReviewRecord, team: str = "") -> MemberScorecard:
    member = review.team_members.get(member_name)
    overall = overall_score(member_name, review)
    return MemberScorecard(
        name=member_name,
        team=(member.team if member and member.team else team),
        aamva_cares=category_average(member_name, AAMVA_CARES, review),
        competencies=category_average(member_name, COMPETENCIES, review),
        goals=goals_average(member_name, review),
        overall=overall,
        label=rating_label(overall),
        color=rating_color(overall),
        has_review=member is not None,
    )


def _unrostered(review: PerformanceReviewRecord) -> Iterable[str]:
    rostered = {name for names in review.teams.values() for name in names}
    return [name for name in review.team_members if name not in rostered]


def team_scorecards(review: PerformanceReviewRecord) -> TeamScorecards:
    """Scorecards for every rostered member, plus reviews not listed on any team."""
    teams = {
        team: [member_scorecard(name, review, team=team) for name in names]
        for team, names in review.teams.items()
    }
    for name in _unrostered(review):
        card = member_scorecard(name, review)
        teams.setdefault(card.team or "Unassigned", []).append(card)
    return TeamScorecards(review_year=review.review_year, teams=teams)
