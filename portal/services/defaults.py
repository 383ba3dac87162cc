"""
Seed data used when no portal document exists in the user's gists yet.
"""
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from portal.schemas.snapshot import (
    ChecklistItem,
    ChecklistQuarter,
    Criterion,
    DelegationRecord,
    ImpulseCounter,
    MemberReview,
    PerformanceReviewRecord,
    PortalSnapshot,
    Rating,
    Rubrics,
    TeamMember,
    Weights,
)

DEFAULT_REVIEW_YEAR = 2025

QUARTERLY_CHECKLIST: Dict[str, List[str]] = {
    "Q1": [
        "Create Delegation Inventory",
        "Identify stretch project for each team member",
        "Implement 5-minute rule",
        "Start delegation conversations in 1:1s",
    ],
    "Q2": [
        "Assign ownership (not tasks) to 2+ team members",
        "Practice coaching questions instead of answers",
        "Establish review checkpoints for delegated projects",
        "Have team members document their decisions",
    ],
    "Q3": [
        "Delegate a visible initiative to a team member",
        "Have each team member lead a knowledge-sharing session",
        "Step back from daily decisions in delegated areas",
        "Ask team members what they can do now vs 6 months ago",
    ],
    "Q4": [
        "Share delegation progress with John",
        "Gather team feedback on ownership and challenge",
        "Plan next-level delegation for next year",
        "Publicly recognize team member stretch accomplishments",
    ],
}

TEAMS: Dict[str, List[str]] = {
    "NCS": ["Terry", "Anil", "Suneesh"],
    "CSTIMS": ["Murali", "Ram", "Samson"],
}

# (id, name, description)
AAMVA_CARES_CRITERIA: List[Tuple[str, str, str]] = [
    ("coach", "Coach",
     "Helping colleagues, employees, and leaders using a variety of positive and supportive methods and techniques. Support each other to achieve performance goals, personal satisfaction, and effectiveness through active listening and constructive feedback."),
    ("appreciate", "Appreciate",
     "Expressing the worth and importance of colleagues, employees, and leaders by recognizing the value of their ideas and efforts. Foster an environment where individuals receive proper recognition for their contributions."),
    ("respect", "Respect",
     "Treating, thinking about, and interacting with colleagues, employees, and leaders in a manner that is mindful of individual personalities. Foster a work environment where each individual feels safe and able to contribute."),
    ("empower", "Empower",
     "Committing to making co-workers, employees, and leaders stronger through open communication and delegation. Effectively collaborate and foster professional growth."),
    ("support", "Support",
     "Building strong relationships while displaying a harmonious and collaborative style. Develop and sustain relationships that enhance team spirit and cooperation within the organization."),
]

COMPETENCY_CRITERIA: List[Tuple[str, str, str]] = [
    ("jobKnowledge", "Application of Job Knowledge",
     "Has an understanding of the facts, principles and expectations of their job. Demonstrates an understanding of knowledge specific to a technical, professional, or administrative field of work through application of related procedures, principles, theories or concepts."),
    ("managingTech", "Managing Technology",
     "Has an awareness of, researches and adopts effective technologies that improve the bottom line, works well with tech resources."),
    ("problemSolving", "Problem Solving/Analysis",
     "Able to understand a situation by moving through the data presented and processing the information in a systematic way in order to make effective and rational decisions. Identifies the cause and effect of issues and analyzes them from different angles, using several tools and techniques to construct different solutions to each issue."),
    ("technicalSkills", "Technical Skills",
     "Achieves a proficient level of technical and professional skills/knowledge in job-related areas; acquires and refines current developments in areas of expertise. Shows a savvy for technical issues and serves, uses his or her skills to enhance his or her work."),
    ("leadership", "Leadership",
     "Someone who is proactively working effectively to accomplish objectives in his or her own position and by building consensus on common goals."),
]


def get_default_delegation() -> DelegationRecord:
    return DelegationRecord(
        delegation_log=[],
        team_members=[
            TeamMember(id=1, name="Team Member 1", stretch_project="", delegation_level=2, notes=""),
            TeamMember(id=2, name="Team Member 2", stretch_project="", delegation_level=2, notes=""),
        ],
        quarterly_checklist={
            quarter: ChecklistQuarter(
                items=[ChecklistItem(id=i, text=text, done=False) for i, text in enumerate(items, start=1)]
            )
            for quarter, items in QUARTERLY_CHECKLIST.items()
        },
        impulse_counter=ImpulseCounter(caught=0, redirected=0),
        saved_reflections=[],
    )


def _criteria(rows: List[Tuple[str, str, str]]) -> List[Criterion]:
    return [Criterion(id=cid, name=name, description=description) for cid, name, description in rows]


def _blank_review(name: str, team: str) -> MemberReview:
    return MemberReview(
        name=name,
        team=team,
        aamva_cares={cid: Rating() for cid, _, _ in AAMVA_CARES_CRITERIA},
        competencies={cid: Rating() for cid, _, _ in COMPETENCY_CRITERIA},
        goals=[],
        summary="",
    )


def get_default_performance_review() -> PerformanceReviewRecord:
    return PerformanceReviewRecord(
        review_year=DEFAULT_REVIEW_YEAR,
        teams={team: list(names) for team, names in TEAMS.items()},
        weights=Weights(aamva_cares=0.25, competencies=0.25, goals=0.50),
        criteria=Rubrics(
            aamva_cares=_criteria(AAMVA_CARES_CRITERIA),
            competencies=_criteria(COMPETENCY_CRITERIA),
        ),
        team_members={
            name: _blank_review(name, team)
            for team, names in TEAMS.items()
            for name in names
        },
    )


def get_default_snapshot(clock: Optional[Callable[[], datetime]] = None) -> PortalSnapshot:
    """Fresh snapshot with both seed records and a current lastUpdated stamp."""
    now = (clock or (lambda: datetime.now().astimezone()))()
    return PortalSnapshot(
        delegation=get_default_delegation(),
        performance_review=get_default_performance_review(),
        last_updated=now.isoformat(),
    )
