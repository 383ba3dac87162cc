from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List

class ScorePair(BaseModel):
    """Self and manager averages for one rating category."""
    model_config = ConfigDict(populate_by_name=True)

    self_score: float = Field(default=0, alias="self")
    manager_score: float = Field(default=0, alias="manager")

    @property
    def gap(self) -> float:
        return round(abs(self.self_score - self.manager_score), 1)

class MemberScorecard(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    team: str = ""
    aamva_cares: ScorePair = Field(alias="aamvaCares")
    competencies: ScorePair
    goals: ScorePair
    overall: float
    label: str
    color: str
    has_review: bool = Field(default=True, alias="hasReview")

class TeamScorecards(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    review_year: int = Field(alias="reviewYear")
    teams: Dict[str, List[MemberScorecard]]

# Resolve forward references for Pydantic V2
MemberScorecard.model_rebuild()
TeamScorecards.model_rebuild()
