"""
Typed records for the persisted portal snapshot.

The SPA stores camelCase JSON; fields here are snake_case with aliases so the
document written to the remote store keeps the SPA's shape. Every field has
a default, and nulls or mistyped values fall back to it, so a partially shaped
document still loads. Unknown keys are kept (``extra="allow"``) so fields added
by the front end survive a save.
"""
import logging
import math
from typing import Any, Dict, List, Optional, Union
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

logger = logging.getLogger(__name__)

Number = Union[int, float]


class PortalModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("*", mode="wrap")
    @classmethod
    def default_unusable_values(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        """A null or mistyped value falls back to the field default instead of failing the load."""
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        try:
            return handler(value)
        except ValidationError:
            logger.warning(f"Replacing unusable {cls.__name__}.{info.field_name} value with its default")
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)


def _coerce_rating(value: Any) -> Optional[Number]:
    """Ratings are nominally 1-5 but anything non-numeric is treated as missing."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value
    return None


# ---------------------------------------------------------------------------
# Delegation tracker
# ---------------------------------------------------------------------------

class TeamMember(PortalModel):
    id: Union[int, str] = 0
    name: str = ""
    stretch_project: str = Field(default="", alias="stretchProject")
    delegation_level: int = Field(default=2, alias="delegationLevel")
    notes: str = ""


class ChecklistItem(PortalModel):
    id: Union[int, str] = 0
    text: str = ""
    done: bool = False


class ChecklistQuarter(PortalModel):
    items: List[ChecklistItem] = Field(default_factory=list)


class ImpulseCounter(PortalModel):
    caught: int = 0
    redirected: int = 0


class DelegationRecord(PortalModel):
    delegation_log: List[Dict[str, Any]] = Field(default_factory=list, alias="delegationLog")
    team_members: List[TeamMember] = Field(default_factory=list, alias="delegationTeamMembers")
    quarterly_checklist: Dict[str, ChecklistQuarter] = Field(default_factory=dict, alias="quarterlyChecklist")
    impulse_counter: ImpulseCounter = Field(default_factory=ImpulseCounter, alias="impulseCounter")
    # Newest first; each entry carries an ISO "date"
    saved_reflections: List[Dict[str, Any]] = Field(default_factory=list, alias="savedReflections")


# ---------------------------------------------------------------------------
# Performance review
# ---------------------------------------------------------------------------

class Criterion(PortalModel):
    id: str = ""
    name: str = ""
    description: str = ""


class Rubrics(PortalModel):
    aamva_cares: List[Criterion] = Field(default_factory=list, alias="aamvaCares")
    competencies: List[Criterion] = Field(default_factory=list)


class Weights(PortalModel):
    aamva_cares: float = Field(default=0.25, alias="aamvaCares")
    competencies: float = 0.25
    goals: float = 0.50


class Rating(PortalModel):
    self_rating: Optional[Number] = Field(default=None, alias="self")
    manager_rating: Optional[Number] = Field(default=None, alias="manager")
    self_comment: str = Field(default="", alias="selfComment")
    manager_comment: str = Field(default="", alias="managerComment")

    @field_validator("self_rating", "manager_rating", mode="before")
    @classmethod
    def normalize_rating(cls, value: Any) -> Optional[Number]:
        return _coerce_rating(value)


class Goal(Rating):
    id: Union[int, str] = 0
    name: str = ""


class PriorScores(PortalModel):
    aamva_cares: float = Field(default=0, alias="aamvaCares")
    competencies: float = 0
    goals: float = 0
    overall: float = 0


class MemberReview(PortalModel):
    name: str = ""
    team: str = ""
    aamva_cares: Dict[str, Rating] = Field(default_factory=dict, alias="aamvaCares")
    competencies: Dict[str, Rating] = Field(default_factory=dict)
    goals: List[Goal] = Field(default_factory=list)
    summary: str = ""
    scores2024: Optional[PriorScores] = None

    def category(self, category: str) -> Optional[Dict[str, Rating]]:
        """Rating map by its wire name (``aamvaCares`` or ``competencies``)."""
        if category in ("aamvaCares", "aamva_cares"):
            return self.aamva_cares
        if category == "competencies":
            return self.competencies
        return None


class PerformanceReviewRecord(PortalModel):
    review_year: int = Field(default=2025, alias="reviewYear")
    teams: Dict[str, List[str]] = Field(default_factory=dict)
    weights: Weights = Field(default_factory=Weights)
    criteria: Rubrics = Field(default_factory=Rubrics)
    team_members: Dict[str, MemberReview] = Field(default_factory=dict, alias="teamMembers")


# ---------------------------------------------------------------------------
# Root aggregate
# ---------------------------------------------------------------------------

class PortalSnapshot(PortalModel):
    delegation: DelegationRecord = Field(default_factory=DelegationRecord)
    performance_review: PerformanceReviewRecord = Field(
        default_factory=PerformanceReviewRecord, alias="performanceReview"
    )
    last_updated: str = Field(default="", alias="lastUpdated")

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict using the SPA's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


# Resolve forward references for Pydantic V2
PortalSnapshot.model_rebuild()
