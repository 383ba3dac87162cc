from datetime import datetime
from typing import Callable
import logging

from fastapi import APIRouter, Depends

from portal.core.schemas import ApiResponse
from portal.dependencies import get_clock, get_document_client
from portal.routers.auth_deps import require_credentials
from portal.schemas.snapshot import PortalSnapshot
from portal.services.alerts import generate_alerts
from portal.services.defaults import get_default_snapshot
from portal.services.document_client import DocumentClient
from portal.services.scoring import team_scorecards

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portal", tags=["Portal"])

@router.get("/data", dependencies=[Depends(require_credentials)])
async def load_portal_data(
    client: DocumentClient = Depends(get_document_client),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """Load the saved snapshot, or seed a default one when nothing is stored yet."""
    snapshot = await client.load()
    source = "remote"
    if snapshot is None:
        logger.info("No stored portal data found; serving defaults")
        snapshot = get_default_snapshot(clock)
        source = "default"
    return ApiResponse.ok(
        snapshot.to_payload(),
        metadata={"source": source, "document_id": client.credentials.get_document_id()},
    ).to_dict()

@router.put("/data", dependencies=[Depends(require_credentials)])
async def save_portal_data(
    snapshot: PortalSnapshot,
    client: DocumentClient = Depends(get_document_client),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    stamped = snapshot.model_copy(update={"last_updated": clock().isoformat()})
    document_id = await client.save(stamped)
    return ApiResponse.ok({"documentId": document_id, "lastUpdated": stamped.last_updated}).to_dict()

@router.post("/alerts")
def portal_alerts(snapshot: PortalSnapshot, clock: Callable[[], datetime] = Depends(get_clock)):
    alerts = generate_alerts(snapshot, clock=clock)
    return ApiResponse.ok([a.model_dump() for a in alerts], metadata={"count": len(alerts)}).to_dict()

@router.post("/scores")
def portal_scores(snapshot: PortalSnapshot):
    scorecards = team_scorecards(snapshot.performance_review)
    return ApiResponse.ok(scorecards.model_dump(by_alias=True)).to_dict()

@router.get("/defaults")
def portal_defaults(clock: Callable[[], datetime] = Depends(get_clock)):
    return ApiResponse.ok(get_default_snapshot(clock).to_payload()).to_dict()
