from fastapi import APIRouter, Depends
import logging

from portal.core.exceptions import AuthError
from portal.core.schemas import ApiResponse
from portal.dependencies import get_credential_store
from portal.schemas.auth import AuthStatus, LoginRequest
from portal.services.credential_store import CredentialStore, verify_token

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

@router.get("/status")
def auth_status(credentials: CredentialStore = Depends(get_credential_store)):
    status = AuthStatus(
        authenticated=credentials.is_authenticated(),
        has_document=bool(credentials.get_document_id()),
    )
    return ApiResponse.ok(status.model_dump()).to_dict()

@router.post("/login")
def login(login_data: LoginRequest, credentials: CredentialStore = Depends(get_credential_store)):
    # Sync route: verify_token blocks on requests, FastAPI runs it in the threadpool
    token = login_data.token.strip()
    if not verify_token(token):
        logger.warning("Login rejected: GitHub token failed verification")
        raise AuthError("Invalid GitHub token")

    credentials.set_token(token)
    logger.info("GitHub token verified and stored")
    return ApiResponse.ok({"authenticated": True}).to_dict()

@router.post("/logout")
def logout(credentials: CredentialStore = Depends(get_credential_store)):
    credentials.clear()
    return ApiResponse.ok({"authenticated": False}).to_dict()
