"""
Credential guard for routes that talk to the document store.
"""
import logging

from fastapi import Depends

from portal.core.exceptions import AuthError
from portal.dependencies import get_credential_store
from portal.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


def require_credentials(credentials: CredentialStore = Depends(get_credential_store)) -> CredentialStore:
    if not credentials.is_authenticated():
        logger.info("Rejected request without a stored GitHub token")
        raise AuthError("Log in with a GitHub token first")
    return credentials
