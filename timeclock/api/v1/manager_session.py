import logging

from fastapi import APIRouter, Depends

from timeclock.api.deps import get_authenticator
from timeclock.core.exceptions import UnauthorizedException
from timeclock.core.security import create_manager_token, require_manager_session
from timeclock.schemas.manager_session_schema import ManagerPinIn, ManagerSessionOut, ManagerTokenOut
from timeclock.services.manager_auth import ManagerSessionAuthenticator, is_valid_pin_format


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/manager-session", tags=["manager-session"])


def _session_out(authenticator: ManagerSessionAuthenticator) -> ManagerSessionOut:
    authenticated = authenticator.is_valid()
    return ManagerSessionOut(
        authenticated=authenticated,
        remaining_seconds=int(authenticator.remaining_time().total_seconds()),
        message=authenticator.status_message(),
    )


@router.post("", response_model=ManagerTokenOut)
async def open_session(
    payload: ManagerPinIn,
    authenticator: ManagerSessionAuthenticator = Depends(get_authenticator),
):
    if not is_valid_pin_format(payload.pin) or not authenticator.authenticate(payload.pin):
        raise UnauthorizedException(detail="Invalid manager PIN", error_code="INVALID_PIN")
    token = create_manager_token(authenticator.session_id)
    return ManagerTokenOut(
        token=token,
        expires_in_seconds=int(authenticator.remaining_time().total_seconds()),
        message=authenticator.status_message(),
    )


@router.get("", response_model=ManagerSessionOut)
async def session_status(authenticator: ManagerSessionAuthenticator = Depends(get_authenticator)):
    return _session_out(authenticator)


@router.post("/extend", response_model=ManagerSessionOut)
async def extend_session(authenticator: ManagerSessionAuthenticator = Depends(require_manager_session)):
    if not authenticator.extend_session():
        raise UnauthorizedException(detail="Manager session expired")
    return _session_out(authenticator)


@router.delete("")
async def clear_session(authenticator: ManagerSessionAuthenticator = Depends(get_authenticator)):
    authenticator.clear_authentication()
    return {"status": "cleared"}
