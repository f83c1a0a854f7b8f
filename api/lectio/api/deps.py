"""
Request dependencies shared by the endpoints.
"""
from fastapi import Depends, Header
from sqlmodel import Session
from typing import Optional

from lectio.core.database import get_session
from lectio.core.exceptions import AuthenticationError
from lectio.services.progress_store import ProgressStore


def get_optional_user_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Identity forwarded by the authentication layer, None for anonymous callers."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


def get_current_user_id(user_id: Optional[str] = Depends(get_optional_user_id)) -> str:
    """Identity forwarded by the authentication layer; required."""
    if user_id is None:
        raise AuthenticationError("Unauthorized")
    return user_id


def get_progress_store(session: Session = Depends(get_session)) -> ProgressStore:
    return ProgressStore(session)
