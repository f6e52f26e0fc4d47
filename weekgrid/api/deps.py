from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from weekgrid.core.access import AuthConfig
from weekgrid.core.identity import Identity
from weekgrid.db import SessionDep
from weekgrid.models import User
from weekgrid.services.users import get_or_create_user


def get_auth_config(request: Request) -> AuthConfig:
    return request.app.state.auth


def get_current_identity(
    request: Request,
    auth: AuthConfig = Depends(get_auth_config),
) -> Identity:
    """Authenticate the request from its Telegram init data header."""
    raw_payload = request.headers.get(request.app.state.settings.INIT_DATA_HEADER)
    return auth.authenticate(raw_payload)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


def get_current_user(session: SessionDep, identity: CurrentIdentity) -> User:
    """Authenticated user, created or renamed on the way in."""
    return get_or_create_user(session, identity.id, identity.display_name)


CurrentUser = Annotated[User, Depends(get_current_user)]
