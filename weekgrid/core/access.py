"""Access gate: signature verification, identity extraction and the allow-list.

The authentication mode is picked once, at startup, from whether a bot token
is configured. ``SignedInitDataAuth`` is the only mode reachable when a token
exists; ``UnverifiedAuth`` can only be built without one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Union

from weekgrid.core.config import Settings
from weekgrid.core.errors import AuthError, AuthorizationDenied, InputError
from weekgrid.core.identity import Identity, extract_identity
from weekgrid.core.security import verify_init_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessPolicy:
    """Allow-list of Telegram user ids. An empty list admits everyone."""

    allowed_ids: FrozenSet[int] = frozenset()

    @property
    def enabled(self) -> bool:
        return bool(self.allowed_ids)

    def authorize(self, identity: Identity) -> bool:
        if not self.allowed_ids:
            return True
        return identity.id in self.allowed_ids


def _admit(policy: AccessPolicy, identity: Identity) -> Identity:
    if not policy.authorize(identity):
        logger.error(f"User not whitelisted: {identity.id}")
        raise AuthorizationDenied()
    return identity


@dataclass(frozen=True)
class SignedInitDataAuth:
    """Production mode: every request must carry init data signed with the bot token."""

    secret: str = field(repr=False)
    policy: AccessPolicy = AccessPolicy()

    def authenticate(self, raw_payload: Optional[str]) -> Identity:
        if not raw_payload:
            raise AuthError("Missing Telegram init data")
        if not verify_init_data(raw_payload, self.secret):
            raise AuthError("Invalid Telegram init data")
        identity = extract_identity(raw_payload)
        if identity is None:
            raise InputError("Invalid user data")
        return _admit(self.policy, identity)


@dataclass(frozen=True)
class UnverifiedAuth:
    """Development mode, only selectable when no bot token is configured.

    Requests without init data act as ``placeholder``, which bypasses the
    allow-list. Init data that is present is decoded without a signature check
    and still goes through the allow-list.
    """

    policy: AccessPolicy = AccessPolicy()
    placeholder: Identity = Identity(id=999999, display_name="Test User")

    def authenticate(self, raw_payload: Optional[str]) -> Identity:
        if not raw_payload:
            return self.placeholder
        identity = extract_identity(raw_payload)
        if identity is None:
            raise InputError("Invalid user data")
        return _admit(self.policy, identity)


AuthConfig = Union[SignedInitDataAuth, UnverifiedAuth]


def build_auth_config(settings: Settings) -> AuthConfig:
    policy = AccessPolicy(allowed_ids=frozenset(settings.ALLOWED_USER_IDS))
    if policy.enabled:
        logger.info(f"Whitelist enabled: {len(policy.allowed_ids)} user(s) allowed")

    if settings.BOT_TOKEN is not None:
        return SignedInitDataAuth(secret=settings.BOT_TOKEN, policy=policy)

    logger.warning("Development mode: Telegram verification disabled (BOT_TOKEN not set)")
    return UnverifiedAuth(
        policy=policy,
        placeholder=Identity(id=settings.DEV_USER_ID, display_name=settings.DEV_USER_NAME),
    )
