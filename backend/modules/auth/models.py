"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime, timedelta
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AuthMode(str, Enum):
    """Identity API operation used to obtain a session."""

    SIGN_UP = "signUp"
    SIGN_IN = "signInWithPassword"


class UserSession(BaseModel):
    """
    An authenticated principal on this client.

    Created on sign-in/sign-up, refreshed in place (new tokens and expiry,
    same uid and email), destroyed on sign-out or failed refresh.
    Serialized with camelCase keys when persisted.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    uid: str = Field(..., description="Principal id from the identity provider")
    email: str = Field(..., description="Email the user signed in with")
    id_token: str = Field(..., description="Short-lived bearer token")
    refresh_token: str = Field(..., description="Token exchanged for a new bearer token")
    expires_at: datetime = Field(..., description="Absolute expiry of id_token (UTC)")

    def expires_within(self, margin: timedelta, now: datetime) -> bool:
        """True when the bearer token expires less than `margin` after `now`."""
        return self.expires_at - now <= margin


class Credentials(BaseModel):
    """Email/password pair submitted to the identity API."""

    email: str = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")
