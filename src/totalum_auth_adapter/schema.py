"""Typed views of the auth library's core records.

Field names follow the contract casing through aliases, so
``User.model_validate(record)`` accepts what the adapter returns and
``model_dump(by_alias=True)`` produces what it accepts.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AuthRecord(BaseModel):
    """Base for auth records: an id plus Totalum's audit timestamps."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class User(AuthRecord):
    name: str
    email: str
    email_verified: bool = False
    image: str | None = None


class Session(AuthRecord):
    user_id: str
    token: str
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None


class Account(AuthRecord):
    user_id: str
    account_id: str
    provider_id: str
    access_token: str | None = None
    refresh_token: str | None = None
    id_token: str | None = None
    access_token_expires_at: datetime | None = None
    refresh_token_expires_at: datetime | None = None
    scope: str | None = None
    password: str | None = None


class Verification(AuthRecord):
    identifier: str
    value: str
    expires_at: datetime


AUTH_MODELS: dict[str, type[AuthRecord]] = {
    "user": User,
    "session": Session,
    "account": Account,
    "verification": Verification,
}
