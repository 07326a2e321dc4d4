from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class PasswordAuth(BaseModel):
    kind: Literal["password"] = "password"
    password: str


class KeyAuth(BaseModel):
    kind: Literal["key"] = "key"
    private_key: str
    passphrase: str | None = None


Auth = Annotated[Union[PasswordAuth, KeyAuth], Field(discriminator="kind")]


class ConnectionRequest(BaseModel):
    """Target host and credentials for one remote poll."""

    host: str
    port: int = 22
    username: str
    auth: Auth

    def __repr__(self) -> str:
        # Never echo credentials into logs
        return f"ConnectionRequest(host={self.host!r}, port={self.port}, username={self.username!r}, auth={self.auth.kind!r})"
