"""User login session returned by a successful code exchange."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

from pyminapp._crypto.encoding import decode_b64
from pyminapp.models.session import Code2SessionResponse


class Session(BaseModel):
    """Immutable result of exchanging a login code.

    The platform does not report how long a session key stays valid, so
    no expiry is tracked here; persistence and lifetime are up to the
    caller.

    Parameters
    ----------
    openid : str
        The user's identifier within this mini-program.
    session_key : str
        Base64 session key exactly as returned by the platform.  Used to
        decrypt payloads the client encrypts for this user.
    unionid : str or None
        Cross-application identifier, only present when the app is bound
        to an open-platform account.
    created_at : float
        Wall-clock timestamp (``time.time()``) when the session was created.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    openid: str = Field(min_length=1)
    session_key: str = Field(min_length=1, repr=False)
    unionid: str | None = None
    created_at: float = Field(default_factory=time.time)

    @classmethod
    def from_response(cls, response: Code2SessionResponse) -> Session:
        return cls(
            openid=response.openid,
            session_key=response.session_key,
            unionid=response.unionid,
        )

    def session_key_bytes(self) -> bytes:
        """Decoded 16-byte AES key.

        Raises
        ------
        MinappDecryptError
            If the stored key is not valid base64 of the right length.
        """
        return decode_b64(self.session_key, name="session_key", expected_len=16)

    @property
    def age(self) -> float:
        """Seconds since the session was created."""
        return time.time() - self.created_at
