"""Response models for the wavepipe API."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorPayload(BaseModel):
    """Error object returned by the server on failure."""

    code: int
    message: str


class Session(BaseModel):
    """Session issued by the login endpoint.

    Depending on server version a session carries a bare ``key``, a
    ``publicKey``/``secretKey`` pair, or both.
    """

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: int | None = None
    user_id: int | None = Field(None, alias='userId')
    key: str | None = None
    public_key: str | None = Field(None, alias='publicKey')
    secret_key: str | None = Field(None, alias='secretKey', repr=False)
    expire: int | None = None
    client: str | None = None

    @property
    def has_key(self) -> bool:
        return bool(self.key)

    @property
    def has_key_pair(self) -> bool:
        return bool(self.public_key) and self.secret_key is not None


class LoginResponse(BaseModel):
    """Envelope for ``/api/vX/login``."""

    error: ErrorPayload | None = None
    session: Session | None = None
