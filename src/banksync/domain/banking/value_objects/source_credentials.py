"""Credentials for the banking-aggregation source."""

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class SourceCredentials(BaseModel):
    """
    Value object holding the login data for the aggregation source.

    The client id/secret identify this application at the source, the
    email/password identify the end user. Secrets are SecretStr values so
    they never end up in logs or reprs.
    """

    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr
    email: str = Field(..., min_length=1)
    password: SecretStr
    device: str = Field(default="", description="Device id sent on login")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"SourceCredentials(client_id={self.client_id}, email={self.email})"

    @classmethod
    def from_plain(  # noqa: PLR0913
        cls,
        client_id: str,
        client_secret: str,
        email: str,
        password: str,
        device: str = "",
    ) -> "SourceCredentials":
        """Create SourceCredentials from plain strings."""
        return cls(
            client_id=client_id,
            client_secret=SecretStr(client_secret),
            email=email,
            password=SecretStr(password),
            device=device,
        )
