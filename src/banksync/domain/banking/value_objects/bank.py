"""Bank descriptor value object."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Bank(BaseModel):
    """A bank as listed by the aggregation source."""

    id: str = Field(..., min_length=1, description="Vendor bank identifier")
    name: str = Field(..., description="Display name of the bank")
    country_code: str | None = Field(default=None, max_length=2)
    parent_name: str | None = Field(
        default=None,
        description="Name of the banking group the bank belongs to",
    )

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> object:
        return str(v) if isinstance(v, int) else v

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"
