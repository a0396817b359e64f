from pydantic import BaseModel, Field


class IdentityProviderSummaryDTO(BaseModel):
    """List projection of an identity provider; never carries credentials."""

    id: str
    name: str
    description: str
    client_id: str
    scopes: list[str] = Field(default_factory=list)
