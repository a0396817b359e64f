from pydantic import BaseModel, ConfigDict, Field

from app.models.identity_provider import IdentityProvider


class IdentityProviderRequest(BaseModel):
    """Create and update body. A client-supplied ``id`` is accepted but never used."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str = ""
    description: str = ""
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    scopes: list[str] | None = Field(
        None, description="Ordered scope names, e.g. ['user:email', 'read:user']"
    )

    def to_model(self) -> IdentityProvider:
        return IdentityProvider(
            id=self.id or "",
            name=self.name,
            description=self.description,
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uri=self.redirect_uri,
            scopes=self.scopes or [],
        )


class IdentityProviderResponse(BaseModel):
    id: str
    name: str
    description: str
    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: list[str]


class IdentityProviderDetailResponse(BaseModel):
    id: str
    name: str
    description: str
    client_id: str
    redirect_uri: str
    scopes: list[str]


class IdentityProviderListItemResponse(BaseModel):
    id: str
    name: str
    description: str
    client_id: str
    scopes: list[str]
