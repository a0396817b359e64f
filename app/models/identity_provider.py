from pydantic import BaseModel, Field


class IdentityProvider(BaseModel):
    id: str = ""
    name: str = ""
    description: str = ""
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    scopes: list[str] = Field(default_factory=list)
