from app.repositories.identity_provider_repository import IdentityProviderRepository

__all__ = [
    "IdentityProviderRepository",
]
