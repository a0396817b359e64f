from app.services.identity_provider_service import IdentityProviderService

__all__ = [
    "IdentityProviderService",
]
