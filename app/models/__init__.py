from app.models.identity_provider import IdentityProvider

__all__ = [
    "IdentityProvider",
]
