from app.dtos.identity_provider_dtos import IdentityProviderSummaryDTO

__all__ = [
    "IdentityProviderSummaryDTO",
]
