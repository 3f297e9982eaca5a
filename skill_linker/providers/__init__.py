from skill_linker.providers.catalog import (
    PROVIDER_CATALOG,
    ProviderId,
    ProviderMetadata,
    provider_label,
    provider_metadata,
    provider_names,
)
from skill_linker.providers.registry import ProviderDefinition, ProviderRegistry

__all__ = [
    "PROVIDER_CATALOG",
    "ProviderDefinition",
    "ProviderId",
    "ProviderMetadata",
    "ProviderRegistry",
    "provider_label",
    "provider_metadata",
    "provider_names",
]
