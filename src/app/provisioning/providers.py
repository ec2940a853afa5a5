"""Preference-ordered provider selection: the first enabled provider wins."""

from typing import Optional, Sequence, TypeVar

from src.app.provisioning.errors import NoProviderConfigured
from src.app.services.provider import IProvider

P = TypeVar("P", bound=IProvider)


def first_enabled(providers: Sequence[P]) -> Optional[P]:
    for provider in providers:
        if provider.enabled:
            return provider
    return None


def select_provider(providers: Sequence[P], provider_type: str) -> P:
    provider = first_enabled(providers)
    if provider is None:
        raise NoProviderConfigured(provider_type)
    return provider
