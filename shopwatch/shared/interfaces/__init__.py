"""
Shared interfaces for shopwatch.

Provides the collaborator contracts the alert subsystem depends on.
"""

from .collaborators import (
    UserStore,
    OfferSource,
    ChatClient,
    ItemCatalog,
    Translator,
)

__all__ = [
    'UserStore',
    'OfferSource',
    'ChatClient',
    'ItemCatalog',
    'Translator',
]
