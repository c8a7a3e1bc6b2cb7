"""
Business Logic Layer Module.

Orders, catalog, login and demo seeding, each built on a ``RecordStore``
handed in by the caller. ``StorefrontServices`` bundles them for the
dispatcher.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from storefront.dal import RecordStore
from storefront.logic.catalog_service import CatalogService
from storefront.logic.login_service import LoginService
from storefront.logic.order_service import OrderService
from storefront.logic.seed_service import SeedService
from storefront.security.credentials import CredentialVerifier
from storefront.security.tokens import TokenService


@dataclass(frozen=True)
class StorefrontServices:
    """Everything an action handler may use for one invocation."""

    orders: OrderService
    catalog: CatalogService
    login: LoginService
    seed: SeedService
    token_service: TokenService
    protected_actions: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        store: RecordStore,
        token_service: TokenService,
        credential_verifier: Optional[CredentialVerifier] = None,
        protected_actions: FrozenSet[str] = frozenset(),
    ) -> 'StorefrontServices':
        return cls(
            orders=OrderService(store),
            catalog=CatalogService(store),
            login=LoginService(store, token_service, credential_verifier),
            seed=SeedService(store),
            token_service=token_service,
            protected_actions=frozenset(protected_actions),
        )


__all__ = [
    "CatalogService",
    "LoginService",
    "OrderService",
    "SeedService",
    "StorefrontServices",
]
