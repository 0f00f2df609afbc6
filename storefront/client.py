"""Client-side composition root.

Everything the presentation layer needs is built once here and handed out
through the `Storefront` object; nothing is looked up globally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .common.utils.money import format_price
from .config import StorefrontConfig
from .services import (
    AccountService,
    ApiClient,
    AuthSessionManager,
    CartStore,
    CatalogClient,
    CheckoutFlow,
    Navigator,
    Notifier,
    OrderClient,
    QueryCache,
    RouteGuard,
    TokenStore,
)


@dataclass
class Storefront:
    config: StorefrontConfig
    api: ApiClient
    navigator: Navigator
    notifier: Notifier
    queries: QueryCache
    auth: AuthSessionManager
    guard: RouteGuard
    cart: CartStore
    catalog: CatalogClient
    orders: OrderClient
    account: AccountService

    def start(self) -> None:
        """Resolve any persisted token; the cart follows the session."""
        self.auth.validate_token()

    def checkout(self) -> CheckoutFlow:
        """A fresh wizard bound to this storefront's session and cart."""
        return CheckoutFlow(
            self.api,
            self.auth,
            self.cart,
            self.navigator,
            notifier=self.notifier,
            query_cache=self.queries,
        )

    def format_price(self, amount) -> str:
        return format_price(amount, self.config.currency)

    def close(self) -> None:
        self.cart.close()


def create_storefront(
    config: Optional[StorefrontConfig] = None,
    *,
    token_store=None,
    http=None,
    navigator: Optional[Navigator] = None,
    notifier: Optional[Notifier] = None,
) -> Storefront:
    config = config or StorefrontConfig.load()
    tokens = token_store if token_store is not None else TokenStore(config.token_file)
    api = ApiClient(config.api_base_url, tokens, timeout=config.request_timeout, http=http)
    navigator = navigator or Navigator()
    notifier = notifier or Notifier()
    queries = QueryCache(retry=1)
    auth = AuthSessionManager(api, tokens, navigator, query_cache=queries, notifier=notifier)
    return Storefront(
        config=config,
        api=api,
        navigator=navigator,
        notifier=notifier,
        queries=queries,
        auth=auth,
        guard=RouteGuard(auth, navigator),
        cart=CartStore(api, auth, navigator),
        catalog=CatalogClient(api, queries),
        orders=OrderClient(api, queries),
        account=AccountService(api, auth, queries, notifier=notifier),
    )
