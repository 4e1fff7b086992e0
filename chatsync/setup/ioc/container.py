"""
Dishka DI Container Setup.

Every component lives for the whole client session (Scope.APP):
- CacheStore: the single owned cache instance
- QueryCoordinator / MutationPipeline / InvalidationRouter: the sync engine
- MessagingClient: facade for the rendering layer
- BackendPort: provided separately so tests and embedders can swap transports

The signed-in principal is container context, supplied at creation.

Flow:
  create_container(principal) → container.get(MessagingClient)
        ↓
  MessagingClient ← QueryCoordinator ← CacheStore
                  ← MutationPipeline ← InvalidationRouter, BackendPort

Closing the container closes the client (stop polling, clear cache) and then
the HTTP transport.
"""

from typing import AsyncIterable, Optional

from dishka import AsyncContainer, Provider, Scope, from_context, make_async_container, provide

from chatsync.application.messaging_client import MessagingClient
from chatsync.application.queries import build_query_definitions
from chatsync.application.sync.invalidation_router import InvalidationRouter
from chatsync.application.sync.mutation_pipeline import MutationPipeline
from chatsync.application.sync.query_coordinator import QueryCoordinator
from chatsync.config.settings import Config
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.principal_id import PrincipalId
from chatsync.infrastructure.cache.cache_store import CacheStore
from chatsync.infrastructure.transport.http_backend import HttpBackend


class AppProvider(Provider):
    """
    Sync engine provider.

    Registers the cache store, the sync components and the client facade.
    """

    principal = from_context(provides=PrincipalId, scope=Scope.APP)

    # ==================== CACHE ====================
    @provide(scope=Scope.APP)
    def get_cache_store(self) -> CacheStore:
        return CacheStore()

    # ==================== SYNC ENGINE ====================
    @provide(scope=Scope.APP)
    def get_invalidation_router(self, store: CacheStore) -> InvalidationRouter:
        return InvalidationRouter(store)

    @provide(scope=Scope.APP)
    def get_query_coordinator(self, store: CacheStore, backend: BackendPort) -> QueryCoordinator:
        return QueryCoordinator(store, build_query_definitions(backend))

    @provide(scope=Scope.APP)
    def get_mutation_pipeline(
        self, store: CacheStore, router: InvalidationRouter, backend: BackendPort
    ) -> MutationPipeline:
        return MutationPipeline(store, router, backend)

    # ==================== CLIENT ====================
    @provide(scope=Scope.APP)
    async def get_messaging_client(
        self,
        principal: PrincipalId,
        backend: BackendPort,
        store: CacheStore,
        coordinator: QueryCoordinator,
        pipeline: MutationPipeline,
        router: InvalidationRouter,
    ) -> AsyncIterable[MessagingClient]:
        client = MessagingClient(principal, backend, store, coordinator, pipeline, router)
        yield client
        await client.close()


class HttpBackendProvider(Provider):
    """Provides the httpx transport (app-scoped, closed with the container)."""

    @provide(scope=Scope.APP)
    async def get_backend(self) -> AsyncIterable[BackendPort]:
        backend = HttpBackend(
            base_url=Config.BACKEND_URL,
            timeout=Config.BACKEND_API_TIMEOUT,
            retry_after=Config.BACKEND_RETRY_SECONDS,
        )
        yield backend
        await backend.aclose()


def create_container(
    principal: PrincipalId, backend_provider: Optional[Provider] = None
) -> AsyncContainer:
    """
    Build the session container.

    Args:
        principal: Signed-in user
        backend_provider: Provider of BackendPort; defaults to HttpBackendProvider
    """
    return make_async_container(
        AppProvider(),
        backend_provider or HttpBackendProvider(),
        context={PrincipalId: principal},
    )
