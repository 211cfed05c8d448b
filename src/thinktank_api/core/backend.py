"""Backend collaborator lifecycle.

Creates the shared HTTP client, the data store, auth and storage clients,
the change feed, the session resolver and the publication cache once per
process, and releases them on shutdown.
"""

from dataclasses import dataclass
from typing import Any

import httpx

from thinktank_api.core.config import Settings
from thinktank_api.lib.backend import AuthClient, ChangeFeed, DataStoreClient, ObjectStorage, create_storage_client
from thinktank_api.services.publication_service import PublicationCache
from thinktank_api.services.session_resolver import SessionResolver


@dataclass
class Backend:
    """Everything that talks to the hosted backend."""

    http: httpx.AsyncClient
    data_store: DataStoreClient
    auth: AuthClient
    storage: ObjectStorage
    changes: ChangeFeed
    resolver: SessionResolver
    publications: PublicationCache
    service_store: DataStoreClient | None = None

    async def close(self) -> None:
        self.publications.close()
        self.resolver.close()
        await self.http.aclose()


_backend: Backend | None = None


def build_backend(
    settings: Settings,
    *,
    http: httpx.AsyncClient | None = None,
    storage_client: Any = None,
) -> Backend:
    """Create a ``Backend`` from settings.

    Args:
        settings: Application settings.
        http: Optional pre-built HTTP client (tests pass one with a mock transport).
        storage_client: Optional pre-built boto3 S3 client.

    Returns:
        The assembled backend.
    """
    http = http or httpx.AsyncClient(base_url=settings.backend_url, timeout=settings.backend_timeout)
    if storage_client is None:
        storage_client = create_storage_client(
            settings.resolved_storage_endpoint,
            settings.storage_access_key_id,
            settings.storage_secret_access_key,
            settings.storage_region,
        )
    auth = AuthClient(http, settings.backend_anon_key)
    changes = ChangeFeed()
    service_store = None
    if settings.backend_service_key:
        service_store = DataStoreClient(http, settings.backend_service_key)
    return Backend(
        http=http,
        data_store=DataStoreClient(http, settings.backend_anon_key),
        auth=auth,
        storage=ObjectStorage(storage_client, settings.resolved_storage_public_url),
        changes=changes,
        resolver=SessionResolver(auth, settings.session_lookup_timeout),
        publications=PublicationCache(changes, ttl_seconds=settings.publication_cache_ttl_seconds),
        service_store=service_store,
    )


def get_backend() -> Backend:
    """Return the process-wide backend.

    Raises:
        RuntimeError: If the backend has not been initialized.
    """
    if _backend is None:
        msg = "Backend not initialized. Call init_backend() first."
        raise RuntimeError(msg)
    return _backend


def init_backend(settings: Settings, **kwargs: Any) -> Backend:
    """Build and store the process-wide backend."""
    global _backend  # noqa: PLW0603
    _backend = build_backend(settings, **kwargs)
    return _backend


async def dispose_backend() -> None:
    """Close the process-wide backend's clients."""
    global _backend  # noqa: PLW0603
    if _backend is not None:
        await _backend.close()
        _backend = None
