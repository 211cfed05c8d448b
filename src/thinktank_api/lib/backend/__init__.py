"""Clients for the hosted backend: data store, auth, object storage and change feed."""

from thinktank_api.lib.backend.auth import SIGNED_IN, SIGNED_OUT, AuthClient, AuthSubscription, session_expired
from thinktank_api.lib.backend.changes import ChangeFeed, ChangeSubscription
from thinktank_api.lib.backend.client import DataStoreClient, Filter, Order, eq, neq
from thinktank_api.lib.backend.storage import ObjectStorage, create_storage_client

__all__ = [
    "SIGNED_IN",
    "SIGNED_OUT",
    "AuthClient",
    "AuthSubscription",
    "ChangeFeed",
    "ChangeSubscription",
    "DataStoreClient",
    "Filter",
    "ObjectStorage",
    "Order",
    "create_storage_client",
    "eq",
    "neq",
    "session_expired",
]
