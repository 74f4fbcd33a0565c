import os
from enum import Enum
from typing import Dict, Optional

from azure.cosmos.aio import ContainerProxy, CosmosClient
from azure.identity.aio import DefaultAzureCredential

from catalog_api.exceptions import ConfigurationError
from catalog_api.logging_config import get_child_logger
from catalog_api.store.base import RecordStore
from catalog_api.store.cosmos_store import CosmosRecordStore
from catalog_api.store.memory_store import InMemoryRecordStore

logger = get_child_logger("db")


class ContainerType(str, Enum):
    PRODUCTS = "products"
    PARTIES = "parties"


_client: Optional[CosmosClient] = None
_credential: Optional[DefaultAzureCredential] = None
_stores: Dict[ContainerType, RecordStore] = {}

CONTAINER_SETTINGS = {
    ContainerType.PRODUCTS: "COSMOSDB_CONTAINER_PRODUCTS",
    ContainerType.PARTIES: "COSMOSDB_CONTAINER_PARTIES",
}


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ConfigurationError(f"{name} environment variable must be set")
    return value


async def _ensure_client() -> CosmosClient:
    global _client, _credential
    if _client is None:
        endpoint = _require_env("COSMOSDB_ENDPOINT")
        logger.info("Creating CosmosDB client with DefaultAzureCredential")
        _credential = DefaultAzureCredential()
        _client = CosmosClient(endpoint, _credential)
    return _client


async def get_container(container_type: ContainerType) -> ContainerProxy:
    setting = CONTAINER_SETTINGS.get(container_type)
    if not setting:
        raise ConfigurationError(
            f"Container '{container_type}' not configured. "
            f"Valid options: {[c.value for c in CONTAINER_SETTINGS]}"
        )
    container_name = os.environ.get(setting, container_type.value)

    client = await _ensure_client()
    database = client.get_database_client(_require_env("COSMOSDB_DATABASE"))
    return database.get_container_client(container_name)


async def get_store(container_type: ContainerType) -> RecordStore:
    """
    Return the record store for a resource type.

    CATALOG_STORE_BACKEND selects "memory" (default) or "cosmos". Stores are
    created once per process.
    """
    store = _stores.get(container_type)
    if store is not None:
        return store

    backend = os.environ.get("CATALOG_STORE_BACKEND", "memory").lower()
    if backend == "memory":
        store = InMemoryRecordStore(container_type.value)
    elif backend == "cosmos":
        store = CosmosRecordStore(await get_container(container_type), container_type.value)
    else:
        raise ConfigurationError(
            f"Unknown CATALOG_STORE_BACKEND '{backend}'. Valid options: ['memory', 'cosmos']"
        )

    logger.info(
        "Record store ready",
        extra={"container": container_type.value, "backend": backend},
    )
    _stores[container_type] = store
    return store


async def close() -> None:
    global _client, _credential
    _stores.clear()
    if _client is not None:
        await _client.close()
        _client = None
    if _credential is not None:
        await _credential.close()
        _credential = None
