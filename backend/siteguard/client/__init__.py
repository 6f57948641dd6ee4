from siteguard.client.api import ApiClient, ApiError
from siteguard.client.cache import QueryCache
from siteguard.client.context import AppContext
from siteguard.client.session import SiteGuardClient
from siteguard.client.storage import LocalStorage

__all__ = [
    "ApiClient",
    "ApiError",
    "AppContext",
    "LocalStorage",
    "QueryCache",
    "SiteGuardClient",
]
