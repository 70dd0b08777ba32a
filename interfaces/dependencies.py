"""FastAPI dependency injection integration with Lagom."""

from functools import lru_cache

from lagom import Container

from infrastructure.di.container import create_container


@lru_cache
def get_container() -> Container:
    """Get the DI container instance.

    Cached so the process owns exactly one set of store clients.
    """
    return create_container()
