"""
Service Container - Dependency Injection Container

Holds the document store and catalog and hands out services built on them.
Services are lazy-loaded on first access.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from quizhub.db.document_store import DocumentStore
from quizhub.gamification.catalog import DEFAULT_CATALOG, Catalog

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Infrastructure dependencies (store, catalog) are injected.
    """

    store: DocumentStore
    catalog: Catalog = DEFAULT_CATALOG

    _gamification_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def gamification_service(self):
        """Get GamificationService instance (lazy-loaded)"""
        if self._gamification_service is None:
            from quizhub.services.gamification_service import GamificationService
            self._gamification_service = GamificationService(self.store, self.catalog)
            logger.debug("GamificationService instantiated")
        return self._gamification_service


# Global container instance (initialized at application startup)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() at startup before using services."
        )
    return _container


def init_container(store: DocumentStore, catalog: Catalog = DEFAULT_CATALOG) -> ServiceContainer:
    """
    Initialize the global service container.

    Args:
        store: Document store instance
        catalog: Achievement and badge catalog

    Returns:
        ServiceContainer: The initialized container
    """
    global _container

    _container = ServiceContainer(store=store, catalog=catalog)

    logger.info("Service container initialized")
    return _container
