"""
Semantic product search over a small catalog.
Exact cosine top-K over item embeddings, with a text-match fallback when the
embedding model is unavailable.
"""

from .core.config import VERSION
from .core.errors import (
    CatalogError,
    CatalogRagError,
    EmbedderError,
    EmbedderUnavailable,
    InvalidInputError,
)
from .core.retrieval_service import (
    RetrievalService,
    ServiceState,
    StatusEvent,
    StatusStage,
    substring_search,
)
from .core.schema import Item, load_catalog, parse_catalog

__version__ = VERSION

__all__ = [
    'CatalogError',
    'CatalogRagError',
    'EmbedderError',
    'EmbedderUnavailable',
    'InvalidInputError',
    'RetrievalService',
    'ServiceState',
    'StatusEvent',
    'StatusStage',
    'substring_search',
    'Item',
    'load_catalog',
    'parse_catalog',
]
