"""
Typed failures raised by the retrieval core.
Callers always see either a (possibly empty) result or one of these.
"""

from typing import Optional, Union

ItemId = Union[int, str]


class CatalogRagError(Exception):
    """Base exception for catalog retrieval operations."""
    pass


class InvalidInputError(CatalogRagError, ValueError):
    """A vector had the wrong dimension or non-finite values."""
    pass


class CatalogError(CatalogRagError, ValueError):
    """Catalog records failed validation at load time."""
    pass


class EmbedderError(CatalogRagError):
    """A single embedding call failed."""

    def __init__(self, message: str, item_id: Optional[ItemId] = None):
        self.item_id = item_id
        if item_id is not None:
            message = f"{message} (item_id={item_id!r})"
        super().__init__(message)


class EmbedderUnavailable(EmbedderError):
    """The embedding model could not be loaded or reached."""
    pass
