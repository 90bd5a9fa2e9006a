"""
In-memory embedding index over a product catalog.
Built in one pass, read-only afterwards; a changed catalog needs a full rebuild.
"""

from typing import Callable, Iterable, Iterator, Optional, Sequence, Tuple

from ..core.errors import EmbedderError, InvalidInputError
from ..core.schema import Item
from ..util.logging import logger
from .similarity import VectorLike
from .types import IndexEntry, ItemId

EmbedFn = Callable[[str], VectorLike]


def build_embedding_text(item: Item) -> str:
    """Text embedded for an item: name, description and tags."""
    return f"{item.name}. {item.description}. Tags: {', '.join(item.tags)}"


def embed_catalog(catalog: Iterable[Item], embed: EmbedFn) -> Iterator[IndexEntry]:
    """
    Embed each catalog item once, yielding index entries in catalog order.

    Raises:
        EmbedderError: if embedding an item fails or returns a vector whose
            dimension differs from the earlier ones; carries the item id
    """
    dimension = None
    for item in catalog:
        text = build_embedding_text(item)
        try:
            raw = embed(text)
        except EmbedderError as e:
            if e.item_id is not None:
                raise
            raise type(e)(str(e), item_id=item.id) from e
        except Exception as e:
            raise EmbedderError(f"Embedding failed: {e}", item_id=item.id) from e

        try:
            entry = IndexEntry(item_id=item.id, vector=raw)
        except InvalidInputError as e:
            raise EmbedderError(f"Embedder returned a malformed vector: {e}", item_id=item.id) from e

        if dimension is None:
            dimension = entry.dimension
        elif entry.dimension != dimension:
            raise EmbedderError(
                f"Embedder returned dimension {entry.dimension}, expected {dimension}",
                item_id=item.id
            )
        yield entry


class EmbeddingIndex:
    """Mapping from item id to embedding, iterated in build order."""

    def __init__(self, entries: Iterable[IndexEntry] = (), ready: bool = True):
        by_id = {}
        dimension = None
        for entry in entries:
            if dimension is None:
                dimension = entry.dimension
            elif entry.dimension != dimension:
                raise InvalidInputError(
                    f"Index entry {entry.item_id!r} has dimension {entry.dimension}, expected {dimension}"
                )
            # Same id twice keeps one entry, the later vector wins
            by_id[entry.item_id] = entry

        self._by_id = by_id
        self._entries = tuple(by_id.values())
        self._dimension = dimension
        self._ready = ready

    @classmethod
    def empty(cls) -> "EmbeddingIndex":
        """Placeholder for a service that has not built an index yet."""
        return cls((), ready=False)

    @classmethod
    def build(cls, catalog: Sequence[Item], embed: EmbedFn) -> "EmbeddingIndex":
        """
        Build an index over the whole catalog.

        Either every item is embedded or the EmbedderError propagates and no
        index is produced.
        """
        try:
            entries = list(embed_catalog(catalog, embed))
        except EmbedderError as e:
            logger.log_index_build(len(catalog), status="failed", details={"item_id": e.item_id, "error": str(e)})
            raise

        index = cls(entries)
        logger.log_index_build(len(index), index.dimension)
        return index

    def is_ready(self) -> bool:
        return self._ready

    def entries(self) -> Tuple[IndexEntry, ...]:
        """Immutable view of all entries in build order."""
        return self._entries

    def get(self, item_id: ItemId) -> Optional[IndexEntry]:
        return self._by_id.get(item_id)

    @property
    def dimension(self) -> Optional[int]:
        """Vector dimension, None for an index without entries."""
        return self._dimension

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item_id) -> bool:
        return item_id in self._by_id

    def __repr__(self) -> str:
        return f"EmbeddingIndex(entries={len(self)}, dimension={self._dimension}, ready={self._ready})"
