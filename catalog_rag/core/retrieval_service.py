"""
Retrieval service: semantic catalog search with a text-match fallback.

The service owns one embedding index and one readiness state. It starts
UNINITIALIZED, moves to INITIALIZING while the index is built, and settles in
READY (semantic search) or DEGRADED (case-insensitive substring search over
name and description only, catalog order, no scores). DEGRADED is never left
automatically; call initialize() again to retry.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence

from .config import get_default_top_k, get_embedding_provider, get_init_wait_timeout, is_auto_initialize_enabled
from .errors import EmbedderError, EmbedderUnavailable
from .schema import Item
from ..util.logging import logger
from ..vector.embeddings import IEmbeddingProvider
from ..vector.index import EmbeddingIndex, embed_catalog
from ..vector.ranker import rank


class ServiceState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    DEGRADED = "degraded"


class StatusStage(str, Enum):
    LOADING_MODEL = "loading_model"
    MODEL_LOADED = "model_loaded"
    EMBEDDING = "embedding"
    READY = "ready"
    ERROR = "error"
    IN_PROGRESS = "in_progress"


@dataclass(frozen=True)
class StatusEvent:
    """Human-readable progress report emitted during initialization."""

    stage: StatusStage
    message: str
    current: Optional[int] = None
    total: Optional[int] = None
    error: Optional[str] = None


def substring_search(query_text: str, catalog: Iterable[Item]) -> List[Item]:
    """
    Case-insensitive substring filter over item name and description.

    Results keep catalog order and carry no score. Tags are not searched.
    """
    needle = query_text.strip().casefold()
    return [
        item for item in catalog
        if needle in item.name.casefold() or needle in item.description.casefold()
    ]


class RetrievalService:
    """
    Semantic search over a product catalog.

    Construct one per session and pass it to whatever needs to search.
    """

    def __init__(self, embedder: Optional[IEmbeddingProvider] = None, *,
                 default_top_k: Optional[int] = None, auto_initialize: Optional[bool] = None):
        self.embedder = embedder if embedder is not None else get_embedding_provider()
        self.default_top_k = default_top_k if default_top_k is not None else get_default_top_k()
        self.auto_initialize = is_auto_initialize_enabled() if auto_initialize is None else auto_initialize

        self._lock = threading.Lock()
        self._state = ServiceState.UNINITIALIZED
        self._index = EmbeddingIndex.empty()
        self._failure_reason: Optional[str] = None
        self._events: List[StatusEvent] = []
        self._auto_started = False
        self._thread: Optional[threading.Thread] = None

        # Set whenever no initialization is in progress
        self._settled = threading.Event()
        self._settled.set()

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == ServiceState.READY

    @property
    def is_degraded(self) -> bool:
        return self._state == ServiceState.DEGRADED

    @property
    def failure_reason(self) -> Optional[str]:
        """Why the last initialization failed, None unless DEGRADED."""
        return self._failure_reason

    @property
    def index(self) -> EmbeddingIndex:
        return self._index

    @property
    def status_events(self):
        """Every status event emitted so far, oldest first."""
        return tuple(self._events)

    @property
    def last_status(self) -> Optional[StatusEvent]:
        return self._events[-1] if self._events else None

    def _emit(self, stage: StatusStage, message: str, **kwargs) -> StatusEvent:
        event = StatusEvent(stage=stage, message=message, **kwargs)
        self._events.append(event)
        logger.log_status_event(stage.value, message)
        return event

    def _load_embedder(self) -> None:
        try:
            self.embedder.load()
        except EmbedderError:
            raise
        except Exception as e:
            raise EmbedderUnavailable(f"Embedder failed to load: {e}") from e

    def _build_events(self, items: Sequence[Item], entries: List) -> Iterator[StatusEvent]:
        # An empty catalog needs no model
        if not items:
            return

        yield self._emit(StatusStage.LOADING_MODEL, "Loading embedding model...")
        self._load_embedder()
        yield self._emit(StatusStage.MODEL_LOADED, "Model loaded.")

        total = len(items)
        for position, entry in enumerate(embed_catalog(items, self.embedder.embed_text), start=1):
            entries.append(entry)
            yield self._emit(StatusStage.EMBEDDING, f"Embedding item {position}/{total}",
                             current=position, total=total)

    def initialize_events(self, catalog: Iterable[Item]) -> Iterator[StatusEvent]:
        """
        Build the index, yielding status events as it goes.

        Nothing happens until the generator is iterated. Embedder failures end
        in DEGRADED with an ERROR event rather than an exception. If the
        consumer stops iterating early, no partial index is installed and the
        previous state is restored.
        """
        with self._lock:
            busy = self._state == ServiceState.INITIALIZING
            if not busy:
                previous = (self._state, self._index, self._failure_reason)
                self._state = ServiceState.INITIALIZING
                self._failure_reason = None
                self._settled.clear()

        if busy:
            yield self._emit(StatusStage.IN_PROGRESS, "Initialization already in progress.")
            return

        committed = False
        try:
            items = list(catalog)
            entries = []
            failure = None
            try:
                yield from self._build_events(items, entries)
            except EmbedderError as e:
                failure = e

            if failure is None:
                index = EmbeddingIndex(entries)
                with self._lock:
                    self._index = index
                    self._state = ServiceState.READY
                    committed = True
                self._settled.set()
                logger.log_index_build(len(index), index.dimension)
                yield self._emit(StatusStage.READY, "RAG System Ready.")
            else:
                with self._lock:
                    self._index = EmbeddingIndex.empty()
                    self._state = ServiceState.DEGRADED
                    self._failure_reason = str(failure)
                    committed = True
                self._settled.set()
                logger.log_index_build(len(items), status="failed", details={
                    "item_id": failure.item_id,
                    "error": str(failure)
                })
                yield self._emit(StatusStage.ERROR, "Error loading AI, using text search.", error=str(failure))
        finally:
            if not committed:
                with self._lock:
                    self._state, self._index, self._failure_reason = previous
                self._settled.set()
                logger.warning("Initialization abandoned before completion; previous state restored")

    def initialize(self, catalog: Iterable[Item]) -> ServiceState:
        """Build the index to completion and return the resulting state."""
        for _ in self.initialize_events(catalog):
            pass
        return self._state

    def start_background_initialize(self, catalog: Iterable[Item]) -> Optional[threading.Thread]:
        """Run initialize() on a daemon thread. Returns None if one is already running."""
        items = list(catalog)
        with self._lock:
            return self._start_thread_locked(items)

    def _start_thread_locked(self, items: Sequence[Item]) -> Optional[threading.Thread]:
        # Caller holds self._lock
        if self._state == ServiceState.INITIALIZING:
            return None
        if self._thread is not None and self._thread.is_alive():
            return None

        thread = threading.Thread(target=self.initialize, args=(items,),
                                  name="catalog-rag-initialize", daemon=True)
        self._settled.clear()
        try:
            thread.start()
        except Exception:
            self._settled.set()
            raise
        self._thread = thread
        return thread

    def wait_until_settled(self, timeout: Optional[float] = None) -> bool:
        """Block until no initialization is in progress. False on timeout."""
        return self._settled.wait(timeout)

    def _maybe_auto_initialize(self, items: Sequence[Item]) -> None:
        with self._lock:
            if self._auto_started or self._state != ServiceState.UNINITIALIZED:
                return
            self._auto_started = True
            logger.info("Starting automatic index initialization")
            self._start_thread_locked(items)

    def search(self, query_text: str, catalog: Iterable[Item], k: Optional[int] = None, *,
               wait: bool = False) -> List[Item]:
        """
        Search the catalog.

        Args:
            query_text: Free text query; blank returns the whole catalog
            catalog: Current catalog, results are drawn from it
            k: Maximum number of semantic results, defaults to DEFAULT_TOP_K
            wait: Block (up to INIT_WAIT_TIMEOUT_SEC) for a running initialization

        Returns:
            Items ranked by similarity when READY; otherwise substring matches
            in catalog order (a weaker, unranked result)

        Raises:
            EmbedderError: if embedding the query fails while READY
        """
        items = list(catalog)
        query = (query_text or "").strip()
        if not query:
            logger.log_search(query, "all", len(items))
            return items

        if self.auto_initialize and self._state == ServiceState.UNINITIALIZED:
            self._maybe_auto_initialize(items)

        if wait:
            self.wait_until_settled(get_init_wait_timeout())

        with self._lock:
            state = self._state
            index = self._index

        if state == ServiceState.READY:
            return self._semantic_search(query, items, index, self.default_top_k if k is None else k)

        results = substring_search(query, items)
        logger.log_search(query, "substring", len(results), {"state": state.value})
        return results

    def _semantic_search(self, query: str, items: List[Item], index: EmbeddingIndex, k: int) -> List[Item]:
        if len(index) == 0 or k <= 0:
            logger.log_search(query, "semantic", 0)
            return []

        try:
            query_vector = self.embedder.embed_text(query)
        except EmbedderError:
            raise
        except Exception as e:
            raise EmbedderError(f"Query embedding failed: {e}") from e

        ranked_ids = rank(query_vector, index, k)

        # Items removed from the catalog since the build are dropped
        by_id = {item.id: item for item in items}
        results = [by_id[item_id] for item_id in ranked_ids if item_id in by_id]
        logger.log_search(query, "semantic", len(results), {"k": k})
        return results
