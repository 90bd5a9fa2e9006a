#!/usr/bin/env python3
"""
Catalog search utility.
Loads a products.json catalog, builds the embedding index while printing
status events, then runs one or more queries against it.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog_rag.core.config import (
    HASH_PROVIDER,
    SENTENCE_TRANSFORMERS_PROVIDER,
    get_catalog_path,
    get_default_top_k,
    get_embed_dim,
    get_embed_model_name,
    get_embedding_provider,
    validate_config,
)
from catalog_rag.core.errors import CatalogError, EmbedderError
from catalog_rag.core.retrieval_service import RetrievalService, ServiceState
from catalog_rag.core.schema import load_catalog
from catalog_rag.vector.embeddings import DeterministicHashEmbedding, SentenceTransformerEmbedding


def build_embedder(provider: str = None):
    """Embedder for the requested provider, or the configured one."""
    if provider == HASH_PROVIDER:
        return DeterministicHashEmbedding(dimension=get_embed_dim())
    if provider == SENTENCE_TRANSFORMERS_PROVIDER:
        return SentenceTransformerEmbedding(get_embed_model_name())
    return get_embedding_provider()


def print_results(query: str, results, mode: str):
    print(f"\nQuery: {query!r} ({mode}, {len(results)} results)")
    if not results:
        print("  No matching products.")
    for position, item in enumerate(results, start=1):
        print(f"  {position}. [{item.id}] {item.name} - ${item.price:.2f}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Search a product catalog semantically",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/products.json "shoes for running"
  %(prog)s data/products.json "warm hat" -k 3
  %(prog)s data/products.json "boots" --provider hash

Environment variables:
- EMBED_PROVIDER=sentence-transformers|hash (default sentence-transformers)
- EMBED_MODEL_NAME=sentence-transformers/all-MiniLM-L6-v2
- DEFAULT_TOP_K=5
        """
    )

    parser.add_argument(
        "catalog",
        nargs="?",
        default=None,
        help="Path to products.json (default: CATALOG_PATH)"
    )

    parser.add_argument(
        "queries",
        nargs="*",
        help="Queries to run after the index is built"
    )

    parser.add_argument(
        "-k", "--top-k",
        type=int,
        default=None,
        help="Maximum number of results per query (default: DEFAULT_TOP_K)"
    )

    parser.add_argument(
        "--provider",
        choices=[SENTENCE_TRANSFORMERS_PROVIDER, HASH_PROVIDER],
        default=None,
        help="Embedding provider (overrides EMBED_PROVIDER)"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Do not print initialization status events"
    )

    args = parser.parse_args(argv)

    issues = validate_config()
    if issues:
        for issue in issues:
            print(f"ERROR: {issue}", file=sys.stderr)
        return 1

    catalog_path = Path(args.catalog) if args.catalog else get_catalog_path()
    try:
        catalog = load_catalog(catalog_path)
    except CatalogError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Loaded {len(catalog)} products from {catalog_path}")

    service = RetrievalService(build_embedder(args.provider), auto_initialize=False)
    for event in service.initialize_events(catalog):
        if not args.quiet:
            print(f"[{event.stage.value}] {event.message}")

    if service.state == ServiceState.DEGRADED:
        print(f"WARNING: semantic search unavailable ({service.failure_reason}); using text match", file=sys.stderr)

    top_k = args.top_k if args.top_k is not None else get_default_top_k()
    mode = "semantic" if service.is_ready else "text match"
    for query in args.queries:
        try:
            results = service.search(query, catalog, k=top_k)
        except EmbedderError as e:
            print(f"ERROR: search failed for {query!r}: {e}", file=sys.stderr)
            return 1
        print_results(query, results, mode)

    return 0


if __name__ == "__main__":
    sys.exit(main())
