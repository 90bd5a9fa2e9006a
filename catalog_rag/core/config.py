"""
Environment-driven configuration for the catalog retrieval service.
Values are read from the process environment (and a local .env file).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

SENTENCE_TRANSFORMERS_PROVIDER = "sentence-transformers"
HASH_PROVIDER = "hash"

# Embedding configuration
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", SENTENCE_TRANSFORMERS_PROVIDER)  # sentence-transformers|hash
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "sentence-transformers/all-MiniLM-L6-v2")
EMBED_DIM = int(os.getenv("EMBED_DIM", "384"))

# Search configuration
DEFAULT_TOP_K = int(os.getenv("DEFAULT_TOP_K", "5"))
AUTO_INITIALIZE = os.getenv("AUTO_INITIALIZE", "true").lower() == "true"
INIT_WAIT_TIMEOUT_SEC = float(os.getenv("INIT_WAIT_TIMEOUT_SEC", "120"))

# Catalog location used by the command-line tools
CATALOG_PATH = os.getenv("CATALOG_PATH", "./data/products.json")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

VERSION = "0.1.0"


def get_embed_provider_name() -> str:
    """Get configured embedding provider name (sentence-transformers|hash)."""
    return os.getenv("EMBED_PROVIDER", SENTENCE_TRANSFORMERS_PROVIDER).strip().lower()


def get_embed_model_name() -> str:
    return os.getenv("EMBED_MODEL_NAME", EMBED_MODEL_NAME)


def get_embed_dim() -> int:
    return int(os.getenv("EMBED_DIM", str(EMBED_DIM)))


def get_default_top_k() -> int:
    """Get the default number of results returned by a search."""
    return int(os.getenv("DEFAULT_TOP_K", str(DEFAULT_TOP_K)))


def is_auto_initialize_enabled() -> bool:
    """Check if the first search may kick off index building on its own."""
    return os.getenv("AUTO_INITIALIZE", "true").lower() == "true"


def get_init_wait_timeout() -> float:
    """Upper bound in seconds for searches that opt in to waiting on initialization."""
    return float(os.getenv("INIT_WAIT_TIMEOUT_SEC", str(INIT_WAIT_TIMEOUT_SEC)))


def get_catalog_path() -> Path:
    return Path(os.getenv("CATALOG_PATH", CATALOG_PATH))


def debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_embedding_provider():
    """Get configured embedding provider implementation."""
    provider = get_embed_provider_name()

    if provider == HASH_PROVIDER:
        from ..vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(dimension=get_embed_dim())
    elif provider == SENTENCE_TRANSFORMERS_PROVIDER:
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(get_embed_model_name())
    else:
        raise ValueError(f"Unknown EMBED_PROVIDER: {provider}")


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if get_embed_provider_name() not in [SENTENCE_TRANSFORMERS_PROVIDER, HASH_PROVIDER]:
        issues.append(f"Invalid EMBED_PROVIDER: {get_embed_provider_name()}")

    try:
        if get_embed_dim() < 1:
            issues.append("EMBED_DIM must be >= 1")
    except ValueError:
        issues.append(f"EMBED_DIM must be an integer: {os.getenv('EMBED_DIM')}")

    try:
        if get_default_top_k() < 1:
            issues.append("DEFAULT_TOP_K must be >= 1")
    except ValueError:
        issues.append(f"DEFAULT_TOP_K must be an integer: {os.getenv('DEFAULT_TOP_K')}")

    try:
        if get_init_wait_timeout() <= 0:
            issues.append("INIT_WAIT_TIMEOUT_SEC must be > 0")
    except ValueError:
        issues.append(f"INIT_WAIT_TIMEOUT_SEC must be a number: {os.getenv('INIT_WAIT_TIMEOUT_SEC')}")

    return issues
