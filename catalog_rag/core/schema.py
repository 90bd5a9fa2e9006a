"""
Catalog item schema and loader.
Records are validated once at load time; the retrieval core only reads
id, name, description and tags.
"""

import json
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import CatalogError


class Item(BaseModel):
    """A catalog product. Display attributes are carried but not interpreted."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)

    id: Union[int, str]
    name: str
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    price: float = Field(default=0.0, ge=0)
    image: str = ""
    category: Optional[str] = None

    @field_validator('id')
    @classmethod
    def id_must_not_be_empty(cls, v):
        if isinstance(v, str) and not v.strip():
            raise ValueError('id cannot be empty')
        return v

    @field_validator('name')
    @classmethod
    def name_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('name cannot be empty')
        return v

    @field_validator('tags')
    @classmethod
    def strip_tags(cls, v):
        return [tag.strip() for tag in v if tag.strip()]


def parse_catalog(records: Iterable[Any]) -> List[Item]:
    """
    Validate raw catalog records into Items.

    Args:
        records: Sequence of dicts (or Items) in catalog order

    Returns:
        List of Items in the same order

    Raises:
        CatalogError: if a record is malformed or an id is repeated
    """
    if isinstance(records, (str, bytes, dict)):
        raise CatalogError("Catalog must be a list of records")

    items = []
    seen_ids = set()
    for position, record in enumerate(records):
        try:
            item = record if isinstance(record, Item) else Item.model_validate(record)
        except ValidationError as e:
            raise CatalogError(f"Invalid catalog record at position {position}: {e}") from e

        if item.id in seen_ids:
            raise CatalogError(f"Duplicate item id in catalog: {item.id!r}")
        seen_ids.add(item.id)
        items.append(item)

    return items


def load_catalog(path: Union[str, Path]) -> List[Item]:
    """Load and validate a products.json style catalog file."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            records = json.load(f)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog file is not valid JSON: {path}: {e}") from e

    if not isinstance(records, list):
        raise CatalogError(f"Catalog file must contain a JSON array: {path}")

    return parse_catalog(records)
