"""An insertion ordered mapping with list-like utility methods."""

from collectionx.common.collections.collection import (
    Collection,
    EmptyReductionException,
)
from collectionx.common.config import CollectionConfig, load_collection_config

__version__ = "0.1.0"

__all__ = [
    "Collection",
    "CollectionConfig",
    "EmptyReductionException",
    "load_collection_config",
]
