from collectionx.common.collections.collection import (
    Collection,
    EmptyReductionException,
)

__all__ = ["Collection", "EmptyReductionException"]
