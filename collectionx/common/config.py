from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union, cast

from omegaconf import DictConfig, OmegaConf

from collectionx.common.logger import Logger

logger = Logger()


@dataclass
class CollectionConfig:
    """
    Configuration shared by a Collection and every collection derived from it.

    Attributes:
        cache_views (bool): Whether ``array()`` and ``key_array()`` memoize their lists between
            mutations. When disabled the views are rebuilt on every call. Defaults to True.
        random_seed (Optional[int]): Seed for the collection's private random number generator used by
            ``random()`` and ``random_key()``. None seeds from system entropy. Defaults to None.
    """

    cache_views: bool = True
    random_seed: Optional[int] = None

    @staticmethod
    def from_omegaconf(config: DictConfig) -> CollectionConfig:
        """
        Create a CollectionConfig from an OmegaConf DictConfig.

        The provided config is merged onto the structured schema so unknown keys and
        mistyped values raise OmegaConf errors.

        Args:
            config: The OmegaConf DictConfig object containing the configuration.
        Returns:
            A CollectionConfig object.
        """
        structured_config = OmegaConf.merge(
            OmegaConf.structured(CollectionConfig), config
        )
        return cast(CollectionConfig, OmegaConf.to_object(structured_config))


def load_collection_config(path: Union[str, Path]) -> CollectionConfig:
    """
    Loads a CollectionConfig from a YAML file.

    i.e. a file containing
    ```yaml
    cache_views: false
    random_seed: 42
    ```

    Args:
        path (Union[str, Path]): Path to the YAML file.

    Returns:
        CollectionConfig: The validated configuration.
    """
    loaded = OmegaConf.load(path)
    if not isinstance(loaded, DictConfig):
        raise TypeError(
            f"Expected a mapping at the top level of {path}, got {type(loaded).__name__}"
        )
    collection_config = CollectionConfig.from_omegaconf(loaded)
    logger.info(f"Loaded collection config from {path}: {collection_config}")
    return collection_config
