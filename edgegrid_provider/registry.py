import importlib.metadata
import logging
from typing import Dict, Optional, Type

from edgegrid_provider.interfaces.resource import BaseDataSource, BaseResource, Mapper

# The unique name of our entry point group.
ENTRY_POINT_GROUP = "edgegrid_provider.resources"

logger = logging.getLogger(__name__)


class Registry:
    """Discovers and holds every resource and data source type via entry points."""

    def __init__(self):
        self.resources: Dict[str, Type[BaseResource]] = {}
        self.data_sources: Dict[str, Type[BaseDataSource]] = {}
        self._load_types()

    def _load_types(self):
        """
        Discovers and loads the mapper classes using importlib.metadata.
        """
        entry_points = importlib.metadata.entry_points(group=ENTRY_POINT_GROUP)

        for entry_point in entry_points:
            try:
                mapper_class = entry_point.load()
                self.register(mapper_class)
                logger.info(
                    "Registered '%s' for type: '%s'",
                    entry_point.name,
                    mapper_class.type_name,
                )
            except Exception as e:
                logger.warning("Could not load type '%s': %s", entry_point.name, e)

    def register(self, mapper_class: Type[Mapper]):
        if not mapper_class.type_name:
            raise ValueError(f"{mapper_class.__name__} has no type_name")
        if issubclass(mapper_class, BaseResource):
            self.resources[mapper_class.type_name] = mapper_class
        elif issubclass(mapper_class, BaseDataSource):
            self.data_sources[mapper_class.type_name] = mapper_class
        else:
            raise TypeError(
                f"{mapper_class.__name__} is neither a resource nor a data source"
            )

    def get(self, type_name: str) -> Optional[Type[Mapper]]:
        """Returns the registered class for a type name, resource or data source."""
        return self.resources.get(type_name) or self.data_sources.get(type_name)

    def type_names(self):
        return sorted([*self.resources, *self.data_sources])
