"""
Entry point of the generated Ansible modules.

Every generated module file is a thin shim that calls `run_module` with its
type name; the registry, the configuration and the runners do the rest.
"""

from typing import Optional

from edgegrid_provider.config import ProviderConfig
from edgegrid_provider.context import ProviderContext
from edgegrid_provider.errors import ConfigurationError
from edgegrid_provider.interfaces.resource import BaseResource
from edgegrid_provider.interfaces.runner import build_module
from edgegrid_provider.plugins.data_source.runner import DataSourceRunner
from edgegrid_provider.plugins.resource.runner import ResourceRunner
from edgegrid_provider.registry import Registry


def run_module(type_name: str, registry: Optional[Registry] = None):
    registry = registry or Registry()
    mapper_class = registry.get(type_name)
    if mapper_class is None:
        raise KeyError(f"Unknown resource type '{type_name}'")

    module = build_module(mapper_class)
    try:
        config = ProviderConfig.from_params(module.params)
    except ConfigurationError as e:
        module.fail_json(msg=str(e))
        return

    mapper = mapper_class(ProviderContext.from_config(config))
    if issubclass(mapper_class, BaseResource):
        runner = ResourceRunner(module, mapper)
    else:
        runner = DataSourceRunner(module, mapper)
    runner.run()
