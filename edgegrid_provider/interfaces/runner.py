import logging
from typing import Any, Dict, Type

from ansible.module_utils.basic import AnsibleModule

from edgegrid_provider.errors import ProviderError
from edgegrid_provider.helpers import AUTH_OPTIONS, STATE_OPTIONS
from edgegrid_provider.interfaces.resource import BaseResource, Mapper

logger = logging.getLogger(__name__)

# Keys of an option declaration that only matter for documentation.
DOC_ONLY_KEYS = ("description",)


def _strip_docs(option: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in option.items() if k not in DOC_ONLY_KEYS}


def build_options(mapper_class: Type[Mapper]) -> Dict[str, Dict[str, Any]]:
    """
    Collects the documented options of a module: the connection options,
    `state` and `id` for resources, and one option per input attribute.
    """
    options = dict(AUTH_OPTIONS)
    if issubclass(mapper_class, BaseResource):
        options.update(STATE_OPTIONS)
    for name, attribute in mapper_class.schema.items():
        option = attribute.to_option()
        if option is not None:
            options[name] = option
    return options


def build_argument_spec(mapper_class: Type[Mapper]) -> Dict[str, Dict[str, Any]]:
    """
    Translates the options of a module into an `AnsibleModule` argument_spec.

    Required attributes of a resource are not enforced here: removing an
    object only needs its identifier, so the mapper checks them itself on
    create and update.
    """
    argument_spec = {}
    is_resource = issubclass(mapper_class, BaseResource)
    for name, option in build_options(mapper_class).items():
        option = _strip_docs(option)
        if is_resource and name in mapper_class.schema:
            option.pop("required", None)
        argument_spec[name] = option
    return argument_spec


def build_module(mapper_class: Type[Mapper]) -> AnsibleModule:
    return AnsibleModule(
        argument_spec=build_argument_spec(mapper_class), supports_check_mode=True
    )


class BaseRunner:
    """
    Abstract base class for all module runners.

    A runner drives one mapper from the parameters of an Ansible module and
    reports the outcome through `exit_json` or `fail_json`.
    """

    def __init__(self, module: AnsibleModule, mapper: Mapper):
        """
        Initializes the runner.

        Args:
            module: The AnsibleModule instance.
            mapper: The resource or data source the module manages.
        """
        self.module = module
        self.mapper = mapper
        self.has_changed = False
        self.resource = None

    def run(self):
        """
        The main execution method for the runner.
        This method should be implemented by all subclasses.
        """
        raise NotImplementedError

    def fail(self, error: ProviderError, **kwargs):
        """Reports a provider error to Ansible, keeping its message verbatim."""
        logger.debug("%s failed: %s", self.mapper.type_name, error)
        self.module.fail_json(msg=str(error), **kwargs)
