"""
Renders one Ansible module file per registered resource and data source.

The generated files carry the `DOCUMENTATION`, `EXAMPLES` and `RETURN` blocks
built from the attribute schema, and delegate everything else to
`edgegrid_provider.module.run_module`.
"""

import logging
import os
import sys
from typing import Any, Dict, List, Optional, Type

import yaml
from jinja2 import Environment, FileSystemLoader, TemplateError

from edgegrid_provider.helpers import AUTH_FIXTURE, ValidationErrorCollector
from edgegrid_provider.interfaces.resource import BaseResource, Mapper
from edgegrid_provider.interfaces.runner import build_options
from edgegrid_provider.models import ATTR_TO_ANSIBLE_TYPE_MAP, AttrType
from edgegrid_provider.registry import Registry

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")

# Keys that are valid for an option in the DOCUMENTATION block.
VALID_DOC_KEYS = {
    "description",
    "required",
    "type",
    "default",
    "choices",
    "no_log",
    "elements",
}

# Placeholder values used in the generated EXAMPLES block.
EXAMPLE_VALUES = {
    AttrType.STRING: "example",
    AttrType.INT: 12345,
    AttrType.BOOL: True,
    AttrType.LIST: ["example"],
    AttrType.SET: ["example"],
    AttrType.JSON: '{"example": true}',
    AttrType.DICT: {},
}


def _dump(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False).rstrip()


class Generator:
    """Orchestrates the Ansible module generation process."""

    def __init__(
        self,
        config_data: Dict[str, Any],
        registry: Optional[Registry] = None,
        template_dir: str = TEMPLATE_DIR,
    ):
        """
        Args:
            config_data (dict): The generator configuration, with a `collection`
                mapping (`namespace`, `name`) and an optional `modules` list of
                type names. All registered types are generated when the list
                is omitted.
            registry (Registry): The discovered resource and data source types.
            template_dir (str): Path to the directory with Jinja2 templates.
        """
        self.config_data = config_data or {}
        self.registry = registry or Registry()
        self.jinja_env = Environment(
            loader=FileSystemLoader(template_dir), trim_blocks=True, lstrip_blocks=True
        )

    @classmethod
    def from_file(cls, config_path, registry=None, template_dir=TEMPLATE_DIR):
        """Creates a Generator instance by loading the configuration from a YAML file."""
        try:
            with open(config_path, "r") as f:
                config_data = yaml.safe_load(f)
        except (IOError, yaml.YAMLError) as e:
            print(
                f"Error reading or parsing config file '{config_path}': {e}",
                file=sys.stderr,
            )
            sys.exit(1)

        return cls(config_data, registry, template_dir)

    def _collection(self, collector: ValidationErrorCollector) -> Dict[str, str]:
        collection = self.config_data.get("collection") or {}
        for key in ("namespace", "name"):
            if not collection.get(key):
                collector.add_error(f"'collection.{key}' is required.")
        return collection

    def _selected_types(self, collector: ValidationErrorCollector) -> List[str]:
        selected = self.config_data.get("modules")
        if selected is None:
            return self.registry.type_names()
        for type_name in selected:
            if self.registry.get(type_name) is None:
                collector.add_error(f"Unknown resource type '{type_name}'.")
        return [t for t in selected if self.registry.get(t) is not None]

    def generate(self, output_dir: str) -> List[str]:
        """
        Runs the full generation process and returns the written file paths.
        """
        collector = ValidationErrorCollector()
        collection = self._collection(collector)
        type_names = self._selected_types(collector)

        # Configuration errors stop the run before any file is written.
        collector.report()

        template = self.jinja_env.get_template("resource_module.py.j2")
        written = []
        for type_name in type_names:
            mapper_class = self.registry.get(type_name)
            try:
                context = self.build_context(type_name, mapper_class, collection)
                rendered = template.render(context)
                output_path = os.path.join(output_dir, f"{type_name}.py")
                with open(output_path, "w") as f:
                    f.write(rendered)
            except (TemplateError, yaml.YAMLError, OSError) as e:
                collector.add_error(f"Module '{type_name}': {e}")
                continue
            logger.info("Generated module: %s", output_path)
            print(f"Successfully generated module: {output_path}")
            written.append(output_path)

        collector.report()
        return written

    def build_context(
        self, type_name: str, mapper_class: Type[Mapper], collection: Dict[str, str]
    ) -> Dict[str, Any]:
        return {
            "type_name": type_name,
            "documentation": _dump(self.build_documentation(type_name, mapper_class)),
            "examples": _dump(self.build_examples(type_name, mapper_class, collection)),
            "return_block": _dump(self.build_return_block(mapper_class)),
        }

    def build_documentation(
        self, type_name: str, mapper_class: Type[Mapper]
    ) -> Dict[str, Any]:
        description = []
        if mapper_class.key is not None:
            description.append(
                f"Objects are identified by `{mapper_class.key.format}`."
            )
        immutable = getattr(mapper_class, "immutable", ())
        if immutable:
            description.append(
                f"The following fields cannot change once the object exists: "
                f"{', '.join(sorted(immutable))}."
            )
        description.extend(getattr(mapper_class, "notes", ()))

        options = {}
        for name, option in build_options(mapper_class).items():
            options[name] = {k: v for k, v in option.items() if k in VALID_DOC_KEYS}

        return {
            "module": type_name,
            "short_description": mapper_class.description
            or f"Manage {type_name.replace('_', ' ')} objects.",
            "description": description,
            "options": options,
            "requirements": ["python >= 3.10"],
        }

    def build_examples(
        self, type_name: str, mapper_class: Type[Mapper], collection: Dict[str, str]
    ) -> List[Dict[str, Any]]:
        fqcn = f"{collection['namespace']}.{collection['name']}.{type_name}"
        auth = {
            "access_token": AUTH_FIXTURE["access_token"],
            "api_url": AUTH_FIXTURE["api_url"],
        }
        required = {
            name: EXAMPLE_VALUES[attribute.type]
            for name, attribute in mapper_class.schema.items()
            if attribute.required
        }

        if not issubclass(mapper_class, BaseResource):
            return [
                {
                    "name": f"Read {type_name.replace('_', ' ')}",
                    fqcn: {**auth, **required},
                    "register": "result",
                }
            ]

        examples = [
            {
                "name": f"Create or update {type_name.replace('_', ' ')}",
                fqcn: {**auth, "state": "present", **required},
            }
        ]
        if mapper_class.key is not None:
            examples.append(
                {
                    "name": f"Remove {type_name.replace('_', ' ')}",
                    fqcn: {
                        **auth,
                        "state": "absent",
                        "id": ":".join(mapper_class.key.names),
                    },
                }
            )
        return examples

    def build_return_block(self, mapper_class: Type[Mapper]) -> Dict[str, Any]:
        contains = {}
        for name, attribute in mapper_class.schema.items():
            contains[name] = {
                "description": attribute.description or name.replace("_", " "),
                "type": ATTR_TO_ANSIBLE_TYPE_MAP[attribute.type],
                "returned": "always" if attribute.required else "when available",
            }

        value_key = "resource" if issubclass(mapper_class, BaseResource) else "data"
        return {
            "id": {
                "description": "Identifier of the object.",
                "type": "str",
                "returned": "success",
            },
            value_key: {
                "description": "The attributes of the object after the operation.",
                "type": "dict",
                "returned": "success",
                "contains": contains,
            },
        }
