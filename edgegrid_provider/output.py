"""
Renders API responses into the human-readable `output_text` attribute.

Each named `OutputTemplate` is a Jinja2 template evaluated against a response
object. TEXT templates are returned as rendered. TABULAR templates emit rows
separated by `,` and cells separated by `|`; the rows are then laid out with
prettytable, titled with the template key.

Rendering is a presentation side channel: a missing template or a failing
render is logged and yields an empty string, never an error.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from jinja2 import Environment, StrictUndefined, TemplateError
from prettytable import PrettyTable

logger = logging.getLogger(__name__)

TABULAR = "TABULAR"
TEXT = "TEXT"


@dataclass(frozen=True)
class OutputTemplate:
    name: str
    template_type: str
    table_title: str
    template: str


def _quote(value: Any) -> str:
    return f'"{value}"'


def _dash(value: Any) -> str:
    """Renders a zero or missing number as '-'."""
    if not value:
        return "-"
    return str(value)


def _build_environment() -> Environment:
    env = Environment(
        undefined=StrictUndefined, autoescape=False, keep_trailing_newline=True
    )
    env.filters["quote"] = _quote
    env.filters["dash"] = _dash
    return env


_ENV = _build_environment()

_PROTECTIONS_TITLE = (
    "APIConstraints|ApplicationLayerControls|BotmanControls|NetworkLayerControls"
    "|RateControls|ReputationControls|SlowPostControls"
)
_PROTECTIONS_ROW = (
    "{{ apply_api_constraints }}|{{ apply_application_layer_controls }}"
    "|{{ apply_botman_controls }}|{{ apply_network_layer_controls }}"
    "|{{ apply_rate_controls }}|{{ apply_reputation_controls }}"
    "|{{ apply_slow_post_controls }}"
)

OUTPUT_TEMPLATES: Dict[str, OutputTemplate] = {
    "configurationVersion": OutputTemplate(
        name="ConfigurationVersion",
        template_type=TABULAR,
        table_title="Version Number|Staging Status|Production Status",
        template=(
            "{% for v in version_list %}{% if not loop.first %},{% endif %}"
            "{{ v.version }}|{{ v.staging.status }}|{{ v.production.status }}"
            "{% endfor %}"
        ),
    ),
    "securityPoliciesDS": OutputTemplate(
        name="securityPolicies",
        template_type=TABULAR,
        table_title="ID|Name",
        template=(
            "{% for p in policies %}{% if not loop.first %},{% endif %}"
            "{{ p.policy_id }}|{{ p.policy_name }}{% endfor %}"
        ),
    ),
    "customRules": OutputTemplate(
        name="customRules",
        template_type=TABULAR,
        table_title="ID|Name",
        template=(
            "{% for r in custom_rules %}{% if not loop.first %},{% endif %}"
            "{{ r.id }}|{{ r.name }}{% endfor %}"
        ),
    ),
    "versionNotesDS": OutputTemplate(
        name="versionNotes",
        template_type=TABULAR,
        table_title="Version Notes",
        template="{{ notes }}",
    ),
    "rateProtectionDS": OutputTemplate(
        name="rateProtection",
        template_type=TABULAR,
        table_title=_PROTECTIONS_TITLE,
        template=_PROTECTIONS_ROW,
    ),
    "RuleConditionException": OutputTemplate(
        name="RuleConditionException",
        template_type=TABULAR,
        table_title="Conditions|Exceptions",
        template=(
            "{{ 'True' if conditions else 'False' }}"
            "|{{ 'True' if exception else 'False' }}"
        ),
    ),
    # Sections of an exported configuration, selected through `search`.
    "selectedHosts": OutputTemplate(
        name="selectedHosts",
        template_type=TABULAR,
        table_title="Hostnames",
        template="{{ selected_hosts | join(',') }}",
    ),
    "selectedHosts.yml": OutputTemplate(
        name="selectedHosts.yml",
        template_type=TEXT,
        table_title="Hostname",
        template=(
            "- name: Select protected hostnames\n"
            "  appsec_selected_hostnames:\n"
            "    config_id: {{ config_id }}\n"
            "    mode: REPLACE\n"
            "    hostnames: [{{ selected_hosts | map('quote') | join(', ') }}]\n"
        ),
    ),
    "securityPolicies": OutputTemplate(
        name="securityPolicies",
        template_type=TABULAR,
        table_title="ID|Name",
        template=(
            "{% for p in security_policies %}{% if not loop.first %},{% endif %}"
            "{{ p.id }}|{{ p.name }}{% endfor %}"
        ),
    ),
    "ratePolicies": OutputTemplate(
        name="ratePolicies",
        template_type=TABULAR,
        table_title="ID|Policy Name",
        template=(
            "{% for p in rate_policies %}{% if not loop.first %},{% endif %}"
            "{{ p.id }}|{{ p.name }}{% endfor %}"
        ),
    ),
    "matchTargets": OutputTemplate(
        name="matchTargets",
        template_type=TABULAR,
        table_title="ID|PolicyID",
        template=(
            "{% for t in match_targets.website_targets %}"
            "{% if not loop.first %},{% endif %}"
            "{{ t.id }}|{{ t.security_policy.policy_id }}{% endfor %}"
        ),
    ),
    "reputationProfiles": OutputTemplate(
        name="reputationProfiles",
        template_type=TABULAR,
        table_title="ID|Name(Title)",
        template=(
            "{% for p in reputation_profiles %}{% if not loop.first %},{% endif %}"
            "{{ p.id }}|{{ p.name }}{% endfor %}"
        ),
    ),
    "rulesets": OutputTemplate(
        name="rulesets",
        template_type=TABULAR,
        table_title="ID|Name(Title)",
        template=(
            "{% for rs in rulesets %}{% for r in rs.rules %}"
            "{% if not loop.first %},{% endif %}{{ r.id }}| {{ r.title }}"
            "{% endfor %}{% endfor %}"
        ),
    ),
}


def get_template(key: str) -> OutputTemplate:
    try:
        return OUTPUT_TEMPLATES[key]
    except KeyError:
        raise KeyError(f"output template '{key}' not found") from None


def render_output(key: str, data: Any) -> str:
    """
    Renders `data` with the template registered under `key`.

    Returns:
        The rendered block prefixed with a newline, or an empty string when
        the template is unknown or fails to render.
    """
    try:
        output_template = get_template(key)
        rendered = _ENV.from_string(output_template.template).render(
            _as_context(data)
        )
    except (KeyError, TemplateError, AttributeError, TypeError) as e:
        logger.warning("could not render output template '%s': %s", key, e)
        return ""

    if output_template.template_type != TABULAR:
        return "\n" + rendered

    headers = output_template.table_title.split("|")
    table = PrettyTable()
    table.title = key
    table.field_names = [h.upper() for h in headers]
    table.align = "l"
    for record in rendered.split(","):
        if record != "":
            table.add_row(_fit(record.split("|"), len(headers)))
    return "\n" + table.get_string() + "\n"


def _fit(cells: List[str], width: int) -> List[str]:
    """Pads a row to `width` cells; surplus cells are joined into the last one."""
    if len(cells) > width:
        cells = cells[: width - 1] + ["|".join(cells[width - 1 :])]
    return cells + [""] * (width - len(cells))


def _as_context(data: Any) -> Dict[str, Any]:
    """Exposes a response object's fields as top-level template variables."""
    if isinstance(data, dict):
        return data
    if hasattr(data, "__dict__"):
        return {k: getattr(data, k) for k in vars(data)}
    raise TypeError(f"cannot render an object of type {type(data).__name__}")
