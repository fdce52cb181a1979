"""Static configuration: seed formations and environment lookups."""

from .env import env_float_list, env_int
from .formations import (
    FORMATION_CONFIG,
    FormationTemplate,
    SlotTemplate,
    get_template_by_key,
    iter_templates,
)

__all__ = [
    "FORMATION_CONFIG",
    "FormationTemplate",
    "SlotTemplate",
    "env_float_list",
    "env_int",
    "get_template_by_key",
    "iter_templates",
]
