"""
process/ - Production step generation and the shared duration policy.
"""

from .durations import (
    ProcessParams,
    MIX_TYPE_PROCESS,
    DOUGH_TYPE_PROCESS_OVERRIDES,
    STAGE_DURATION_DEFAULTS,
    resolve_process_params,
    resolve_step_duration,
)

from .templates import (
    SPECIALIZED_TEMPLATES,
    get_template,
    name_list,
)

from .generator import suggest_steps

from .preferment_steps import suggest_preferment_steps

__all__ = [
    # Durations
    "ProcessParams",
    "MIX_TYPE_PROCESS",
    "DOUGH_TYPE_PROCESS_OVERRIDES",
    "STAGE_DURATION_DEFAULTS",
    "resolve_process_params",
    "resolve_step_duration",
    # Templates
    "SPECIALIZED_TEMPLATES",
    "get_template",
    "name_list",
    # Generator
    "suggest_steps",
    "suggest_preferment_steps",
]
