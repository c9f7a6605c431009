"""Budget configuration files and loaders.

Configuration is stored in JSON files so the default rule, the category
mapping and the wizard checklist can be changed without code changes.
"""

from .defaults import load_config, get_budget_config, get_config_value, get_text

__all__ = ['load_config', 'get_budget_config', 'get_config_value', 'get_text']
