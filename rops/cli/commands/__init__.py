"""CLI command modules.

Command Groups:
- charts: list, update plugins and deploy Helm charts
- extra: miscellaneous helpers (cookie secrets)

Top level commands:
- settings: show the resolved settings
"""

from .charts import charts_app
from .extra import extra_app
from .settings import show_settings

__all__ = ["charts_app", "extra_app", "show_settings"]
