"""Top‑level package for the QAWAM budget planner.

The primary modules are:

* ``lib.budget`` – expense ledger, metrics, analysis, the dashboard gate
* ``advisor`` – rule recommendation and chat extraction (Gemini or local)
* ``visualization`` – functions that generate Plotly figures
* ``report`` – HTML / Markdown budget report export
* ``app`` – the Streamlit app that ties everything together

To run the app from the command line you can execute:

```bash
streamlit run budget_planner/Home.py
```
"""

from . import visualization  # noqa: F401  # re-exported for convenience
from . import report  # noqa: F401  # re-exported for convenience

__all__ = ["visualization", "report"]
