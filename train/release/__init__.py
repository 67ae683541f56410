"""Release bounded context.

- errors: the canonical error payload shared by every layer
- contracts: frozen per-invocation requests built by the CLI
- report: diagnostics accumulated during one invocation
"""

from __future__ import annotations
