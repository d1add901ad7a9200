"""Raspberry Pi developer provisioning (Python-first, idempotent).

Core design goals:
- Ordered, idempotent steps
- Fail-fast on the first broken step
- Every external command goes through one executor
- Dotfile edits are append-if-absent
- Centralized logging
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
