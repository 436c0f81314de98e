"""
Global configuration for the fixed-width integer library.

This module contains environment-specific settings read once at import.
"""

import os

_SUPPORTED_FIXWIDTH_ENVS: list[str] = ["prod", "test"]

FIXWIDTH_ENV = os.environ.get("FIXWIDTH_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Defaults to 'prod'."""

if FIXWIDTH_ENV not in _SUPPORTED_FIXWIDTH_ENVS:
    raise ValueError(
        f"Invalid FIXWIDTH_ENV environment variable: '{FIXWIDTH_ENV}'. "
        f"Supported values: {_SUPPORTED_FIXWIDTH_ENVS}"
    )

CHECK_INVARIANTS: bool = FIXWIDTH_ENV == "test"
"""
Re-verify the width invariant on every value an operation produces.

Public constructors always validate. Operations build their results through an
unchecked fast path, which is only re-verified when this flag is set.
"""
