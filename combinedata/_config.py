"""Runtime configuration resolved from the environment."""

import os

from combinedata._constants import DEFAULT_COMBINED_NAME, DEFAULT_NAME_ENV_VAR


def get_default_name() -> str:
    """Get the name for new combined datasets.

    Resolution:
        1. COMBINEDATA_DEFAULT_NAME env var (if set and non-blank)
        2. "Combined data"
    """
    env_override = os.environ.get(DEFAULT_NAME_ENV_VAR, "").strip()
    if env_override:
        return env_override
    return DEFAULT_COMBINED_NAME
