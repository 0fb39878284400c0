"""
Environment variable helpers shared by the connector and api.config.
"""

import os


def get_float_env(name: str, default: float) -> float:
    """
    Read a float from the environment.

    Returns default when the variable is unset or blank.

    Raises:
        RuntimeError: If the value is not a number
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from e
