"""Non-fatal checks on raw configuration."""

import warnings
from typing import Any, Dict, List

LARGE_CONDITION_TABLE = 100
CONDITION_KEYS = frozenset({"name", "equal", "include", "array", "prefix"})


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check raw configuration for settings that are valid but probably wrong.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    conditions = config_dict.get("conditions", [])
    if isinstance(conditions, list):
        seen = set()
        for idx, condition in enumerate(conditions):
            if not isinstance(condition, dict):
                continue
            name = condition.get("name", f"#{idx}")

            unknown = sorted(str(key) for key in condition if key not in CONDITION_KEYS)
            if unknown:
                warning_messages.append(
                    f"Condition '{name}' has unknown keys that are ignored: {', '.join(unknown)}"
                )

            key = (str(name), str(condition.get("prefix") or ""))
            if key in seen:
                warning_messages.append(
                    f"Condition '{key[1]}{name}' appears more than once; "
                    "each copy adds to the score"
                )
            seen.add(key)

            # Falsy weights are never awarded
            if not condition.get("equal") and not condition.get("include"):
                warning_messages.append(
                    f"Condition '{name}' has no equal or include weight and will never score"
                )

            if condition.get("prefix") == "":
                warning_messages.append(
                    f"Condition '{name}' has an empty prefix, which is ignored"
                )

        if len(conditions) > LARGE_CONDITION_TABLE:
            warning_messages.append(
                f"{len(conditions)} conditions are evaluated for every keyword, "
                "which may slow down scoring"
            )

    search = config_dict.get("search", {})
    if isinstance(search, dict):
        limit = search.get("limit", 0)
        if isinstance(limit, int) and limit > 10000:
            warning_messages.append(f"Large search.limit ({limit}) prints most records")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
