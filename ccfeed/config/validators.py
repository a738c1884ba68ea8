"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check a raw configuration dict for settings that work but are probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    messages = []

    concourse = config_dict.get("concourse", {})
    if isinstance(concourse, dict):
        url = concourse.get("url")
        if isinstance(url, str) and url.strip().lower().startswith("http://"):
            messages.append(
                f"Concourse URL {url} uses plain http; credentials will be sent unencrypted"
            )

    advanced = config_dict.get("advanced", {})
    if isinstance(advanced, dict):
        parallel = advanced.get("max_parallel_fetches")
        if isinstance(parallel, int) and parallel > 16:
            messages.append(
                f"High max_parallel_fetches ({parallel}) may overload the Concourse API"
            )

    known_sections = {"concourse", "server", "logging", "advanced"}
    for key in sorted(set(config_dict) - known_sections):
        messages.append(f"Unknown configuration section '{key}' will be ignored")

    return messages


def emit_warnings(warning_messages: List[str]) -> None:
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
