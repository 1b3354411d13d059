"""Environment variable expansion for configuration values."""
import os
import re
from typing import Any, Mapping, Optional

_ENV_PATTERN = re.compile(
    r"\$\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<default>[^}]*))?\}"
    r"|\$(?P<bare>[A-Za-z_][A-Za-z0-9_]*)"
)


def expand_env_vars(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """
    Expand $VAR, ${VAR} and ${VAR:default} references.

    Dictionaries and lists are expanded recursively; non-string values are
    returned unchanged. References to unset variables without a default are
    left untouched.
    """
    env = os.environ if environ is None else environ

    if isinstance(value, dict):
        return {k: expand_env_vars(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(v, env) for v in value]
    if not isinstance(value, str):
        return value

    def _replace(match: "re.Match[str]") -> str:
        name = match.group("braced") or match.group("bare")
        if name in env:
            return env[name]
        if match.group("default") is not None:
            return match.group("default")
        return match.group(0)

    return _ENV_PATTERN.sub(_replace, value)
