"""Runtime configuration for depaudit.

Values come from the environment and may be overridden by CLI options:

    DEPAUDIT_REGISTRY: registry base URL (default https://registry.npmjs.org/)
    DEPAUDIT_GLOBAL: 1|true|yes to audit in global mode (always rejected)
    DEPAUDIT_TIMEOUT: request timeout in seconds (default 30)
    DEPAUDIT_NPM: npm executable used for fixes (default npm)
    DEPAUDIT_LOG_LEVEL: DEBUG|INFO|NOTICE|WARNING|ERROR (default NOTICE)
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

DEFAULT_REGISTRY = "https://registry.npmjs.org/"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class AuditConfig:
    """Settings shared by every stage of one audit run."""

    registry: str = DEFAULT_REGISTRY
    global_mode: bool = False
    timeout: float = 30.0
    npm_command: str = "npm"
    log_level: str = "NOTICE"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> "AuditConfig":
        """Build a config from environment variables, then apply non-None overrides."""
        env = os.environ if environ is None else environ
        config = cls()

        if env.get("DEPAUDIT_REGISTRY"):
            config.registry = env["DEPAUDIT_REGISTRY"]
        if "DEPAUDIT_GLOBAL" in env:
            config.global_mode = env["DEPAUDIT_GLOBAL"].strip().lower() in _TRUTHY
        if env.get("DEPAUDIT_TIMEOUT"):
            config.timeout = float(env["DEPAUDIT_TIMEOUT"])
        if env.get("DEPAUDIT_NPM"):
            config.npm_command = env["DEPAUDIT_NPM"]
        if env.get("DEPAUDIT_LOG_LEVEL"):
            config.log_level = env["DEPAUDIT_LOG_LEVEL"].upper()

        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Unknown config option: {key}")
            if value is not None:
                setattr(config, key, value)

        return config
