"""
policywright Configuration - Environment-driven settings

Everything has a safe default so the compiler works with no environment
at all.
"""

import logging
import os
from typing import Optional

RULE_ID_STRATEGIES = ("timestamp", "uuid")
DEFAULT_SUMMARY_MAX_LENGTH = 120


class PolicywrightConfig:
    """
    policywright configuration.

    - POLICYWRIGHT_VERBOSE: debug logging (default off)
    - POLICYWRIGHT_RULE_IDS: "timestamp" or "uuid" rule ids (default timestamp)
    - POLICYWRIGHT_SUMMARY_MAX_LENGTH: short summary length (default 120)
    """

    def __init__(self):
        self._verbose = self._parse_bool_env("POLICYWRIGHT_VERBOSE", default=False)

        strategy = os.environ.get("POLICYWRIGHT_RULE_IDS", "timestamp").strip().lower()
        if strategy not in RULE_ID_STRATEGIES:
            strategy = "timestamp"
        self._rule_id_strategy = strategy

        self._summary_max_length = self._parse_int_env(
            "POLICYWRIGHT_SUMMARY_MAX_LENGTH",
            default=DEFAULT_SUMMARY_MAX_LENGTH,
        )

    @property
    def verbose(self) -> bool:
        """Whether debug logs are emitted"""
        return self._verbose

    @property
    def rule_id_strategy(self) -> str:
        """
        How rule ids are generated.

        "timestamp" ids (rule-<epoch ms>-<index>) are unique within one
        compile only. "uuid" ids are safe when the backend needs globally
        unique rule ids.
        """
        return self._rule_id_strategy

    @property
    def summary_max_length(self) -> int:
        """Maximum length of a short policy summary"""
        return self._summary_max_length

    @property
    def log_level(self) -> int:
        return logging.DEBUG if self._verbose else logging.WARNING

    def enable_verbose(self):
        self._verbose = True

    @staticmethod
    def _parse_bool_env(key: str, default: bool = False) -> bool:
        """Parse boolean from environment variable"""
        value = os.environ.get(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _parse_int_env(key: str, default: int) -> int:
        """Parse an integer above 3 (room for the "..." suffix) from environment variable"""
        value = os.environ.get(key)
        if value is None:
            return default
        try:
            parsed = int(value)
        except ValueError:
            return default
        return parsed if parsed > 3 else default


# Global config instance
_global_config: Optional[PolicywrightConfig] = None


def get_config() -> PolicywrightConfig:
    """Get global configuration"""
    global _global_config
    if _global_config is None:
        _global_config = PolicywrightConfig()
    return _global_config


def reset_config():
    """Reset config (for testing)"""
    global _global_config
    _global_config = None
