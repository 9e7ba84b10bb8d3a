from __future__ import annotations


class DivisionError(Exception):
    """Base class for long-division errors."""


class ConfigurationError(DivisionError):
    pass


class InvalidConfiguration(ConfigurationError):
    """A difficulty tier whose ranges cannot produce a valid problem."""


class GenerationRetryExhaustion(DivisionError):
    """No divisible dividend could be found for the tier's bounds."""

    def __init__(self, tier: str, attempts: int):
        super().__init__(f"no divisible dividend for tier {tier} after {attempts} attempts")
        self.tier = tier
        self.attempts = attempts
