"""Typing-like delays between smoothed characters."""

from dataclasses import dataclass
from typing import Optional

from ..utils.config import PacingConfig

CLAUSE_BREAKS = frozenset((",", "\n"))
SENTENCE_BREAKS = frozenset((".", "!", "?"))


@dataclass(frozen=True)
class DelayPolicy:
    """Maps the previously emitted character to a wait in milliseconds."""
    default_delay_ms: float = 20
    punctuation_delay_ms: float = 500

    @classmethod
    def from_config(cls, config: PacingConfig) -> "DelayPolicy":
        return cls(
            default_delay_ms=config.default_delay_ms,
            punctuation_delay_ms=config.punctuation_delay_ms,
        )

    def delay_for(self, previous: Optional[str]) -> float:
        """
        Get the wait before the character that follows ``previous``.

        Args:
            previous: Last emitted character, or None/"" at the start of a run

        Returns:
            Delay in milliseconds
        """
        if not previous:
            return 0
        if previous in CLAUSE_BREAKS:
            return self.punctuation_delay_ms / 2
        if previous in SENTENCE_BREAKS:
            return self.punctuation_delay_ms
        return self.default_delay_ms


DEFAULT_POLICY = DelayPolicy()


def get_delay(previous: Optional[str], policy: Optional[DelayPolicy] = None) -> float:
    """Delay in milliseconds after ``previous`` under ``policy`` (default pacing if None)."""
    return (policy or DEFAULT_POLICY).delay_for(previous)


__all__ = ['DelayPolicy', 'DEFAULT_POLICY', 'get_delay']
