"""Tagged outcome returned by every rule function."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RuleResult:
    """Outcome of a rule evaluation.

    ``allowed`` is the tag; ``code`` and ``reason`` are set only on failure.
    """
    allowed: bool
    code: str | None = None
    reason: str | None = None

    @classmethod
    def ok(cls) -> "RuleResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, code: str, reason: str) -> "RuleResult":
        return cls(allowed=False, code=code, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed
