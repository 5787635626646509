"""
Enrichment result contract.

Lookups against external sources never raise. They return an
EnrichmentResult carrying the value (if any), the strategy or source
that produced it, and every failure met along the way.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class EnrichmentFailure:
    """One strategy or source that produced nothing usable."""
    strategy: str
    reason: str

    def __str__(self) -> str:
        return f"{self.strategy}: {self.reason}"


@dataclass
class EnrichmentResult(Generic[T]):
    """Outcome of a best-effort lookup."""
    value: Optional[T] = None
    source: str = ""
    failures: List[EnrichmentFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when a real source (not a fallback default) produced the value."""
        return self.value is not None and self.source not in ("", "placeholder", "existing")

    def fail(self, strategy: str, reason: str) -> None:
        self.failures.append(EnrichmentFailure(strategy=strategy, reason=reason))


def model_key(product: Any) -> str:
    """Default batch result key, shared by every variant of a model."""
    return f"{product.brand}-{product.model}"
