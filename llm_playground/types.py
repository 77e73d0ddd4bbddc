from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

# Whatever an adapter hands to the normalizer: {"output": <str | list | dict | None>}
RawPayload = Any


class Provider(str, Enum):
    openai = "openai"
    anthropic = "anthropic"
    gemini = "gemini"


class TargetStatus(str, Enum):
    pending = "pending"
    in_flight = "in_flight"
    succeeded = "succeeded"
    failed = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TargetStatus.succeeded, TargetStatus.failed)


_NEXT_STATUSES = {
    TargetStatus.pending: (TargetStatus.in_flight,),
    TargetStatus.in_flight: (TargetStatus.succeeded, TargetStatus.failed),
    TargetStatus.succeeded: (),
    TargetStatus.failed: (),
}


@dataclass(frozen=True)
class TargetConfig:
    """
    One confirmed comparison slot.
    The credential is held in memory only and kept out of repr().
    """
    id: str
    provider: Optional[Provider]
    model: str = ""
    credential: str = field(default="", repr=False)

    @property
    def is_usable(self) -> bool:
        return not self.missing_fields()

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.provider:
            missing.append("provider")
        if not (self.model or "").strip():
            missing.append("model")
        if not (self.credential or "").strip():
            missing.append("credential")
        return missing


@dataclass(frozen=True)
class TargetResult:
    target_id: str
    status: TargetStatus = TargetStatus.pending
    text: Optional[str] = None
    error_message: Optional[str] = None
    latency_ms: Optional[int] = None

    def _advance(self, status: TargetStatus, **changes) -> "TargetResult":
        if status not in _NEXT_STATUSES[self.status]:
            raise ValueError(f"Illegal status transition for {self.target_id}: {self.status.value} -> {status.value}")
        return replace(self, status=status, **changes)

    def start(self) -> "TargetResult":
        return self._advance(TargetStatus.in_flight)

    def succeed(self, text: str, *, latency_ms: int | None = None) -> "TargetResult":
        return self._advance(TargetStatus.succeeded, text=text, error_message=None, latency_ms=latency_ms)

    def fail(self, message: str, *, latency_ms: int | None = None) -> "TargetResult":
        return self._advance(TargetStatus.failed, text=None, error_message=message, latency_ms=latency_ms)


@dataclass(frozen=True)
class DispatchRound:
    """
    Immutable snapshot of one prompt's results.
    `order` keeps submission order for display; lookups go through `results`.
    """
    number: int
    prompt: str
    results: Mapping[str, TargetResult] = field(default_factory=lambda: MappingProxyType({}))
    order: tuple[str, ...] = ()
    superseded: bool = False

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return (self.results[tid] for tid in self.order)

    def get(self, target_id: str) -> TargetResult | None:
        return self.results.get(target_id)

    @property
    def is_complete(self) -> bool:
        return all(r.status.is_terminal for r in self.results.values())

    @property
    def succeeded(self) -> list[TargetResult]:
        return [r for r in self if r.status is TargetStatus.succeeded]

    @property
    def failed(self) -> list[TargetResult]:
        return [r for r in self if r.status is TargetStatus.failed]
