from __future__ import annotations

import asyncio
import logging
import time
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Sequence

from llm_playground import settings
from llm_playground.classifier import error_message
from llm_playground.clients.base import ProviderAdapter
from llm_playground.errors import ConfigurationIncomplete, TransportError
from llm_playground.normalizer import normalize
from llm_playground.types import DispatchRound, Provider, TargetConfig, TargetResult, TargetStatus

logger = logging.getLogger(__name__)

ResultCallback = Callable[[TargetResult], None]


class _RoundState:
    """Mutable result slots for one running round. Each target writes only its own slot."""

    def __init__(self, number: int, prompt: str, targets: Sequence[TargetConfig]):
        self.number = number
        self.prompt = prompt
        self.order = tuple(t.id for t in targets)
        self.slots: dict[str, TargetResult] = {tid: TargetResult(target_id=tid) for tid in self.order}

    def snapshot(self, *, superseded: bool = False) -> DispatchRound:
        return DispatchRound(
            number=self.number,
            prompt=self.prompt,
            results=MappingProxyType(dict(self.slots)),
            order=self.order,
            superseded=superseded,
        )


class Dispatcher:
    """
    Runs one adapter call per usable target concurrently and collects exactly
    one terminal TargetResult per submitted target.

    adapters: the provider -> adapter table, fixed at construction.
    timeout_s: bound on each adapter call; expiry fails that target only.
    """

    def __init__(self, adapters: Mapping[Provider, ProviderAdapter], *, timeout_s: float | None = None):
        self._adapters: Mapping[Provider, ProviderAdapter] = MappingProxyType(dict(adapters))
        self.timeout_s = settings.REQUEST_TIMEOUT_S if timeout_s is None else timeout_s
        self._round_seq = 0
        self._in_flight = 0
        self.latest: DispatchRound | None = None

    @property
    def current_round(self) -> int:
        return self._round_seq

    @property
    def in_flight(self) -> bool:
        return self._in_flight > 0

    def adapter_for(self, provider: Provider | None) -> ProviderAdapter | None:
        if provider is None:
            return None
        return self._adapters.get(provider)

    async def dispatch(
        self,
        prompt: str,
        targets: Iterable[TargetConfig],
        *,
        on_result: ResultCallback | None = None,
    ) -> DispatchRound:
        if not isinstance(prompt, str) or not prompt.strip():
            raise ValueError("prompt must be a non-empty string")

        targets = list(targets)
        ids = [t.id for t in targets]
        if len(ids) != len(set(ids)):
            raise ValueError("target ids must be unique within a round")

        self._round_seq += 1
        state = _RoundState(self._round_seq, prompt, targets if any(t.is_usable for t in targets) else [])

        if not state.order:
            logger.info("round %d: no usable targets, nothing to dispatch", state.number)
            return self._finish(state)

        logger.info("round %d: dispatching to %d target(s)", state.number, len(targets))
        self._in_flight += 1
        tasks: list[asyncio.Task] = []
        try:
            tasks = [asyncio.create_task(self._run_target(state, t)) for t in targets]
            for fut in asyncio.as_completed(tasks):
                result = await fut
                if on_result and not self._is_superseded(state):
                    self._notify(on_result, result, state)
        finally:
            # every target task is awaited before the round is released
            if tasks:
                await asyncio.gather(*tasks, return_exceptions=True)
            self._in_flight -= 1

        return self._finish(state)

    start_round = dispatch

    @staticmethod
    def _notify(on_result: ResultCallback, result: TargetResult, state: _RoundState) -> None:
        try:
            on_result(result)
        except Exception:
            logger.exception("round %d: on_result callback failed for target %s", state.number, result.target_id)

    def _is_superseded(self, state: _RoundState) -> bool:
        return state.number != self._round_seq

    def _finish(self, state: _RoundState) -> DispatchRound:
        superseded = self._is_superseded(state)
        snapshot = state.snapshot(superseded=superseded)
        if superseded:
            logger.info("round %d superseded by round %d; results discarded", state.number, self._round_seq)
        else:
            self.latest = snapshot
        return snapshot

    async def _run_target(self, state: _RoundState, target: TargetConfig) -> TargetResult:
        tid = target.id

        if not target.is_usable:
            exc = ConfigurationIncomplete(target.missing_fields())
            return self._settle(state, TargetResult(tid, TargetStatus.failed, error_message=error_message(exc)))

        adapter = self.adapter_for(target.provider)
        if adapter is None:
            logger.warning("round %d: no adapter registered for %s", state.number, target.provider)
            exc = ConfigurationIncomplete(["adapter"])
            return self._settle(state, TargetResult(tid, TargetStatus.failed, error_message=error_message(exc)))

        state.slots[tid] = state.slots[tid].start()
        logger.debug("round %d: target %s in flight (%s/%s)", state.number, tid, target.provider.value, target.model)

        t0 = time.perf_counter()
        try:
            raw = await asyncio.wait_for(
                adapter.invoke(state.prompt, target.model, target.credential),
                timeout=self.timeout_s,
            )
            text = normalize(target.provider, raw)
        except asyncio.TimeoutError:
            latency_ms = int((time.perf_counter() - t0) * 1000)
            exc = TransportError(f"{target.provider.value} request timed out after {self.timeout_s:g}s")
            return self._fail(state, tid, exc, latency_ms)
        except Exception as e:
            latency_ms = int((time.perf_counter() - t0) * 1000)
            return self._fail(state, tid, e, latency_ms)

        latency_ms = int((time.perf_counter() - t0) * 1000)
        logger.info("round %d: target %s succeeded in %d ms", state.number, tid, latency_ms)
        return self._settle(state, state.slots[tid].succeed(text, latency_ms=latency_ms))

    def _fail(self, state: _RoundState, tid: str, exc: BaseException, latency_ms: int) -> TargetResult:
        message = error_message(exc)
        logger.warning("round %d: target %s failed (%s): %s", state.number, tid, type(exc).__name__, message)
        return self._settle(state, state.slots[tid].fail(message, latency_ms=latency_ms))

    @staticmethod
    def _settle(state: _RoundState, result: TargetResult) -> TargetResult:
        state.slots[result.target_id] = result
        return result
