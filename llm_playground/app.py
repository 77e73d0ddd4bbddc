# llm_playground/app.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from llm_playground.catalog import ProviderCatalog
from llm_playground.dispatcher import Dispatcher
from llm_playground.store import TargetStore
from llm_playground.types import DispatchRound, TargetConfig, TargetResult


@dataclass(frozen=True)
class RoundCallbacks:
    """
    Shared callback bundle for front-ends.
    on_result fires once per target as it settles (any order); never for superseded rounds.
    """
    on_round_start: Optional[Callable[[int, tuple[TargetConfig, ...]], None]] = None
    on_result: Optional[Callable[[TargetResult], None]] = None
    on_round_end: Optional[Callable[[DispatchRound], None]] = None


class Playground:
    """
    The surface a UI talks to: configure up to N targets, then submit prompts.
    The target list is frozen while a round is in flight.
    """

    def __init__(
        self,
        *,
        catalog: ProviderCatalog,
        store: TargetStore,
        dispatcher: Dispatcher,
        callbacks: RoundCallbacks | None = None,
    ):
        self.catalog = catalog
        self.store = store
        self.dispatcher = dispatcher
        self.callbacks = callbacks or RoundCallbacks()

    def add_target(self, provider: str, model: str, credential: str) -> TargetConfig:
        return self.store.add(provider, model, credential)

    def remove_target(self, target_id: str) -> TargetConfig:
        return self.store.remove(target_id)

    @property
    def busy(self) -> bool:
        return self.dispatcher.in_flight

    @property
    def latest(self) -> DispatchRound | None:
        return self.dispatcher.latest

    async def start_round(self, prompt: str) -> DispatchRound:
        cb = self.callbacks
        with self.store.locked() as targets:
            if cb.on_round_start:
                cb.on_round_start(self.dispatcher.current_round + 1, targets)
            rnd = await self.dispatcher.start_round(prompt, targets, on_result=cb.on_result)

        if cb.on_round_end and not rnd.superseded:
            cb.on_round_end(rnd)
        return rnd
