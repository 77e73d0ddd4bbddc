from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Iterator

from llm_playground import settings
from llm_playground.catalog import ProviderCatalog
from llm_playground.errors import ConfigurationError
from llm_playground.types import TargetConfig


class TargetStore:
    """
    Holds the confirmed target configurations, in the order they were added.
    Plain data holder; edits are refused while a round holds the lock.
    """

    def __init__(self, catalog: ProviderCatalog, *, capacity: int = settings.MAX_TARGETS):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.catalog = catalog
        self.capacity = capacity
        self._targets: dict[str, TargetConfig] = {}
        self._locks = 0

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._targets

    @property
    def is_full(self) -> bool:
        return len(self._targets) >= self.capacity

    @property
    def is_locked(self) -> bool:
        return self._locks > 0

    def targets(self) -> tuple[TargetConfig, ...]:
        return tuple(self._targets.values())

    def get(self, target_id: str) -> TargetConfig:
        try:
            return self._targets[target_id]
        except KeyError:
            raise ConfigurationError(f"Unknown target: {target_id}") from None

    def add(self, provider: str, model: str, credential: str) -> TargetConfig:
        self._check_unlocked()
        if self.is_full:
            raise ConfigurationError(f"At most {self.capacity} targets can be configured")

        info = self.catalog.get(provider)
        if not model:
            raise ConfigurationError(f"Select a model for {info.display_name}")
        if not self.catalog.is_legal_model(info.provider, model):
            raise ConfigurationError(f"Model {model!r} is not available for {info.display_name}")

        credential = (credential or "").strip()
        if not credential:
            raise ConfigurationError(f"An API key is required for {info.display_name}")
        self.catalog.check_credential_format(info.provider, credential)

        target = TargetConfig(id=uuid.uuid4().hex, provider=info.provider, model=model, credential=credential)
        self._targets[target.id] = target
        return target

    def remove(self, target_id: str) -> TargetConfig:
        self._check_unlocked()
        target = self.get(target_id)
        del self._targets[target_id]
        return target

    def clear(self) -> None:
        self._check_unlocked()
        self._targets.clear()

    @contextmanager
    def locked(self) -> Iterator[tuple[TargetConfig, ...]]:
        """Freeze the target list for the duration of a round."""
        self._locks += 1
        try:
            yield self.targets()
        finally:
            self._locks -= 1

    def _check_unlocked(self) -> None:
        if self.is_locked:
            raise ConfigurationError("Targets cannot be changed while a round is in flight")
