"""In-memory implementation of SettingsRepository for testing."""

from typing import Any


class FakeSettingsRepository:
    def __init__(self, values: dict[str, Any] | None = None):
        self.values: dict[str, Any] | None = dict(values) if values else None
        self.save_count = 0

    def load(self) -> dict[str, Any] | None:
        return dict(self.values) if self.values is not None else None

    def save(self, values: dict[str, Any]) -> None:
        self.values = {**(self.values or {}), **values}
        self.save_count += 1

    def clear(self) -> None:
        self.values = None
