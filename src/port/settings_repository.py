"""Settings repository port: storage interface for the global settings document."""

from typing import Any, Protocol


class SettingsRepository(Protocol):
    """Storage for the single global settings document."""

    def load(self) -> dict[str, Any] | None:
        """Return stored setting values, or None if nothing was saved yet."""
        ...

    def save(self, values: dict[str, Any]) -> None:
        """Merge values into the stored document (upsert)."""
        ...

    def clear(self) -> None:
        """Remove all stored values."""
        ...
