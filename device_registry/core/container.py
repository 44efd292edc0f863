"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass
from device_registry.core.config import Settings
from device_registry.core.security import PrincipalResolver, bearer_token_resolver
from device_registry.infrastructure.database.session import get_engine


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    principal_resolver: PrincipalResolver

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        principal_resolver: PrincipalResolver | None = None,
    ) -> "ApplicationContainer":
        return cls(
            settings=settings,
            principal_resolver=principal_resolver or bearer_token_resolver(settings),
        )

    def init_infrastructure(self) -> None:
        """Ensure infrastructure singletons (database engine, photo directory) exist."""
        get_engine(self.settings)
        self.settings.storage.photo_dir.mkdir(parents=True, exist_ok=True)


__all__ = ["ApplicationContainer"]
