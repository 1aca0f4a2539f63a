"""Per-invocation CLI state carried on `typer.Context.obj`."""

from __future__ import annotations

from dataclasses import dataclass

from core.config import AppSettings


@dataclass
class CliState:
    settings: AppSettings | None = None

    def get_settings(self) -> AppSettings:
        if self.settings is None:
            self.settings = AppSettings()
        return self.settings
