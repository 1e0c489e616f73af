from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from stockbook.domain.errors import ValidationError
from stockbook.domain.models import AppSettings
from stockbook.repositories.event_store import EventStore

CURRENCIES = ("₹ INR", "$ USD", "€ EUR")
UNITS = ("kg", "g", "box", "litre", "pack")


class SettingsService:
    def __init__(self, repo: EventStore):
        self.repo = repo

    def load(self) -> tuple[AppSettings, Optional[str]]:
        return self.repo.load_settings(), self.repo.load_settings_updated_time()

    def save(
        self,
        currency: Optional[str] = None,
        default_unit: Optional[str] = None,
        admin_access: Optional[dict[str, bool]] = None,
    ) -> str:
        current = self.repo.load_settings()
        if currency is not None and currency not in CURRENCIES:
            raise ValidationError(f"Unsupported currency: {currency}")
        if default_unit is not None and default_unit not in UNITS:
            raise ValidationError(f"Unsupported unit: {default_unit}")

        access = dict(current.admin_access)
        access.update(admin_access or {})
        updated = replace(
            current,
            currency=currency or current.currency,
            default_unit=default_unit or current.default_unit,
            admin_access=access,
        )
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self.repo.save_settings(updated, stamp)
        return stamp

    def toggle_access(self, key: str) -> AppSettings:
        current = self.repo.load_settings()
        if key not in current.admin_access:
            raise ValidationError(f"Unknown access flag: {key}")
        self.save(admin_access={key: not current.admin_access[key]})
        return self.repo.load_settings()

    def reset(self) -> AppSettings:
        self.repo.clear_settings()
        return AppSettings()
