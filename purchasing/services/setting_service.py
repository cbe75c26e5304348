from typing import Any

from django.conf import settings as django_settings
from django.db import transaction

from purchasing.models import Setting
from purchasing.services.base_service import BaseService, ValidationError

CURRENCY_KEY = "currency"


class SettingService(BaseService):
    model = Setting

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        return Setting.get(key, default)

    @classmethod
    @transaction.atomic
    def set(cls, key: str, value: Any) -> Setting:
        if not key:
            raise ValidationError("Setting key is required", "key")
        setting, _ = Setting.objects.update_or_create(
            key=key, defaults={"value": "" if value is None else str(value)}
        )
        return setting

    @classmethod
    def currency(cls) -> str:
        """Display currency code; read on every call so edits apply immediately."""
        return cls.get(CURRENCY_KEY, django_settings.DEFAULT_CURRENCY)
