from typing import Dict, Any, Optional
from decimal import Decimal, ROUND_HALF_UP
from django.db.models import Model
from django.utils import timezone


class ServiceError(Exception):
    def __init__(self, message: str, code: str = "ERROR", details: Dict = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class ValidationError(ServiceError):
    def __init__(self, message: str, field: str = None, details: Dict = None):
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class NotFoundError(ServiceError):
    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            f"{resource} not found: {identifier}",
            "NOT_FOUND",
            {"resource": resource, "identifier": str(identifier)}
        )


class BusinessRuleError(ServiceError):
    def __init__(self, message: str, rule: str = None):
        super().__init__(message, "BUSINESS_RULE_VIOLATION", {"rule": rule})


class PurchasingLockedError(BusinessRuleError):
    def __init__(self, purchasing_number: str):
        super().__init__(
            f"Purchasing {purchasing_number} is approved; its stock lines are read-only",
            "purchasing_locked",
        )


def round_decimal(value: Decimal, places: int = 2) -> Decimal:
    if value is None:
        return Decimal("0")
    quantize_str = "0." + "0" * places
    return value.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)


def generate_number(prefix: str, model_class: Model, field: str = "number") -> str:
    today = timezone.now()
    date_part = today.strftime("%Y%m%d")
    filter_kwargs = {f"{field}__startswith": f"{prefix}-{date_part}"}
    last = model_class.objects.filter(**filter_kwargs).order_by(f"-{field}").first()

    if last:
        last_num = getattr(last, field)
        try:
            seq = int(last_num.split("-")[-1]) + 1
        except ValueError:
            seq = 1
    else:
        seq = 1

    return f"{prefix}-{date_part}-{seq:04d}"


class BaseService:
    model = None

    @classmethod
    def get_by_id(cls, id: int) -> Optional[Model]:
        try:
            return cls.model.objects.get(id=id)
        except (cls.model.DoesNotExist, ValueError, TypeError):
            return None

    @classmethod
    def get_or_404(cls, id: int) -> Model:
        obj = cls.get_by_id(id)
        if not obj:
            raise NotFoundError(cls.model.__name__, id)
        return obj

    @classmethod
    def get_active(cls):
        if hasattr(cls.model, 'is_active'):
            return cls.model.objects.filter(is_active=True)
        return cls.model.objects.all()
