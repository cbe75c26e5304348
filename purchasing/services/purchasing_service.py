import logging
from decimal import Decimal
from typing import Dict, Any

from django.db import transaction
from django.db.models import Sum

from purchasing.models import Purchasing
from purchasing.services.base_service import (
    BaseService, NotFoundError, BusinessRuleError, round_decimal,
)

logger = logging.getLogger(__name__)

TOTAL_FIELDS = ("total_initial_price", "total_selling_price")


class PurchasingService(BaseService):

    model = Purchasing

    @classmethod
    def serialize_brief(cls, purchasing: Purchasing) -> Dict[str, Any]:
        return {
            "id": purchasing.id,
            "number": purchasing.number,
            "supplier_name": purchasing.supplier_name,
            "status": purchasing.status,
            "status_display": purchasing.get_status_display(),
            "date": purchasing.date.isoformat(),
            "total_initial_price": str(purchasing.total_initial_price),
            "total_selling_price": str(purchasing.total_selling_price),
        }

    @classmethod
    def get_updated_price(cls, purchasing: Purchasing) -> Dict[str, Decimal]:
        """Sum the line totals of every stock line under ``purchasing``."""
        sums = purchasing.stocks.aggregate(
            total_initial_price=Sum("total_initial_price"),
            total_selling_price=Sum("total_selling_price"),
        )
        return {
            field: round_decimal(sums[field] or Decimal("0"))
            for field in TOTAL_FIELDS
        }

    @classmethod
    @transaction.atomic
    def update(cls, purchasing_id: int, totals: Dict[str, Any]) -> None:
        purchasing = cls.get_by_id(purchasing_id)
        if not purchasing:
            raise NotFoundError("Purchasing", purchasing_id)

        update_fields = ["updated_at"]
        for field in TOTAL_FIELDS:
            if field in totals:
                setattr(purchasing, field, totals[field])
                update_fields.append(field)

        purchasing.save(update_fields=update_fields)
        logger.info(
            "Purchasing %s totals updated: initial=%s selling=%s",
            purchasing.number,
            purchasing.total_initial_price,
            purchasing.total_selling_price,
        )

    @classmethod
    @transaction.atomic
    def approve(cls, purchasing_id: int) -> Purchasing:
        purchasing = cls.get_by_id(purchasing_id)
        if not purchasing:
            raise NotFoundError("Purchasing", purchasing_id)

        if purchasing.status not in [Purchasing.Status.DRAFT, Purchasing.Status.PENDING]:
            raise BusinessRuleError(
                f"Cannot approve purchasing in {purchasing.status} status", "approve_status"
            )

        purchasing.status = Purchasing.Status.APPROVED
        purchasing.save(update_fields=["status", "updated_at"])
        logger.info("Purchasing %s approved", purchasing.number)
        return purchasing
