import logging
from typing import Dict, Any

from django.db import transaction

from purchasing.models import Product, Purchasing, Stock
from purchasing.pricing import to_money, to_number, line_totals
from purchasing.services.base_service import BaseService, ValidationError

logger = logging.getLogger(__name__)

QUANTITY_FIELDS = ("init_stock", "stock")
MONEY_FIELDS = ("initial_price", "selling_price", "total_initial_price", "total_selling_price")


class StockService(BaseService):
    """
    Persists stock lines. Callers hand over already validated form values;
    unknown products are still rejected here since the product picker can
    be stale by the time the form is submitted.
    """

    model = Stock

    @classmethod
    def _resolve_product(cls, product_id: Any) -> Product:
        if isinstance(product_id, Product):
            return product_id
        product = Product.objects.filter(id=product_id).first() if product_id else None
        if product is None:
            raise ValidationError(f"Product not found: {product_id}", "product_id")
        return product

    @classmethod
    @transaction.atomic
    def create(cls, data: Dict[str, Any], purchasing: Purchasing) -> Stock:
        product = cls._resolve_product(data.get("product_id"))
        quantity = int(to_number(data.get("stock")))
        initial_price = to_money(data.get("initial_price"))
        selling_price = to_money(data.get("selling_price"))
        totals = line_totals(initial_price, selling_price, quantity)

        stock = cls.model.objects.create(
            purchasing=purchasing,
            product=product,
            init_stock=quantity,
            stock=quantity,
            initial_price=initial_price,
            selling_price=selling_price,
            total_initial_price=totals["total_initial_price"],
            total_selling_price=totals["total_selling_price"],
        )
        logger.info(
            "Stock line %s created on purchasing %s (product=%s, stock=%s)",
            stock.id, purchasing.number, product.id, quantity,
        )
        return stock

    @classmethod
    @transaction.atomic
    def update(cls, stock: Stock, data: Dict[str, Any]) -> Stock:
        """Overwrite exactly the fields present in ``data``."""
        update_fields = ["updated_at"]

        if "product_id" in data:
            product = cls._resolve_product(data["product_id"])
            if product.id != stock.product_id:
                stock.product = product
                update_fields.append("product")

        for field in QUANTITY_FIELDS:
            if field in data:
                setattr(stock, field, int(to_number(data[field])))
                update_fields.append(field)

        for field in MONEY_FIELDS:
            if field in data:
                setattr(stock, field, to_money(data[field]))
                update_fields.append(field)

        stock.save(update_fields=update_fields)
        logger.info(
            "Stock line %s updated (%s)", stock.id, ", ".join(update_fields[1:]) or "no fields",
        )
        return stock

    @classmethod
    @transaction.atomic
    def delete(cls, stock: Stock) -> None:
        stock_id = stock.id
        stock.delete()
        logger.info("Stock line %s deleted", stock_id)
