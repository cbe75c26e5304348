"""
Stock-line editor for a single purchasing.

The editor is what the admin inline and the JSON views talk to: it
describes the form and the table, decides which actions are available,
and routes every mutation through StockService and PurchasingService.
"""

import logging
from typing import Any, Dict, List

from django import forms
from django.utils.translation import gettext_lazy as _

from purchasing.forms import QuantityField, StockLineForm
from purchasing.models import Purchasing, Stock, is_locked
from purchasing.pricing import format_money, recompute, LIVE_FIELDS
from purchasing.services import (
    StockService, PurchasingService, ProductService, SettingService,
    PurchasingLockedError, NotFoundError, ValidationError,
)

logger = logging.getLogger(__name__)

MONEY_COLUMNS = (
    ("initial_price", _("Initial price")),
    ("selling_price", _("Selling price")),
    ("total_initial_price", _("Total initial price")),
    ("total_selling_price", _("Total selling price")),
)

INIT_STOCK_INPUT = QuantityField()


class StockLineEditor:
    relationship = "stocks"

    def __init__(self, purchasing: Purchasing,
                 stock_service=StockService,
                 purchasing_service=PurchasingService,
                 product_service=ProductService):
        self.purchasing = purchasing
        self.stock_service = stock_service
        self.purchasing_service = purchasing_service
        self.product_service = product_service
        self.refresh_requested = False

    # ------------------------------------------------------------------
    # Owner record & lock
    # ------------------------------------------------------------------

    def get_owner_record(self) -> Purchasing:
        self.purchasing.refresh_from_db(fields=["status"])
        return self.purchasing

    def is_read_only(self) -> bool:
        return is_locked(self.get_owner_record())

    def _ensure_editable(self, action: str) -> Purchasing:
        purchasing = self.get_owner_record()
        if is_locked(purchasing):
            logger.warning(
                "Refused %s on approved purchasing %s", action, purchasing.number
            )
            raise PurchasingLockedError(purchasing.number)
        return purchasing

    def _ensure_owned(self, stock: Stock) -> None:
        if stock.purchasing_id != self.purchasing.pk:
            raise NotFoundError("Stock", stock.pk)

    def refresh_page(self) -> None:
        self.refresh_requested = True

    # ------------------------------------------------------------------
    # Form contract
    # ------------------------------------------------------------------

    def get_form(self, data: Dict[str, Any] = None, instance: Stock = None) -> StockLineForm:
        return StockLineForm(data=data, instance=instance, currency=SettingService.currency())

    def form_schema(self) -> List[Dict[str, Any]]:
        currency = SettingService.currency()
        read_only = self.is_read_only()
        form = self.get_form()
        schema = []
        for name, field in form.fields.items():
            money = name.endswith("price")
            schema.append({
                "name": name,
                "label": str(field.label),
                "kind": "select" if name == "product_id" else ("money" if money else "number"),
                "required": field.required,
                "read_only": read_only or field.disabled,
                "live": name in LIVE_FIELDS,
                "prefix": currency if name in ("initial_price", "selling_price") else None,
            })
        return schema

    def on_field_change(self, state: Dict[str, Any], changed: str) -> Dict[str, Any]:
        return recompute(state, changed, self.product_service.find_by_id)

    # ------------------------------------------------------------------
    # List contract
    # ------------------------------------------------------------------

    def table_columns(self) -> List[Dict[str, Any]]:
        currency = SettingService.currency()
        columns = [
            {"name": "product.name", "label": str(_("Product")), "kind": "text"},
            {
                "name": "init_stock",
                "label": str(_("Initial stock")),
                "kind": "input",
                "type": "number",
                "disabled": self.is_read_only(),
            },
        ]
        for name, label in MONEY_COLUMNS:
            columns.append({"name": name, "label": str(label), "kind": "money", "currency": currency})
        return columns

    def get_queryset(self):
        return self.purchasing.stocks.select_related("product").order_by("id")

    def get_stock(self, stock_id: Any) -> Stock:
        stock = self.get_queryset().filter(id=stock_id).first()
        if stock is None:
            raise NotFoundError("Stock", stock_id)
        return stock

    def serialize(self, stock: Stock, currency: str = None) -> Dict[str, Any]:
        currency = currency or SettingService.currency()
        data = {
            "id": stock.id,
            "product_id": stock.product_id,
            "product_name": stock.product.name,
            "init_stock": stock.init_stock,
            "stock": stock.stock,
        }
        for name, _label in MONEY_COLUMNS:
            value = getattr(stock, name)
            data[name] = str(value)
            data[f"{name}_display"] = format_money(value, currency)
        return data

    def rows(self) -> List[Dict[str, Any]]:
        currency = SettingService.currency()
        return [self.serialize(stock, currency) for stock in self.get_queryset()]

    def actions(self) -> Dict[str, bool]:
        editable = not self.is_read_only()
        return {"create": editable, "edit": editable, "delete": editable}

    def render(self) -> Dict[str, Any]:
        purchasing = self.get_owner_record()
        return {
            "purchasing": self.purchasing_service.serialize_brief(purchasing),
            "relationship": self.relationship,
            "read_only": is_locked(purchasing),
            "currency": SettingService.currency(),
            "form": self.form_schema(),
            "columns": self.table_columns(),
            "actions": self.actions(),
            "rows": self.rows(),
        }

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _refresh_totals(self, purchasing: Purchasing) -> None:
        self.purchasing_service.update(
            purchasing.pk,
            self.purchasing_service.get_updated_price(purchasing),
        )

    def validate(self, data: Dict[str, Any], instance: Stock = None) -> Dict[str, Any]:
        form = self.get_form(data=data, instance=instance)
        if not form.is_valid():
            raise StockLineInvalid(form)
        return form.cleaned_data

    def create(self, data: Dict[str, Any], validated: bool = False) -> Stock:
        purchasing = self._ensure_editable("create")
        cleaned = data if validated else self.validate(data)
        stock = self.stock_service.create(cleaned, purchasing)
        self._refresh_totals(purchasing)
        self.refresh_page()
        return stock

    def edit(self, stock: Stock, data: Dict[str, Any], validated: bool = False) -> Stock:
        purchasing = self._ensure_editable("edit")
        self._ensure_owned(stock)
        cleaned = data if validated else self.validate(data, instance=stock)
        stock = self.stock_service.update(stock, cleaned)
        self._refresh_totals(purchasing)
        self.refresh_page()
        return stock

    def delete(self, stock: Stock) -> None:
        purchasing = self._ensure_editable("delete")
        self._ensure_owned(stock)
        self.stock_service.delete(stock)
        self._refresh_totals(purchasing)
        self.refresh_page()

    def update_init_stock(self, stock: Stock, value: Any) -> Stock:
        """Inline table edit: the new value replaces both quantities."""
        self._ensure_editable("inline init_stock edit")
        self._ensure_owned(stock)
        try:
            quantity = INIT_STOCK_INPUT.clean(value)
        except forms.ValidationError as e:
            raise ValidationError(" ".join(e.messages), "init_stock")
        return self.stock_service.update(stock, {
            "init_stock": quantity,
            "stock": quantity,
            "product_id": stock.product_id,
        })

    def apply_formset(self, formset) -> None:
        """Persist an admin inline formset through the editor actions."""
        formset.new_objects = []
        formset.changed_objects = []
        formset.deleted_objects = []

        # View-only inline forms come back with their initial data.
        if self.is_read_only():
            return

        for form in formset.deleted_forms:
            if form.instance.pk:
                self.delete(form.instance)
                formset.deleted_objects.append(form.instance)

        for form in formset.forms:
            if form in formset.deleted_forms or not form.has_changed():
                continue
            if not form.instance.pk:
                formset.new_objects.append(self.create(form.cleaned_data, validated=True))
                continue

            stock = form.instance
            line_changes = [name for name in form.changed_data if name != "init_stock"]
            if line_changes:
                data = {k: v for k, v in form.cleaned_data.items() if k != "init_stock"}
                stock = self.edit(stock, data, validated=True)
            # Applied last: the inline quantity overwrites ``stock`` as well.
            if "init_stock" in form.changed_data:
                stock = self.update_init_stock(stock, form.cleaned_data["init_stock"])
            formset.changed_objects.append((stock, form.changed_data))


class StockLineInvalid(Exception):
    """Form-level rejection; carries the bound form for field errors."""

    def __init__(self, form: StockLineForm):
        self.form = form
        super().__init__("Invalid stock line")

    @property
    def errors(self) -> Dict[str, List[str]]:
        return {field: [str(e) for e in errors] for field, errors in self.form.errors.items()}
