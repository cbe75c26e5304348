from django import forms
from django.utils.translation import gettext_lazy as _
from unfold.widgets import UnfoldAdminSelectWidget, UnfoldAdminTextInputWidget

from purchasing.models import Product, Stock
from purchasing.pricing import strip_separators, to_number, line_totals

# Largest value an IntegerField column holds on every supported backend.
MAX_QUANTITY = 2147483647


class MoneyField(forms.DecimalField):
    """Decimal input that accepts the masked "10,000" form."""

    def __init__(self, **kwargs):
        kwargs.setdefault("max_digits", 15)
        kwargs.setdefault("decimal_places", 2)
        kwargs.setdefault("min_value", 0)
        kwargs.setdefault("widget", UnfoldAdminTextInputWidget(attrs={
            "inputmode": "decimal",
            "data-mask": "money",
        }))
        super().__init__(**kwargs)

    def to_python(self, value):
        if isinstance(value, str):
            value = strip_separators(value)
        return super().to_python(value)


class QuantityField(forms.IntegerField):
    """Whole-number input that accepts the masked "1,000" form."""

    def __init__(self, **kwargs):
        kwargs.setdefault("min_value", 0)
        kwargs.setdefault("max_value", MAX_QUANTITY)
        kwargs.setdefault("widget", UnfoldAdminTextInputWidget(attrs={"inputmode": "numeric"}))
        super().__init__(**kwargs)

    def to_python(self, value):
        if isinstance(value, str):
            value = strip_separators(value)
        return super().to_python(value)


class ProductChoiceField(forms.ModelChoiceField):
    def label_from_instance(self, obj):
        return obj.name


class StockLineForm(forms.ModelForm):
    product_id = ProductChoiceField(
        label=_("Product"),
        queryset=Product.objects.filter(is_active=True).order_by("name"),
        widget=UnfoldAdminSelectWidget(attrs={"data-searchable": "name", "data-live": "true"}),
    )
    stock = QuantityField(
        label=_("Stock"),
        required=False,
        widget=UnfoldAdminTextInputWidget(attrs={"inputmode": "numeric", "data-live": "blur"}),
    )
    initial_price = MoneyField(label=_("Initial price"))
    selling_price = MoneyField(label=_("Selling price"))
    total_initial_price = MoneyField(label=_("Total initial price"), required=False, disabled=True)
    total_selling_price = MoneyField(label=_("Total selling price"), required=False, disabled=True)

    field_order = [
        "product_id",
        "stock",
        "initial_price",
        "selling_price",
        "total_initial_price",
        "total_selling_price",
    ]

    class Meta:
        model = Stock
        fields = [
            "stock",
            "initial_price",
            "selling_price",
            "total_initial_price",
            "total_selling_price",
        ]

    def __init__(self, *args, currency: str = None, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance and self.instance.pk:
            self.initial.setdefault("product_id", self.instance.product_id)
        for name in ("initial_price", "selling_price"):
            self.fields[name].widget.attrs["data-live"] = "blur"
            if currency:
                self.fields[name].widget.attrs["data-prefix"] = currency

    def clean_product_id(self):
        product = self.cleaned_data["product_id"]
        return product.pk

    def clean_stock(self):
        value = self.cleaned_data.get("stock")
        return 0 if value is None else value

    def clean(self):
        cleaned_data = super().clean()
        initial_price = cleaned_data.get("initial_price")
        selling_price = cleaned_data.get("selling_price")

        if initial_price is not None and selling_price is not None:
            if initial_price > selling_price:
                self.add_error("initial_price", forms.ValidationError(
                    _("Initial price must be less than or equal to the selling price."),
                    code="lte",
                ))
                self.add_error("selling_price", forms.ValidationError(
                    _("Selling price must be greater than or equal to the initial price."),
                    code="gte",
                ))
                return cleaned_data

        if not self.errors:
            cleaned_data.update(line_totals(
                initial_price, selling_price, to_number(cleaned_data.get("stock")),
            ))
        return cleaned_data

    def save(self, commit=True):
        self.instance.product_id = self.cleaned_data["product_id"]
        return super().save(commit=commit)


class StockInlineForm(StockLineForm):
    """Admin inline row; saved lines also expose ``init_stock`` for editing."""

    init_stock = QuantityField(label=_("Initial stock"))

    field_order = ["product_id", "init_stock", *StockLineForm.field_order[1:]]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not (self.instance and self.instance.pk):
            # New lines take ``init_stock`` from ``stock``.
            self.fields["init_stock"].disabled = True
            self.fields["init_stock"].required = False
