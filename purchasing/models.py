from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    name = models.CharField(_("name"), max_length=255)
    sku = models.CharField(_("SKU"), max_length=64, blank=True, default="")
    initial_price = models.DecimalField(
        _("initial price"), max_digits=15, decimal_places=2, default=0
    )
    selling_price = models.DecimalField(
        _("selling price"), max_digits=15, decimal_places=2, default=0
    )
    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = _("product")
        verbose_name_plural = _("products")

    def __str__(self):
        return self.name


class Purchasing(models.Model):
    class Status(models.TextChoices):
        DRAFT = "DRAFT", _("Draft")
        PENDING = "PENDING", _("Pending")
        APPROVED = "APPROVED", _("Approved")
        CANCELLED = "CANCELLED", _("Cancelled")

    number = models.CharField(_("number"), max_length=50, unique=True, editable=False)
    supplier_name = models.CharField(_("supplier"), max_length=255, blank=True, default="")
    date = models.DateField(_("date"), default=timezone.localdate)
    status = models.CharField(
        _("status"), max_length=20, choices=Status.choices, default=Status.DRAFT
    )
    total_initial_price = models.DecimalField(
        _("total initial price"), max_digits=15, decimal_places=2, default=0
    )
    total_selling_price = models.DecimalField(
        _("total selling price"), max_digits=15, decimal_places=2, default=0
    )
    note = models.TextField(_("note"), blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        verbose_name = _("purchasing")
        verbose_name_plural = _("purchasings")

    def __str__(self):
        return self.number

    def save(self, *args, **kwargs):
        if not self.number:
            from purchasing.services.base_service import generate_number
            self.number = generate_number("PO", Purchasing, "number")
        super().save(*args, **kwargs)

    @property
    def is_locked(self) -> bool:
        return is_locked(self)


def is_locked(purchasing: Purchasing) -> bool:
    """Approved purchasings freeze their stock lines."""
    return purchasing.status == Purchasing.Status.APPROVED


class Stock(models.Model):
    purchasing = models.ForeignKey(
        Purchasing, on_delete=models.CASCADE, related_name="stocks",
        verbose_name=_("purchasing"),
    )
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="stocks",
        verbose_name=_("product"),
    )
    # Quantity as first recorded; ``stock`` moves independently afterwards.
    init_stock = models.IntegerField(_("initial stock"), default=0)
    stock = models.IntegerField(_("stock"), default=0)
    initial_price = models.DecimalField(
        _("initial price"), max_digits=15, decimal_places=2, default=0
    )
    selling_price = models.DecimalField(
        _("selling price"), max_digits=15, decimal_places=2, default=0
    )
    total_initial_price = models.DecimalField(
        _("total initial price"), max_digits=15, decimal_places=2, default=0
    )
    total_selling_price = models.DecimalField(
        _("total selling price"), max_digits=15, decimal_places=2, default=0
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = _("stock")
        verbose_name_plural = _("stocks")

    def __str__(self):
        return f"{self.product.name} × {self.stock}"


class Setting(models.Model):
    """
    Key/value store for process-wide configuration (currency, ...).
    Use Setting.get(key, default) to read a value.
    """

    key = models.CharField(_("key"), max_length=100, unique=True)
    value = models.TextField(_("value"), blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]
        verbose_name = _("setting")
        verbose_name_plural = _("settings")

    def __str__(self):
        return self.key

    @classmethod
    def get(cls, key: str, default=None):
        row = cls.objects.filter(key=key).first()
        if row is None or row.value == "":
            return default
        return row.value
