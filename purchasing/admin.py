from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin, TabularInline
from unfold.decorators import display
from unfold.contrib.filters.admin import RangeDateFilter, RangeNumericFilter

from .editor import StockLineEditor
from .forms import StockInlineForm
from .models import Product, Purchasing, Stock, Setting, is_locked
from .pricing import format_money
from .services import PurchasingService, SettingService, ServiceError


STOCK_FIELDS = (
    'product_id', 'init_stock', 'stock', 'initial_price', 'selling_price',
    'total_initial_price', 'total_selling_price',
)
LOCKED_STOCK_FIELDS = (
    'product_name', 'init_stock', 'stock', 'initial_price', 'selling_price',
    'total_initial_price', 'total_selling_price',
)


class StockInline(TabularInline):
    model = Stock
    form = StockInlineForm
    extra = 0
    fields = STOCK_FIELDS
    verbose_name = _("Item")
    verbose_name_plural = _("Items")

    def _locked(self, obj):
        return obj is not None and is_locked(obj)

    def get_fields(self, request, obj=None):
        return LOCKED_STOCK_FIELDS if self._locked(obj) else STOCK_FIELDS

    def get_readonly_fields(self, request, obj=None):
        return LOCKED_STOCK_FIELDS if self._locked(obj) else ()

    def has_add_permission(self, request, obj=None):
        return super().has_add_permission(request, obj) and not self._locked(obj)

    def has_change_permission(self, request, obj=None):
        return super().has_change_permission(request, obj) and not self._locked(obj)

    def has_delete_permission(self, request, obj=None):
        return super().has_delete_permission(request, obj) and not self._locked(obj)

    @display(description=_("Product"))
    def product_name(self, obj):
        return obj.product.name if obj.pk else "-"


@admin.register(Purchasing)
class PurchasingAdmin(ModelAdmin):
    list_display = ['number', 'supplier_name', 'date', 'status_badge',
                    'total_initial_display', 'total_selling_display', 'items_count']
    list_filter = [
        'status',
        ('date', RangeDateFilter),
    ]
    search_fields = ['number', 'supplier_name']
    list_filter_submit = True
    list_fullwidth = True
    inlines = [StockInline]
    readonly_fields = ['number', 'status', 'total_initial_price', 'total_selling_price',
                       'created_at', 'updated_at']
    actions = ['approve_selected']

    fieldsets = (
        (_('Purchasing Information'), {
            'fields': ('number', 'supplier_name', 'date', 'status', 'note')
        }),
        (_('Totals'), {
            'fields': ('total_initial_price', 'total_selling_price')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at')
        }),
    )

    def get_formset_kwargs(self, request, obj, inline, prefix):
        kwargs = super().get_formset_kwargs(request, obj, inline, prefix)
        if isinstance(inline, StockInline):
            kwargs['form_kwargs'] = {'currency': SettingService.currency()}
        return kwargs

    def save_formset(self, request, form, formset, change):
        if formset.model is not Stock:
            return super().save_formset(request, form, formset, change)
        StockLineEditor(form.instance).apply_formset(formset)

    @admin.action(description=_("Approve selected purchasings"))
    def approve_selected(self, request, queryset):
        approved = 0
        for purchasing in queryset:
            try:
                PurchasingService.approve(purchasing.pk)
                approved += 1
            except ServiceError as e:
                self.message_user(request, e.message, messages.WARNING)
        if approved:
            self.message_user(request, _("%d purchasing(s) approved.") % approved, messages.SUCCESS)

    @display(description=_("Status"), label=True)
    def status_badge(self, obj):
        colors = {
            'DRAFT': 'info',
            'PENDING': 'warning',
            'APPROVED': 'success',
            'CANCELLED': 'danger',
        }
        return colors.get(obj.status, 'info'), obj.get_status_display()

    @display(description=_("Total initial price"), ordering='total_initial_price')
    def total_initial_display(self, obj):
        return format_money(obj.total_initial_price, SettingService.currency())

    @display(description=_("Total selling price"), ordering='total_selling_price')
    def total_selling_display(self, obj):
        return format_money(obj.total_selling_price, SettingService.currency())

    @display(description=_("Items"))
    def items_count(self, obj):
        return obj.stocks.count()


@admin.register(Product)
class ProductAdmin(ModelAdmin):
    list_display = ['id', 'name', 'sku', 'initial_price_display', 'selling_price_display', 'is_active']
    list_filter = [
        'is_active',
        ('selling_price', RangeNumericFilter),
    ]
    search_fields = ['name', 'sku']
    list_filter_submit = True

    fieldsets = (
        (_('Product Information'), {
            'fields': ('name', 'sku', 'is_active')
        }),
        (_('Pricing'), {
            'fields': ('initial_price', 'selling_price')
        }),
    )

    @display(description=_("Initial price"), ordering='initial_price')
    def initial_price_display(self, obj):
        return format_money(obj.initial_price, SettingService.currency())

    @display(description=_("Selling price"), ordering='selling_price')
    def selling_price_display(self, obj):
        return format_money(obj.selling_price, SettingService.currency())


@admin.register(Setting)
class SettingAdmin(ModelAdmin):
    list_display = ['key', 'value', 'updated_at']
    search_fields = ['key']
    readonly_fields = ['updated_at']
