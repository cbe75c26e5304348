import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("sku", models.CharField(blank=True, default="", max_length=64, verbose_name="SKU")),
                ("initial_price", models.DecimalField(decimal_places=2, default=0, max_digits=15, verbose_name="initial price")),
                ("selling_price", models.DecimalField(decimal_places=2, default=0, max_digits=15, verbose_name="selling price")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "product",
                "verbose_name_plural": "products",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Purchasing",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number", models.CharField(editable=False, max_length=50, unique=True, verbose_name="number")),
                ("supplier_name", models.CharField(blank=True, default="", max_length=255, verbose_name="supplier")),
                ("date", models.DateField(default=django.utils.timezone.localdate, verbose_name="date")),
                ("status", models.CharField(
                    choices=[("DRAFT", "Draft"), ("PENDING", "Pending"), ("APPROVED", "Approved"), ("CANCELLED", "Cancelled")],
                    default="DRAFT", max_length=20, verbose_name="status",
                )),
                ("total_initial_price", models.DecimalField(decimal_places=2, default=0, max_digits=15, verbose_name="total initial price")),
                ("total_selling_price", models.DecimalField(decimal_places=2, default=0, max_digits=15, verbose_name="total selling price")),
                ("note", models.TextField(blank=True, default="", verbose_name="note")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "purchasing",
                "verbose_name_plural": "purchasings",
                "ordering": ["-date", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Setting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=100, unique=True, verbose_name="key")),
                ("value", models.TextField(blank=True, default="", verbose_name="value")),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "setting",
                "verbose_name_plural": "settings",
                "ordering": ["key"],
            },
        ),
        migrations.CreateModel(
            name="Stock",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("init_stock", models.IntegerField(default=0, verbose_name="initial stock")),
                ("stock", models.IntegerField(default=0, verbose_name="stock")),
                ("initial_price", models.DecimalField(decimal_places=2, default=0, max_digits=15, verbose_name="initial price")),
                ("selling_price", models.DecimalField(decimal_places=2, default=0, max_digits=15, verbose_name="selling price")),
                ("total_initial_price", models.DecimalField(decimal_places=2, default=0, max_digits=15, verbose_name="total initial price")),
                ("total_selling_price", models.DecimalField(decimal_places=2, default=0, max_digits=15, verbose_name="total selling price")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("product", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT, related_name="stocks",
                    to="purchasing.product", verbose_name="product",
                )),
                ("purchasing", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="stocks",
                    to="purchasing.purchasing", verbose_name="purchasing",
                )),
            ],
            options={
                "verbose_name": "stock",
                "verbose_name_plural": "stocks",
                "ordering": ["id"],
            },
        ),
    ]
