import json
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from purchasing.models import Product, Purchasing, Stock
from purchasing.services import StockService


class StockLineViewTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        User = get_user_model()
        cls.staff = User.objects.create_user("clerk", password="secret", is_staff=True)
        cls.customer = User.objects.create_user("guest", password="secret")
        cls.beans = Product.objects.create(
            name="Arabica Beans", initial_price=Decimal("10000"), selling_price=Decimal("15000")
        )

    def setUp(self):
        self.client.force_login(self.staff)
        self.purchasing = Purchasing.objects.create(supplier_name="Kopi Nusantara")
        self.list_url = reverse("purchasing:stock-list", args=[self.purchasing.pk])

    def payload(self, **overrides):
        data = {
            "product_id": self.beans.pk,
            "stock": "3",
            "initial_price": "10,000",
            "selling_price": "15,000",
        }
        data.update(overrides)
        return data

    def send(self, method, url, data=None):
        return getattr(self.client, method)(
            url, data=json.dumps(data or {}), content_type="application/json"
        )

    def detail_url(self, stock, suffix="stock-detail"):
        return reverse(f"purchasing:{suffix}", args=[self.purchasing.pk, stock.pk])

    def test_requires_staff(self):
        self.client.logout()
        self.assertEqual(self.client.get(self.list_url).status_code, 403)
        self.client.force_login(self.customer)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"]["code"], "forbidden")

    def test_list(self):
        StockService.create(self.payload(), self.purchasing)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(len(body["rows"]), 1)
        self.assertEqual(body["actions"]["create"], True)

    def test_unknown_purchasing(self):
        url = reverse("purchasing:stock-list", args=[999999])
        self.assertEqual(self.client.get(url).status_code, 404)

    def test_create(self):
        response = self.send("post", self.list_url, self.payload())
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["stock"]["init_stock"], 3)
        self.assertEqual(body["stock"]["total_initial_price"], "30000.00")
        self.assertEqual(body["purchasing"]["total_selling_price"], "45000.00")
        self.assertTrue(body["refresh"])

    def test_create_validation_error(self):
        response = self.send("post", self.list_url, self.payload(initial_price="20,000"))
        self.assertEqual(response.status_code, 400)
        fields = response.json()["error"]["details"]["fields"]
        self.assertIn("initial_price", fields)
        self.assertIn("selling_price", fields)
        self.assertFalse(Stock.objects.exists())

    def test_invalid_json(self):
        response = self.client.post(self.list_url, data="{oops", content_type="application/json")
        self.assertEqual(response.status_code, 400)
        response = self.send("post", self.list_url, ["not", "an", "object"])
        self.assertEqual(response.status_code, 400)

    def test_edit(self):
        stock = StockService.create(self.payload(), self.purchasing)
        response = self.send("put", self.detail_url(stock), self.payload(stock="5"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["stock"]["total_selling_price"], "75000.00")
        self.purchasing.refresh_from_db()
        self.assertEqual(self.purchasing.total_selling_price, Decimal("75000.00"))

    def test_delete(self):
        stock = StockService.create(self.payload(), self.purchasing)
        response = self.client.delete(self.detail_url(stock))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["deleted"], stock.pk)
        self.assertFalse(Stock.objects.filter(pk=stock.pk).exists())

    def test_init_stock_patch(self):
        stock = StockService.create(self.payload(), self.purchasing)
        response = self.send("patch", self.detail_url(stock, "stock-init-stock"), {"init_stock": 5})
        self.assertEqual(response.status_code, 200)
        body = response.json()["stock"]
        self.assertEqual((body["init_stock"], body["stock"]), (5, 5))
        self.assertEqual(body["total_initial_price"], "30000.00")

    def test_locked_purchasing_refuses_mutations(self):
        stock = StockService.create(self.payload(), self.purchasing)
        Purchasing.objects.filter(pk=self.purchasing.pk).update(status=Purchasing.Status.APPROVED)

        response = self.send("post", self.list_url, self.payload())
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"]["code"], "purchasing_locked")
        self.assertEqual(self.send("put", self.detail_url(stock), self.payload()).status_code, 403)
        self.assertEqual(self.client.delete(self.detail_url(stock)).status_code, 403)
        self.assertEqual(
            self.send("patch", self.detail_url(stock, "stock-init-stock"), {"init_stock": 9}).status_code,
            403,
        )

        body = self.client.get(self.list_url).json()
        self.assertTrue(body["read_only"])
        self.assertEqual(body["actions"], {"create": False, "edit": False, "delete": False})

    def test_recompute(self):
        url = reverse("purchasing:stock-recompute", args=[self.purchasing.pk])
        response = self.send("post", url, {"changed": "stock", "state": self.payload()})
        self.assertEqual(response.status_code, 200)
        patch = response.json()["patch"]
        self.assertEqual(Decimal(patch["total_initial_price"]), Decimal("30000"))
        self.assertEqual(Decimal(patch["total_selling_price"]), Decimal("45000"))

    def test_recompute_product_selection(self):
        url = reverse("purchasing:stock-recompute", args=[self.purchasing.pk])
        response = self.send("post", url, {
            "changed": "product_id", "state": {"product_id": self.beans.pk},
        })
        patch = response.json()["patch"]
        self.assertEqual(set(patch), {"initial_price", "selling_price"})
        self.assertEqual(Decimal(patch["initial_price"]), Decimal("10000"))

    def test_recompute_requires_changed(self):
        url = reverse("purchasing:stock-recompute", args=[self.purchasing.pk])
        response = self.send("post", url, {"state": {}})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["details"]["field"], "changed")

    def test_recompute_oversized_amount_reads_as_zero(self):
        url = reverse("purchasing:stock-recompute", args=[self.purchasing.pk])
        response = self.send("post", url, {
            "changed": "stock",
            "state": {"stock": "1", "initial_price": "1e30", "selling_price": "1"},
        })
        self.assertEqual(response.status_code, 200)
        patch = response.json()["patch"]
        self.assertEqual(Decimal(patch["total_initial_price"]), Decimal("0"))
        self.assertEqual(Decimal(patch["total_selling_price"]), Decimal("1"))

    def test_recompute_requires_state_object(self):
        url = reverse("purchasing:stock-recompute", args=[self.purchasing.pk])
        response = self.send("post", url, {"changed": "stock", "state": [1]})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["details"]["field"], "state")


class ProductSearchViewTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.staff = get_user_model().objects.create_user("clerk", password="secret", is_staff=True)
        Product.objects.create(name="Arabica Beans", initial_price=10000, selling_price=15000)
        Product.objects.create(name="Oat Milk", initial_price=2000, selling_price=3500)

    def test_search(self):
        self.client.force_login(self.staff)
        response = self.client.get(reverse("purchasing:product-search"), {"q": "bean"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["products"][0]["name"], "Arabica Beans")
        self.assertEqual(body["products"][0]["selling_price"], "15000.00")
