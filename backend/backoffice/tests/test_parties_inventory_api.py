from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from ..choices import InventoryItemType, UnitOfMeasurement
from ..models import Client, FinishedGood
from ..services.sales import create_sale
from . import create_client, create_raw_material, create_trading_good, create_user, create_vendor


class ClientAPITests(TestCase):
    def setUp(self):
        self.user = create_user("clients")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_create_normalises_email_and_gst_number(self):
        response = self.client.post(
            "/api/clients/",
            {
                "name": "  Tata Motors ",
                "email": "Accounts@Tata.COM",
                "phone": "9876543210",
                "gst_number": "27aapft0939c1zs",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        client = Client.objects.get()
        self.assertEqual(client.name, "Tata Motors")
        self.assertEqual(client.email, "accounts@tata.com")
        self.assertEqual(client.gst_number, "27AAPFT0939C1ZS")
        self.assertEqual(client.country, "India")
        self.assertEqual(response.data["balance"], "0.00")

    def test_duplicate_email_is_rejected_case_insensitively(self):
        create_client(self.user, email="sales@acme.in")
        response = self.client.post(
            "/api/clients/", {"name": "Acme Two", "email": "SALES@acme.in"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)

    def test_invalid_phone_is_rejected(self):
        response = self.client.post(
            "/api/clients/", {"name": "Bad Phone", "email": "bad@phone.in", "phone": "1234567890"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("phone", response.data)

    def test_client_with_sales_cannot_be_deleted(self):
        client = create_client(self.user)
        good = create_trading_good(self.user)
        create_sale(
            {"client": client},
            [{"item_type": InventoryItemType.TRADING_GOOD, "item_id": good.id,
              "quantity": Decimal("1"), "unit_price": Decimal("10.00")}],
            self.user,
        )

        response = self.client.delete(f"/api/clients/{client.id}/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get(f"/api/clients/{client.id}/details/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["summary"]["sale_count"], 1)
        self.assertEqual(response.data["summary"]["outstanding_balance"], Decimal("10.00"))

    def test_client_without_sales_can_be_deleted(self):
        client = create_client(self.user)
        response = self.client.delete(f"/api/clients/{client.id}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class VendorAPITests(TestCase):
    def setUp(self):
        self.user = create_user("vendors")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_create_with_raw_material_types(self):
        response = self.client.post(
            "/api/vendors/",
            {
                "name": "Metal Works",
                "email": "hello@metal.works",
                "specialty": "Copper",
                "raw_material_types": ["Copper ", "Tin"],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["raw_material_types"], ["Copper", "Tin"])
        self.assertEqual(
            response.data["procurement_counts"], {"raw_material": 0, "trading_good": 0}
        )

    def test_details(self):
        vendor = create_vendor(self.user)
        response = self.client.get(f"/api/vendors/{vendor.id}/details/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["raw_material_procurements"], [])
        self.assertEqual(response.data["summary"]["outstanding_payable"], Decimal("0.00"))


class InventoryAPITests(TestCase):
    def setUp(self):
        self.user = create_user("inventory")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_selling_price_below_cost_is_rejected(self):
        response = self.client.post(
            "/api/inventory/trading-goods/",
            {
                "name": "Nut",
                "unit": UnitOfMeasurement.PIECE,
                "cost_price": "5.00",
                "selling_price": "4.99",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("selling_price", response.data)

    def test_low_stock_lists(self):
        create_raw_material(self.user, name="Tin", stock="2", reorder="5")
        create_raw_material(self.user, name="Zinc", stock="20", reorder="5")
        create_trading_good(self.user, name="Washer", stock="0")

        response = self.client.get("/api/inventory/raw-materials/low_stock/")
        self.assertEqual([row["name"] for row in response.data], ["Tin"])
        self.assertTrue(response.data[0]["is_low_stock"])

        response = self.client.get("/api/inventory/trading-goods/low_stock/")
        self.assertEqual([row["name"] for row in response.data], ["Washer"])

    def test_finished_good_with_components(self):
        copper = create_raw_material(self.user, name="Copper")
        steel = create_raw_material(self.user, name="Steel")
        payload = {
            "name": "Motor",
            "unit": UnitOfMeasurement.PIECE,
            "manufacturing_cost": "400.00",
            "selling_price": "600.00",
            "raw_materials_used": [
                {"raw_material": copper.id, "quantity_required": "2.5"},
                {"raw_material": steel.id, "quantity_required": "4"},
            ],
        }
        response = self.client.post("/api/inventory/finished-goods/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["profit_margin"], "50.00")
        self.assertEqual(FinishedGood.objects.get().raw_materials_used.count(), 2)

        payload["raw_materials_used"].append({"raw_material": copper.id, "quantity_required": "1"})
        response = self.client.post("/api/inventory/finished-goods/", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_raw_material_types(self):
        response = self.client.post("/api/raw-material-types/", {"name": " Copper "}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["name"], "Copper")
