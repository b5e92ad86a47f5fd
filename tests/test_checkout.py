"""Tests for checkout / order creation"""
import pytest

from octamart.cart import CartService
from octamart.errors import CheckoutError, ConflictError, NotFoundError, ValidationError
from octamart.orders import Address, CheckoutRequest, CheckoutService, Contact, normalize_payment_method


def make_request(**overrides):
    data = {
        "contact": Contact(name="Budi Santoso", email="Budi@Example.com", phone="081234567890"),
        "address": Address(street="Jl. Merdeka 1", city="Bandung", postal_code="40111", province="Jawa Barat"),
        "payment_method": "bank",
    }
    data.update(overrides)
    return CheckoutRequest(**data)


class TestPaymentMethod:
    @pytest.mark.parametrize("value,expected", [
        ("credit-card", "credit_card"),
        ("bank", "bank_transfer"),
        ("cod", "cash_on_delivery"),
        ("bank_transfer", "bank_transfer"),
        ("CASH_ON_DELIVERY", "cash_on_delivery"),
    ])
    def test_aliases(self, value, expected):
        assert normalize_payment_method(value) == expected

    def test_unknown_method(self):
        with pytest.raises(ValidationError):
            normalize_payment_method("bitcoin")


class TestPlaceOrder:
    @pytest.mark.asyncio
    async def test_order_from_server_cart(self, db, supabase, customer, products):
        cart = CartService(db)
        await cart.add_item(customer.id, "prod-1", 2)
        await cart.add_item(customer.id, "prod-2", 1)

        order = await CheckoutService(db).place_order(customer.id, make_request())

        assert order["orderNumber"].startswith("ORD-")
        assert order["status"] == "pending"
        assert order["paymentStatus"] == "pending"
        assert order["paymentMethod"] == "bank_transfer"
        assert order["customerEmail"] == "budi@example.com"
        # 650,000 + shipping 20,000 + tax 71,500
        assert order["totalAmount"] == 741500
        assert order["summary"]["shipping"] == 20000
        assert {i["productId"] for i in order["items"]} == {"prod-1", "prod-2"}
        assert order["shippingAddress"]["postalCode"] == "40111"

        stored = supabase.rows("orders")[0]
        assert stored["shipping_address"] == "Jl. Merdeka 1, Bandung, Jawa Barat 40111"
        assert len(supabase.rows("order_items")) == 2

    @pytest.mark.asyncio
    async def test_stock_decremented_and_cart_cleared(self, db, supabase, customer, products):
        await CartService(db).add_item(customer.id, "prod-2", 5)

        await CheckoutService(db).place_order(customer.id, make_request())

        product = next(p for p in supabase.rows("products") if p["id"] == "prod-2")
        assert product["stock"] == 0
        assert supabase.rows("cart_items") == []

    @pytest.mark.asyncio
    async def test_only_selected_cart_items(self, db, supabase, customer, products):
        cart = CartService(db)
        selected = await cart.add_item(customer.id, "prod-1", 1)
        await cart.add_item(customer.id, "prod-2", 1)

        order = await CheckoutService(db).place_order(
            customer.id, make_request(cart_item_ids=[selected.id])
        )

        assert [i["productId"] for i in order["items"]] == ["prod-1"]
        remaining = supabase.rows("cart_items")
        assert len(remaining) == 1 and remaining[0]["product_id"] == "prod-2"

    @pytest.mark.asyncio
    async def test_falls_back_to_submitted_items(self, db, supabase, customer, products):
        order = await CheckoutService(db).place_order(
            customer.id, make_request(items=[("prod-3", 1), ("prod-3", 1)])
        )

        # Over the free-shipping threshold: 1,800,000 + 198,000 tax
        assert order["items"][0]["quantity"] == 2
        assert order["summary"]["shipping"] == 0
        assert order["totalAmount"] == 1998000

    @pytest.mark.asyncio
    async def test_server_prices_win(self, db, supabase, customer, products):
        order = await CheckoutService(db).place_order(
            customer.id, make_request(items=[("prod-1", 1)], client_total=1)
        )

        assert order["items"][0]["price"] == 250000
        assert order["totalAmount"] == 287500

    @pytest.mark.asyncio
    async def test_empty_cart(self, db, customer, products):
        with pytest.raises(ValidationError):
            await CheckoutService(db).place_order(customer.id, make_request())

    @pytest.mark.asyncio
    async def test_unknown_product(self, db, customer, products):
        with pytest.raises(NotFoundError):
            await CheckoutService(db).place_order(customer.id, make_request(items=[("nope", 1)]))

    @pytest.mark.asyncio
    async def test_insufficient_stock(self, db, supabase, customer, products):
        with pytest.raises(ConflictError):
            await CheckoutService(db).place_order(customer.id, make_request(items=[("prod-3", 3)]))
        assert supabase.rows("orders") == []

    @pytest.mark.asyncio
    async def test_missing_contact(self, db, customer, products):
        request = make_request(contact=Contact(name="Budi", email="", phone="0812"), items=[("prod-1", 1)])
        with pytest.raises(ValidationError):
            await CheckoutService(db).place_order(customer.id, request)

    @pytest.mark.asyncio
    async def test_incomplete_address(self, db, customer, products):
        request = make_request(address=Address(street="Jl. Merdeka 1", city="Bandung"), items=[("prod-1", 1)])
        with pytest.raises(ValidationError):
            await CheckoutService(db).place_order(customer.id, request)

    @pytest.mark.asyncio
    async def test_order_removed_when_items_fail(self, db, supabase, customer, products):
        supabase.failures[("order_items", "insert")] = RuntimeError("insert failed")

        with pytest.raises(CheckoutError):
            await CheckoutService(db).place_order(customer.id, make_request(items=[("prod-1", 1)]))

        assert supabase.rows("orders") == []
        product = next(p for p in supabase.rows("products") if p["id"] == "prod-1")
        assert product["stock"] == 20
