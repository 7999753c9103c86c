"""HTTP surface through TestClient: status codes, camelCase bodies, error details."""

import pytest

from conftest import make_product, make_user, put_in_cart
from sigecob.domain.enums import UserRole


@pytest.fixture()
def customer(db):
    return make_user(db, name="Ana Pérez")


@pytest.fixture()
def admin(db):
    return make_user(db, name="Marta Admin", role=UserRole.ADMIN)


class TestHealth:
    def test_ok(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestUsers:
    def test_register_creates_cart(self, client):
        response = client.post("/users/", json={"name": "Ana Pérez", "email": "ana@example.com"})
        assert response.status_code == 201
        user = response.json()
        assert user["role"] == "Customer"

        cart = client.get("/cart/", params={"user_id": user["id"]}).json()
        assert cart["userId"] == user["id"]
        assert cart["items"] == []

    def test_duplicate_email(self, client):
        client.post("/users/", json={"name": "Ana", "email": "ana@example.com"})
        response = client.post("/users/", json={"name": "Otra Ana", "email": "ana@example.com"})
        assert response.status_code == 409
        assert response.json()["detail"]["kind"] == "Conflict"

    def test_unknown_user(self, client):
        response = client.get("/users/999")
        assert response.status_code == 404
        assert response.json()["detail"]["kind"] == "NotFound"


class TestCartRoutes:
    def test_add_update_remove(self, client, db, customer):
        product = make_product(db, name="Mouse", price="19.99", stock=5)

        response = client.post("/cart/items", params={"user_id": customer.id}, json={"productId": product.id, "quantity": 2})
        assert response.status_code == 200
        cart = response.json()
        item_id = cart["items"][0]["id"]
        assert cart["total"] == "39.98"

        response = client.put(f"/cart/items/{item_id}", params={"user_id": customer.id}, json={"quantity": 3})
        assert response.json()["items"][0]["quantity"] == 3

        response = client.delete(f"/cart/items/{item_id}", params={"user_id": customer.id})
        assert response.json()["items"] == []

    def test_over_stock(self, client, db, customer):
        product = make_product(db, stock=1)
        response = client.post("/cart/items", params={"user_id": customer.id}, json={"productId": product.id, "quantity": 2})
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["kind"] == "InsufficientStock"
        assert detail["available"] == 1
        assert detail["requested"] == 2

    def test_clear(self, client, db, customer):
        put_in_cart(db, customer, make_product(db), 2)
        response = client.delete("/cart/", params={"user_id": customer.id})
        assert response.status_code == 200
        assert response.json()["items"] == []


class TestCheckoutRoute:
    def test_create_order(self, client, db, customer):
        product = make_product(db, price="10.00", stock=5)
        put_in_cart(db, customer, product, 2)

        response = client.post(
            "/orders/create",
            params={"user_id": customer.id},
            json={"shippingAddress": "Av. Central 12", "paymentMethod": "CreditCard"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["order"]["totalAmount"] == "20.00"
        assert body["order"]["orderStatus"] == "Processing"
        assert body["order"]["shippingAddress"] == "Av. Central 12"
        assert body["payment"]["paymentStatus"] == "Confirmed"
        assert body["payment"]["transactionId"].startswith("TXN-")

        history = client.get("/orders/history", params={"user_id": customer.id}).json()
        assert [o["id"] for o in history] == [body["order"]["id"]]
        assert history[0]["paymentId"] == body["payment"]["id"]

    @pytest.mark.parametrize(
        "payload,kind",
        [
            ({"paymentMethod": "CreditCard"}, "MissingField"),
            ({"shippingAddress": "X", "paymentMethod": "Cash"}, "InvalidPaymentMethod"),
            ({"shippingAddress": "X", "paymentMethod": "PayPal"}, "EmptyCart"),
        ],
    )
    def test_rejections(self, client, customer, payload, kind):
        response = client.post("/orders/create", params={"user_id": customer.id}, json=payload)
        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == kind

    def test_order_visibility(self, client, db, customer):
        put_in_cart(db, customer, make_product(db), 1)
        order_id = client.post(
            "/orders/create",
            params={"user_id": customer.id},
            json={"shippingAddress": "X", "paymentMethod": "PayPal"},
        ).json()["order"]["id"]
        stranger = make_user(db, name="Luis Gómez")

        assert client.get(f"/orders/{order_id}", params={"user_id": customer.id}).status_code == 200
        assert client.get(f"/orders/{order_id}", params={"user_id": stranger.id}).status_code == 403


class TestAdminRoutes:
    def test_status_update(self, client, db, customer, admin):
        put_in_cart(db, customer, make_product(db), 1)
        order_id = client.post(
            "/orders/create",
            params={"user_id": customer.id},
            json={"shippingAddress": "X", "paymentMethod": "PayPal"},
        ).json()["order"]["id"]

        response = client.put(f"/admin/orders/{order_id}/status", params={"user_id": admin.id}, json={"orderStatus": "Shipped"})
        assert response.status_code == 200
        assert response.json()["orderStatus"] == "Shipped"

        response = client.put(f"/admin/orders/{order_id}/status", params={"user_id": admin.id}, json={"orderStatus": "Pending"})
        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "InvalidStatusTransition"

        listed = client.get("/admin/orders/", params={"user_id": admin.id, "status": "Shipped"}).json()
        assert [o["id"] for o in listed] == [order_id]

    def test_customer_forbidden(self, client, customer):
        response = client.get("/admin/orders/", params={"user_id": customer.id})
        assert response.status_code == 403
        assert response.json()["detail"]["kind"] == "Forbidden"

    def test_admin_order_detail_requires_admin(self, client, db, customer):
        put_in_cart(db, customer, make_product(db), 1)
        order_id = client.post(
            "/orders/create",
            params={"user_id": customer.id},
            json={"shippingAddress": "X", "paymentMethod": "PayPal"},
        ).json()["order"]["id"]
        assert client.get(f"/admin/orders/{order_id}", params={"user_id": customer.id}).status_code == 403


class TestProductRoutes:
    def test_catalog_lifecycle(self, client, admin):
        response = client.post(
            "/products/",
            params={"user_id": admin.id},
            json={"name": "Monitor", "price": "149.00", "stock": 0, "category": "Monitores"},
        )
        assert response.status_code == 201
        product = response.json()
        assert product["status"] == "Out_of_Stock"

        response = client.put(f"/products/{product['id']}/stock", params={"user_id": admin.id}, json={"stock": 4})
        assert response.json()["status"] == "Available"

        response = client.delete(f"/products/{product['id']}", params={"user_id": admin.id})
        assert response.json()["status"] == "Discontinued"

        page = client.get("/products/").json()
        assert page["items"] == []
        assert page["total"] == 0

        assert client.get(f"/products/{product['id']}").json()["name"] == "Monitor"

    def test_edit_product(self, client, db, admin):
        make_product(db, name="Cable")
        product = make_product(db, name="Monitor", price="149.00")

        response = client.put(
            f"/products/{product.id}",
            params={"user_id": admin.id},
            json={"price": "139.90", "imageUrl": "https://cdn.example.com/monitor.png"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["price"] == "139.90"
        assert body["imageUrl"] == "https://cdn.example.com/monitor.png"

        response = client.put(f"/products/{product.id}", params={"user_id": admin.id}, json={"name": "Cable"})
        assert response.status_code == 409
        assert response.json()["detail"]["kind"] == "Conflict"

    def test_listing_pages(self, client, db):
        for i in range(3):
            make_product(db, name=f"Cable {i}")
        page = client.get("/products/", params={"page": 2, "page_size": 2}).json()
        assert page["totalPages"] == 2
        assert page["pageSize"] == 2
        assert [p["name"] for p in page["items"]] == ["Cable 2"]


class TestAuditRoute:
    def test_auditor_sees_entries(self, client, db, customer):
        auditor = make_user(db, name="Raúl Auditor", role=UserRole.AUDITOR)
        client.post("/orders/create", params={"user_id": customer.id}, json={"shippingAddress": "X", "paymentMethod": "PayPal"})

        response = client.get("/audit/", params={"user_id": auditor.id})
        assert response.status_code == 200
        [entry] = response.json()
        assert entry["action"] == "ORDER_CREATION_FAILED"
        assert entry["userId"] == customer.id
        assert entry["details"]["kind"] == "EmptyCart"
        assert entry["ipAddress"] == "testclient"

    def test_customer_cannot_read(self, client, customer):
        assert client.get("/audit/", params={"user_id": customer.id}).status_code == 403

    def test_filters(self, client, db, customer, admin):
        auditor = make_user(db, name="Raúl Auditor", role=UserRole.AUDITOR)
        client.post("/orders/create", params={"user_id": customer.id}, json={"shippingAddress": "X", "paymentMethod": "PayPal"})
        product = make_product(db, stock=0)
        client.put(f"/products/{product.id}/stock", params={"user_id": admin.id}, json={"stock": 3})

        def actions(**params):
            response = client.get("/audit/", params={"user_id": auditor.id, **params})
            assert response.status_code == 200
            return [e["action"] for e in response.json()]

        assert actions(action="STOCK") == ["PRODUCT_STOCK_UPDATED"]
        assert actions(actor_id=customer.id) == ["ORDER_CREATION_FAILED"]
        assert actions(entity="Product") == ["PRODUCT_STOCK_UPDATED"]
        assert len(actions(ip_address="testcli")) == 2
        assert actions(ip_address="10.0.") == []
        assert actions(start_date="2000-01-01T00:00:00", end_date="2001-01-01T00:00:00") == []


class TestIdentity:
    def test_unknown_acting_user(self, client):
        response = client.get("/orders/history", params={"user_id": 999})
        assert response.status_code == 401
        assert response.json()["detail"]["kind"] == "Unauthorized"
