from conftest import ADMIN_PASSWORD
from translation_desk.models.enums import StaffRole
from translation_desk.models.order import Order
from translation_desk.services.auth_service import auth_service

BASE = "/api/v1/admin/requests"


class TestAdminAccess:
    def test_requires_token(self, client):
        r = client.get(BASE)
        assert r.status_code == 401
        assert r.json()["error"]["kind"] == "Unauthorized"

    def test_rejects_unknown_token(self, client):
        r = client.get(BASE, headers={"Authorization": "Bearer nope"})
        assert r.status_code == 401

    def test_logout_invalidates_token(self, client, auth_headers):
        assert client.post("/api/v1/auth/logout", headers=auth_headers).status_code == 200
        assert client.get(BASE, headers=auth_headers).status_code == 401


class TestListRequests:
    def _seed(self, submit_order, db):
        ids = []
        for name, email in [
            ("Alice Brown", "alice@example.com"),
            ("Bob Stone", "bob@corp.example"),
            ("Carla Diaz", "carla@example.com"),
        ]:
            ids.append(submit_order(customerName=name, customerEmail=email).json()["requestId"])
        return ids

    def test_default_listing(self, client, auth_headers, submit_order, db):
        ids = self._seed(submit_order, db)
        r = client.get(BASE, headers=auth_headers)
        assert r.status_code == 200
        body = r.json()
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 3, "pages": 1}
        assert {o["id"] for o in body["requests"]} == set(ids)
        created = [o["createdAt"] for o in body["requests"]]
        assert created == sorted(created, reverse=True)
        first = body["requests"][0]
        assert len(first["statusHistory"]) == 1
        assert first["statusHistory"][0]["status"] == "PENDING"

    def test_list_carries_latest_entry_only(self, client, auth_headers, submit_order, db):
        ids = self._seed(submit_order, db)
        client.put(f"{BASE}/{ids[0]}/status", json={"status": "UNDER_REVIEW"}, headers=auth_headers)
        body = client.get(BASE, params={"status": "UNDER_REVIEW"}, headers=auth_headers).json()
        assert body["pagination"]["total"] == 1
        history = body["requests"][0]["statusHistory"]
        assert [h["status"] for h in history] == ["UNDER_REVIEW"]

    def test_search(self, client, auth_headers, submit_order, db):
        self._seed(submit_order, db)
        body = client.get(BASE, params={"search": "corp.EXAMPLE"}, headers=auth_headers).json()
        assert [o["customerName"] for o in body["requests"]] == ["Bob Stone"]

    def test_status_and_search_combined(self, client, auth_headers, submit_order, db):
        ids = self._seed(submit_order, db)
        john = submit_order(customerName="John Smith", customerEmail="john@example.com").json()["requestId"]
        client.put(f"{BASE}/{ids[0]}/status", json={"status": "ON_HOLD"}, headers=auth_headers)
        body = client.get(
            BASE, params={"status": "PENDING", "search": "john", "page": "1", "limit": "10"}, headers=auth_headers
        ).json()
        assert [o["id"] for o in body["requests"]] == [john]
        assert body["pagination"]["total"] == 1

    def test_pagination_and_limit_all(self, client, auth_headers, submit_order, db):
        self._seed(submit_order, db)
        page2 = client.get(BASE, params={"page": "2", "limit": "2"}, headers=auth_headers).json()
        assert page2["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}
        assert len(page2["requests"]) == 1

        everything = client.get(BASE, params={"limit": "all"}, headers=auth_headers).json()
        assert len(everything["requests"]) == 3
        assert everything["pagination"]["pages"] == 1

    def test_sort_by_name(self, client, auth_headers, submit_order, db):
        self._seed(submit_order, db)
        body = client.get(BASE, params={"sortBy": "name", "sortOrder": "asc"}, headers=auth_headers).json()
        assert [o["customerName"] for o in body["requests"]] == ["Alice Brown", "Bob Stone", "Carla Diaz"]

    def test_date_range_is_inclusive(self, client, auth_headers, submit_order, db):
        ids = self._seed(submit_order, db)
        db.query(Order).filter(Order.id == ids[0]).update({"created_at": "2024-03-01T00:00:00.000Z"})
        db.query(Order).filter(Order.id == ids[1]).update({"created_at": "2024-03-10T23:59:59.999Z"})
        db.query(Order).filter(Order.id == ids[2]).update({"created_at": "2024-03-11T00:00:00.000Z"})
        db.commit()

        body = client.get(
            BASE, params={"dateFrom": "2024-03-01", "dateTo": "2024-03-10"}, headers=auth_headers
        ).json()
        assert sorted(o["id"] for o in body["requests"]) == sorted(ids[:2])

    def test_invalid_query_params(self, client, auth_headers):
        r = client.get(BASE, params={"page": "0", "limit": "many", "status": "LOST"}, headers=auth_headers)
        assert r.status_code == 400
        fields = {f["field"] for f in r.json()["error"]["fields"]}
        assert fields == {"page", "limit", "status"}


class TestRequestDetail:
    def test_get_round_trip(self, client, auth_headers, submit_order):
        order_id = submit_order(hardCopy="true").json()["requestId"]
        r = client.get(f"{BASE}/{order_id}", headers=auth_headers)
        assert r.status_code == 200
        body = r.json()
        assert body["customerName"] == "John Smith"
        assert body["customerEmail"] == "john.smith@example.com"
        assert body["documentType"] == "LEGAL"
        assert body["hardCopy"] is True
        assert body["numberOfPages"] == "3"
        assert body["estimatedPrice"] == 1100
        assert body["originalFileName"] == "contract.pdf"
        assert body["fileType"] == "application/pdf"
        assert body["version"] == 2
        assert body["statusHistory"][0]["status"] == "PENDING"
        assert body["statusHistory"][0]["changedBy"] == "System"

    def test_unknown_request(self, client, auth_headers):
        r = client.get(f"{BASE}/does-not-exist", headers=auth_headers)
        assert r.status_code == 404
        assert r.json()["error"] == {"kind": "NotFound", "message": "Translation request not found"}


class TestUpdateRequest:
    def test_patch_fields_and_status(self, client, auth_headers, submit_order):
        order_id = submit_order().json()["requestId"]
        r = client.patch(f"{BASE}/{order_id}", json={
            "status": "QUOTE_SENT",
            "finalPrice": 1200,
            "estimatedDelivery": "2026-11-02",
            "adminNotes": "Quote sent by email",
        }, headers=auth_headers)
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "QUOTE_SENT"
        assert body["finalPrice"] == 1200
        assert body["estimatedDelivery"] == "2026-11-02"
        latest = body["statusHistory"][0]
        assert latest["status"] == "QUOTE_SENT"
        assert latest["notes"] == "Quote sent by email"
        assert latest["changedBy"] == "admin@example.com"
        assert len(body["statusHistory"]) == 2

    def test_patch_leaves_absent_fields(self, client, auth_headers, submit_order):
        order_id = submit_order().json()["requestId"]
        client.patch(f"{BASE}/{order_id}", json={"assignedTo": "Mona"}, headers=auth_headers)
        body = client.patch(f"{BASE}/{order_id}", json={"adminNotes": "Rush"}, headers=auth_headers).json()
        assert body["assignedTo"] == "Mona"
        assert body["adminNotes"] == "Rush"
        assert len(body["statusHistory"]) == 1

    def test_patch_blank_clears(self, client, auth_headers, submit_order):
        order_id = submit_order().json()["requestId"]
        client.patch(f"{BASE}/{order_id}", json={"assignedTo": "Mona"}, headers=auth_headers)
        body = client.patch(f"{BASE}/{order_id}", json={"assignedTo": ""}, headers=auth_headers).json()
        assert body["assignedTo"] is None

    def test_patch_rejects_bad_status(self, client, auth_headers, submit_order):
        order_id = submit_order().json()["requestId"]
        r = client.patch(f"{BASE}/{order_id}", json={"status": "SHIPPED"}, headers=auth_headers)
        assert r.status_code == 400
        assert r.json()["error"]["kind"] == "ValidationError"

    def test_patch_with_stale_version(self, client, auth_headers, submit_order):
        order_id = submit_order().json()["requestId"]
        current = client.get(f"{BASE}/{order_id}", headers=auth_headers).json()["version"]
        ok = client.patch(f"{BASE}/{order_id}", json={"assignedTo": "Mona", "version": current}, headers=auth_headers)
        assert ok.status_code == 200
        assert ok.json()["version"] == current + 1

        stale = client.patch(f"{BASE}/{order_id}", json={"assignedTo": "Omar", "version": current}, headers=auth_headers)
        assert stale.status_code == 409
        assert stale.json()["error"]["kind"] == "Conflict"
        body = client.get(f"{BASE}/{order_id}", headers=auth_headers).json()
        assert body["assignedTo"] == "Mona"

    def test_status_endpoint(self, client, auth_headers, submit_order):
        order_id = submit_order().json()["requestId"]
        r = client.put(f"{BASE}/{order_id}/status", json={"status": "APPROVED"}, headers=auth_headers)
        assert r.status_code == 200
        r = client.put(
            f"{BASE}/{order_id}/status", json={"status": "APPROVED", "notes": "Confirmed twice"}, headers=auth_headers
        )
        history = r.json()["statusHistory"]
        assert [h["status"] for h in history] == ["APPROVED", "APPROVED", "PENDING"]
        assert history[0]["notes"] == "Confirmed twice"
        assert history[1]["notes"] == "Status changed to APPROVED"

    def test_status_endpoint_requires_status(self, client, auth_headers, submit_order):
        order_id = submit_order().json()["requestId"]
        r = client.put(f"{BASE}/{order_id}/status", json={"notes": "no status"}, headers=auth_headers)
        assert r.status_code == 400
        assert r.json()["error"]["fields"][0]["field"] == "status"


class TestDeleteRequest:
    def test_delete(self, client, auth_headers, submit_order):
        order_id = submit_order().json()["requestId"]
        r = client.delete(f"{BASE}/{order_id}", headers=auth_headers)
        assert r.status_code == 200
        assert r.json() == {"message": "Translation request deleted successfully"}
        assert client.get(f"{BASE}/{order_id}", headers=auth_headers).status_code == 404
        assert client.delete(f"{BASE}/{order_id}", headers=auth_headers).status_code == 404

    def test_plain_admin_can_manage_requests(self, client, test_db, submit_order):
        session = test_db()
        try:
            auth_service.create_staff(session, "staff@example.com", ADMIN_PASSWORD, "Staff", StaffRole.ADMIN)
        finally:
            session.close()
        token = client.post(
            "/api/v1/auth/login", json={"email": "staff@example.com", "password": ADMIN_PASSWORD}
        ).json()["token"]
        order_id = submit_order().json()["requestId"]
        r = client.delete(f"{BASE}/{order_id}", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 200
