# tests/test_api.py
PASSWORD = "gizli123"


def create_fault(client, headers, site_id, title="İnverter arızası", files=None):
     response = client.post(
          "/api/faults",
          data={"title": title, "site_id": site_id, "priority": "high"},
          files=files,
          headers=headers,
     )
     assert response.status_code == 201, response.text
     return response.json()


def test_health(client):
     response = client.get("/api/health")
     assert response.status_code == 200
     assert response.json() == {"status": "ok"}
     assert "X-Request-ID" in response.headers


def test_login_me_logout(client, seed):
     response = client.post("/api/auth/login", json={"email": "tekniker@example.com", "password": PASSWORD})
     assert response.status_code == 200
     body = response.json()
     assert body["user"]["role"] == "technician"
     assert body["capabilities"]["can_manage"] is True
     headers = {"Authorization": f"Bearer {body['token']}"}

     me = client.get("/api/auth/me", headers=headers)
     assert me.status_code == 200
     assert me.json()["user"]["email"] == "tekniker@example.com"

     assert client.post("/api/auth/logout", headers=headers).status_code == 204

     after = client.get("/api/auth/me", headers=headers)
     assert after.status_code == 401
     assert after.json()["error"]["code"] == "auth/session-closed"


def test_login_failures(client, seed):
     wrong = client.post("/api/auth/login", json={"email": "tekniker@example.com", "password": "yanlis"})
     assert wrong.status_code == 401
     assert wrong.json()["error"] == {"code": "auth/wrong-password", "message": "Hatalı şifre"}

     unknown = client.post("/api/auth/login", json={"email": "yok@example.com", "password": PASSWORD})
     assert unknown.json()["error"]["code"] == "auth/user-not-found"


def test_missing_token(client, seed):
     response = client.get("/api/faults")
     assert response.status_code == 401
     assert response.json()["error"]["code"] == "auth/missing-token"


def test_unknown_route(client):
     response = client.get("/api/bilinmeyen")
     assert response.status_code == 404
     assert response.json()["error"]["code"] == "not-found"


def test_customer_views_comments_but_can_not_resolve(client, seed, auth_headers, uploads):
     tech = auth_headers(seed.technician)
     cust = auth_headers(seed.customer)

     fault = create_fault(client, tech, seed.site_one.id, files=[("photos", ("panel.jpg", b"jpeg", "image/jpeg"))])
     assert fault["status"] == "open"
     assert len(fault["photos"]) == 1
     assert fault["created_by"] == seed.technician.id

     listed = client.get("/api/faults", headers=cust).json()
     assert listed["total"] == 1
     seen = listed["faults"][0]
     assert seen["created_by"] is None
     assert seen["site_name"] == "Konya GES"
     assert seen["permissions"]["can_comment"] is True
     assert seen["permissions"]["can_resolve"] is False
     assert seen["elapsed"]["label"] == "1 saatten az"

     comment = client.post(f"/api/faults/{fault['id']}/comments", json={"message": "Ne zaman?"}, headers=cust)
     assert comment.status_code == 201
     assert comment.json()["author_name"] == "Ayşe Müşteri"

     denied = client.post(f"/api/faults/{fault['id']}/resolve", data={"description": "x"}, headers=cust)
     assert denied.status_code == 403

     resolved = client.post(
          f"/api/faults/{fault['id']}/resolve",
          data={"description": "Sigorta değişti", "materials": ["sigorta", "kablo"]},
          headers=tech,
     )
     assert resolved.status_code == 200, resolved.text
     assert resolved.json()["status"] == "resolved"
     assert resolved.json()["resolution"]["materials"] == ["sigorta", "kablo"]

     after = client.get(f"/api/faults/{fault['id']}", headers=cust).json()
     assert after["resolution"]["description"] == "Sigorta değişti"
     assert after["permissions"]["can_resolve"] is False
     assert [c["message"] for c in after["comments"]] == ["Ne zaman?"]

     again = client.post(f"/api/faults/{fault['id']}/resolve", data={"description": "x"}, headers=tech)
     assert again.status_code == 403
     assert again.json()["error"]["code"] == "fault/already-resolved"


def test_customer_without_sites_sees_nothing(client, seed, auth_headers, uploads):
     create_fault(client, auth_headers(seed.manager), seed.site_one.id)
     create_fault(client, auth_headers(seed.manager), seed.site_two.id)

     response = client.get("/api/faults", headers=auth_headers(seed.lonely_customer))
     assert response.status_code == 200
     assert response.json() == {"faults": [], "total": 0}


def test_customer_can_not_open_foreign_fault(client, seed, auth_headers, uploads):
     fault = create_fault(client, auth_headers(seed.manager), seed.site_two.id)
     response = client.get(f"/api/faults/{fault['id']}", headers=auth_headers(seed.customer))
     assert response.status_code == 403
     assert response.json()["error"]["code"] == "permission-denied"


def test_customer_can_not_create(client, seed, auth_headers, uploads):
     response = client.post(
          "/api/faults",
          data={"title": "x", "site_id": seed.site_one.id},
          files=[("photos", ("a.jpg", b"jpeg", "image/jpeg"))],
          headers=auth_headers(seed.customer),
     )
     assert response.status_code == 403
     assert uploads.uploaded == []


def test_edit_and_reopen(client, seed, auth_headers, uploads):
     headers = auth_headers(seed.engineer)
     fault = create_fault(client, headers, seed.site_one.id)

     blocked = client.patch(f"/api/faults/{fault['id']}", json={"status": "resolved"}, headers=headers)
     assert blocked.status_code == 422
     assert blocked.json()["error"]["code"] == "fault/resolution-invariant"

     client.post(f"/api/faults/{fault['id']}/resolve", data={"description": "tamam"}, headers=headers)
     reopened = client.patch(
          f"/api/faults/{fault['id']}",
          json={"status": "pending", "assigned_to": seed.technician.id},
          headers=headers,
     )
     assert reopened.status_code == 200
     assert reopened.json()["status"] == "pending"
     assert reopened.json()["resolution"] is None
     assert reopened.json()["assigned_to"] == seed.technician.id


def test_delete_fault(client, seed, auth_headers, uploads):
     fault = create_fault(client, auth_headers(seed.manager), seed.site_one.id)
     assert client.delete(f"/api/faults/{fault['id']}", headers=auth_headers(seed.customer)).status_code == 403
     assert client.delete(f"/api/faults/{fault['id']}", headers=auth_headers(seed.technician)).status_code == 204
     assert client.get(f"/api/faults/{fault['id']}", headers=auth_headers(seed.manager)).status_code == 404


def test_manager_can_not_delete_self(client, seed, auth_headers):
     response = client.delete(f"/api/users/{seed.manager.id}", headers=auth_headers(seed.manager))
     assert response.status_code == 403
     assert response.json()["error"]["code"] == "users/cannot-delete-self"


def test_manager_creates_customer(client, seed, auth_headers):
     payload = {
          "email": "firma@example.com",
          "name": "Firma",
          "password": "gizli123",
          "password_confirm": "gizli123",
          "site_ids": [],
     }
     missing_site = client.post("/api/customers", json=payload, headers=auth_headers(seed.manager))
     assert missing_site.status_code == 422
     assert missing_site.json()["error"]["code"] == "validation/site-required"

     payload["site_ids"] = [seed.site_one.id]
     created = client.post("/api/customers", json=payload, headers=auth_headers(seed.manager))
     assert created.status_code == 201
     assert created.json()["role"] == "customer"

     duplicate = client.post("/api/customers", json=payload, headers=auth_headers(seed.manager))
     assert duplicate.status_code == 409


def test_csv_export(client, seed, auth_headers, uploads):
     headers = auth_headers(seed.manager)
     first = create_fault(client, headers, seed.site_one.id, title="Bir")
     create_fault(client, headers, seed.site_two.id, title="İki")
     client.post(f"/api/faults/{first['id']}/resolve", data={"description": "tamam"}, headers=headers)

     response = client.get("/api/reports/faults.csv", headers=headers)
     assert response.status_code == 200
     assert response.headers["content-type"].startswith("text/csv")
     assert 'filename="ariza-raporu-' in response.headers["content-disposition"]

     lines = response.text.split("\n")
     assert len(lines) == 3
     by_title = {line.split('","')[1]: line for line in lines[1:]}
     assert by_title["Bir"].endswith('"') and not by_title["Bir"].endswith('"-"')
     assert by_title["İki"].endswith('"-"')

     customer_csv = client.get("/api/reports/faults.csv", headers=auth_headers(seed.customer))
     assert len(customer_csv.text.split("\n")) == 2


def test_stats(client, seed, auth_headers, uploads):
     headers = auth_headers(seed.manager)
     first = create_fault(client, headers, seed.site_one.id)
     create_fault(client, headers, seed.site_two.id)
     client.post(f"/api/faults/{first['id']}/resolve", data={"description": "tamam"}, headers=headers)

     summary = client.get("/api/stats/summary", headers=headers).json()
     assert summary["total"] == 2
     assert summary["resolved"] == 1
     assert summary["resolution_rate"] == 0.5

     customer_summary = client.get("/api/stats/summary", headers=auth_headers(seed.customer)).json()
     assert customer_summary["total"] == 1
     assert customer_summary["resolution_rate"] == 1.0

     assert client.get("/api/stats/performance", headers=auth_headers(seed.customer)).status_code == 403
     performance = client.get("/api/stats/performance", headers=headers).json()
     assert {m["user_id"] for m in performance["members"]} == {seed.technician.id, seed.engineer.id}
     assert [m["user_id"] for m in performance["managers"]] == [seed.manager.id]


def test_sites_scoped_for_customer(client, seed, auth_headers):
     assert client.get("/api/sites", headers=auth_headers(seed.manager)).json()["total"] == 2
     sites = client.get("/api/sites", headers=auth_headers(seed.customer)).json()["sites"]
     assert [s["name"] for s in sites] == ["Konya GES"]

     created = client.post("/api/sites", json={"name": "Niğde GES"}, headers=auth_headers(seed.manager))
     assert created.status_code == 201
     assert client.post("/api/sites", json={"name": "x"}, headers=auth_headers(seed.technician)).status_code == 403


def test_duty_check_active_slot(client, seed, auth_headers):
     response = client.get("/api/duty-checks/active-slot", headers=auth_headers(seed.guard))
     assert response.status_code == 200
     assert response.json()["slots"] == ["08:00", "12:00", "18:00", "00:00", "03:00", "07:00"]


def test_empty_site_filter_is_all_sites_for_customer(client, seed, auth_headers, uploads):
     create_fault(client, auth_headers(seed.manager), seed.site_one.id)
     create_fault(client, auth_headers(seed.manager), seed.site_two.id)
     cust = auth_headers(seed.customer)

     listed = client.get("/api/faults", params={"site_id": ""}, headers=cust).json()
     assert listed["total"] == 1

     summary = client.get("/api/stats/summary", params={"site_id": ""}, headers=cust).json()
     assert summary["total"] == 1
     assert summary["site_id"] is None

     csv_lines = client.get("/api/reports/faults.csv", params={"site_id": ""}, headers=cust).text.split("\n")
     assert len(csv_lines) == 2

     staff = client.get("/api/faults", params={"site_id": ""}, headers=auth_headers(seed.manager)).json()
     assert staff["total"] == 2


def test_fault_search(client, seed, auth_headers, uploads):
     headers = auth_headers(seed.technician)
     create_fault(client, headers, seed.site_one.id, title="Panel kirik")
     create_fault(client, headers, seed.site_one.id, title="Kablo kopuk")

     found = client.get("/api/faults", params={"q": "panel"}, headers=headers).json()
     assert [f["title"] for f in found["faults"]] == ["Panel kirik"]


def test_summary_breaks_down_by_site(client, seed, auth_headers, uploads):
     headers = auth_headers(seed.manager)
     first = create_fault(client, headers, seed.site_one.id)
     create_fault(client, headers, seed.site_one.id)
     client.post(f"/api/faults/{first['id']}/resolve", data={"description": "tamam"}, headers=headers)

     summary = client.get("/api/stats/summary", headers=headers).json()
     by_name = {row["site_name"]: row for row in summary["sites"]}
     assert set(by_name) == {"Konya GES", "Karaman GES"}
     assert by_name["Konya GES"]["total"] == 2
     assert by_name["Konya GES"]["resolved"] == 1
     assert by_name["Karaman GES"]["total"] == 0

     customer_sites = client.get("/api/stats/summary", headers=auth_headers(seed.customer)).json()["sites"]
     assert [row["site_name"] for row in customer_sites] == ["Konya GES"]

     filtered = client.get("/api/stats/summary", params={"site_id": seed.site_one.id}, headers=headers).json()
     assert filtered["sites"] == []


def test_removed_photo_is_deleted_from_storage(client, seed, auth_headers, uploads):
     headers = auth_headers(seed.manager)
     fault = create_fault(client, headers, seed.site_one.id, files=[("photos", ("a.jpg", b"jpeg", "image/jpeg"))])

     response = client.delete(f"/api/faults/{fault['id']}/photos/0", headers=headers)
     assert response.status_code == 200
     assert response.json()["photos"] == []
     assert uploads.deleted == fault["photos"]
