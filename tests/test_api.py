from school_portal.extensions import db
from school_portal.models.book import Book


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}


def test_student_login(client, student):
    resp = client.post("/auth/student/login", json={"student_code": "S001", "dob": "2010-04-12"})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["user_type"] == "student"
    assert body["user"]["name"] == "Asha Rao"
    assert body["access_token"]


def test_student_login_wrong_dob(client, student):
    resp = client.post("/auth/student/login", json={"student_code": "S001", "dob": "2010-04-13"})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_student_login_bad_date_format(client, student):
    resp = client.post("/auth/student/login", json={"student_code": "S001", "dob": "12/04/2010"})
    assert resp.status_code == 400


def test_inactive_student_cannot_login(client, student):
    student.is_active = False
    db.session.commit()
    resp = client.post("/auth/student/login", json={"student_code": "S001", "dob": "2010-04-12"})
    assert resp.status_code == 401
    assert "inactive" in resp.get_json()["message"]


def test_admin_login_checks_password(client, admin):
    resp = client.post("/auth/admin/login", json={"email": "LIBRARIAN@school.test", "password": "nope"})
    assert resp.status_code == 401

    resp = client.post("/auth/admin/login", json={"email": "LIBRARIAN@school.test", "password": "s3cret-pass"})
    assert resp.status_code == 200
    assert resp.get_json()["user_type"] == "admin"


def test_login_requires_fields(client):
    assert client.post("/auth/admin/login", json={}).status_code == 400
    assert client.post("/auth/student/login", json={"student_code": "S001"}).status_code == 400


def test_me(client, student_headers, admin_headers):
    body = client.get("/auth/me", headers=student_headers).get_json()
    assert body["user_type"] == "student"
    assert body["user"]["student_code"] == "S001"

    body = client.get("/auth/me", headers=admin_headers).get_json()
    assert body["user_type"] == "admin"
    assert body["user"]["email"] == "librarian@school.test"


def test_endpoints_need_a_token(client):
    assert client.get("/books/").status_code == 401
    assert client.post("/borrow/requests", json={"book_id": 1}).status_code == 401


def test_students_cannot_manage_catalog(client, student_headers, make_book):
    book = make_book()
    assert client.post("/books/", json={"title": "X", "author": "Y"}, headers=student_headers).status_code == 403
    assert client.put(f"/books/{book.id}", json={"title": "X"}, headers=student_headers).status_code == 403
    assert client.delete(f"/books/{book.id}", headers=student_headers).status_code == 403
    assert client.get("/borrow/requests", headers=student_headers).status_code == 403
    assert client.post("/borrow/requests/1/approve", headers=student_headers).status_code == 403


def test_admins_cannot_request_books(client, admin_headers, make_book):
    book = make_book()
    resp = client.post("/borrow/requests", json={"book_id": book.id}, headers=admin_headers)
    assert resp.status_code == 403


def test_book_crud(client, admin_headers):
    resp = client.post("/books/", json={
        "title": "Ignited Minds", "author": "A. P. J. Abdul Kalam", "subject": "Inspiration", "total_copies": 2,
    }, headers=admin_headers)
    assert resp.status_code == 201
    book = resp.get_json()["data"]
    assert book["available_copies"] == 2

    resp = client.put(f"/books/{book['id']}", json={"total_copies": 5}, headers=admin_headers)
    assert resp.get_json()["data"]["available_copies"] == 5

    resp = client.put(f"/books/{book['id']}", json={"available_copies": 1}, headers=admin_headers)
    assert resp.status_code == 400

    resp = client.get(f"/books/{book['id']}", headers=admin_headers)
    assert resp.get_json()["data"]["title"] == "Ignited Minds"

    assert client.delete(f"/books/{book['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/books/{book['id']}", headers=admin_headers).status_code == 404


def test_create_book_missing_fields(client, admin_headers):
    resp = client.post("/books/", json={"title": "Only a title"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_duplicate_isbn_is_a_conflict(client, admin_headers):
    payload = {"title": "Gitanjali", "author": "Rabindranath Tagore", "isbn": "9788171673407"}
    assert client.post("/books/", json=payload, headers=admin_headers).status_code == 201

    resp = client.post("/books/", json=payload, headers=admin_headers)
    assert resp.status_code == 409
    assert "ISBN" in resp.get_json()["message"]
    assert Book.query.count() == 1


def test_total_below_reserved_copies_over_http(client, student_headers, admin_headers, make_book):
    book = make_book(total_copies=2)
    client.post("/borrow/requests", json={"book_id": book.id}, headers=student_headers)

    resp = client.put(f"/books/{book.id}", json={"total_copies": 0}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    resp = client.put(f"/books/{book.id}", json={"total_copies": 1}, headers=admin_headers)
    assert resp.get_json()["data"]["available_copies"] == 0


def test_catalog_search_for_students(client, student_headers, make_book):
    make_book(title="Gitanjali", author="Rabindranath Tagore", subject="Poetry")
    make_book(title="Godan", author="Premchand", subject="Fiction")

    body = client.get("/books/?search=tagore", headers=student_headers).get_json()
    assert [b["title"] for b in body["data"]] == ["Gitanjali"]

    body = client.get("/books/?subject=Fiction", headers=student_headers).get_json()
    assert [b["title"] for b in body["data"]] == ["Godan"]

    body = client.get("/books/subjects", headers=student_headers).get_json()
    assert body["data"] == ["Fiction", "Poetry"]


def test_borrow_flow_over_http(client, student_headers, admin_headers, make_book):
    book = make_book(total_copies=1)

    resp = client.post("/borrow/requests", json={"book_id": book.id, "notes": "exam prep"}, headers=student_headers)
    assert resp.status_code == 201
    req = resp.get_json()["data"]
    assert req["status"] == "pending"
    assert req["book"]["available_copies"] == 0

    resp = client.post("/borrow/requests", json={"book_id": book.id}, headers=student_headers)
    assert resp.status_code == 409

    mine = client.get("/borrow/requests/my", headers=student_headers).get_json()["data"]
    assert [r["id"] for r in mine] == [req["id"]]

    pending = client.get("/borrow/requests?status=pending", headers=admin_headers).get_json()["data"]
    assert pending[0]["student"]["student_code"] == "S001"
    assert pending[0]["book"]["title"] == book.title

    resp = client.post(f"/borrow/requests/{req['id']}/approve", headers=admin_headers)
    assert resp.status_code == 200
    approved = resp.get_json()["data"]
    assert approved["status"] == "approved"
    assert approved["issue_date"] and approved["return_date"]

    resp = client.post(f"/borrow/requests/{req['id']}/reject", headers=admin_headers)
    assert resp.status_code == 409

    resp = client.post(f"/borrow/requests/{req['id']}/complete", headers=admin_headers)
    assert resp.get_json()["data"]["status"] == "completed"
    assert db.session.get(Book, book.id).available_copies == 1

    assert client.get("/borrow/requests/my", headers=student_headers).get_json()["data"] == []


def test_out_of_stock_over_http(client, student_headers, make_book, other_student):
    from school_portal.services.borrow_service import BorrowService

    book = make_book(total_copies=1)
    BorrowService.create_request(book.id, other_student.id)

    resp = client.post("/borrow/requests", json={"book_id": book.id}, headers=student_headers)
    assert resp.status_code == 409
    assert "no copies" in resp.get_json()["message"]


def test_reject_with_note_over_http(client, student_headers, admin_headers, make_book):
    book = make_book(total_copies=2)
    req = client.post("/borrow/requests", json={"book_id": book.id}, headers=student_headers).get_json()["data"]

    resp = client.post(f"/borrow/requests/{req['id']}/reject", json={"notes": "Lost copy"}, headers=admin_headers)
    body = resp.get_json()["data"]
    assert body["status"] == "rejected"
    assert body["notes"] == "Lost copy"
    assert db.session.get(Book, book.id).available_copies == 2


def test_bad_inputs(client, student_headers, admin_headers):
    assert client.post("/borrow/requests", json={}, headers=student_headers).status_code == 400
    assert client.post("/borrow/requests", json={"book_id": 99}, headers=student_headers).status_code == 404
    assert client.get("/borrow/requests?status=lost", headers=admin_headers).status_code == 400
    assert client.post("/borrow/requests/99/approve", headers=admin_headers).status_code == 404
    resp = client.post("/borrow/requests/99/approve", json={"loan_days": "two"}, headers=admin_headers)
    assert resp.status_code == 400


def test_request_detail_is_owner_or_admin(client, app, student_headers, admin_headers, make_book, other_student):
    from school_portal.services.borrow_service import BorrowService

    book = make_book()
    mine = client.post("/borrow/requests", json={"book_id": book.id}, headers=student_headers).get_json()["data"]
    theirs = BorrowService.create_request(book.id, other_student.id)

    resp = client.get(f"/borrow/requests/{mine['id']}", headers=student_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["book"]["id"] == book.id

    assert client.get(f"/borrow/requests/{theirs.id}", headers=student_headers).status_code == 403

    resp = client.get(f"/borrow/requests/{theirs.id}", headers=admin_headers)
    assert resp.get_json()["data"]["student"]["student_code"] == "S002"
    assert client.get("/borrow/requests/999", headers=admin_headers).status_code == 404


def test_non_string_json_values(client, student_headers, admin_headers, make_book):
    book = make_book(total_copies=2)

    resp = client.post("/borrow/requests", json={"book_id": book.id, "notes": 5}, headers=student_headers)
    assert resp.status_code == 201
    req = resp.get_json()["data"]
    assert req["notes"] == "5"

    resp = client.post(f"/borrow/requests/{req['id']}/reject", json={"notes": {"why": "damaged"}}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "rejected"

    resp = client.post("/auth/student/login", json={"student_code": "S001", "dob": ["2010-04-12"]})
    assert resp.status_code == 400
    resp = client.post("/auth/student/login", json={"student_code": 1, "dob": "2010-04-12"})
    assert resp.status_code == 401
    resp = client.post("/auth/admin/login", json={"email": 42, "password": 1234})
    assert resp.status_code == 401
