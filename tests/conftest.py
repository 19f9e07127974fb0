import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from translation_desk.config import settings
from translation_desk.database import get_db, init_db
from translation_desk.dependencies import get_notifier, get_storage
from translation_desk.main import app
from translation_desk.models.enums import StaffRole
from translation_desk.services.auth_service import auth_service
from translation_desk.services.storage_service import LocalFileStorage

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password-123"
PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\n%%EOF\n"


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[tuple[str, str]] = []

    def send_request_confirmation(self, order):
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.sent.append(("confirmation", order.id))

    def send_admin_notification(self, order):
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.sent.append(("admin", order.id))


@pytest.fixture
def tmp_data(tmp_path):
    data_dir = tmp_path / "TestDesk"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def test_db(tmp_data):
    db_path = tmp_data / "db.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.pop(get_db, None)
    engine.dispose()


@pytest.fixture
def db(test_db):
    session = test_db()
    yield session
    session.close()


@pytest.fixture
def storage(tmp_data):
    store = LocalFileStorage(tmp_data / "uploads")
    app.dependency_overrides[get_storage] = lambda: store
    yield store
    app.dependency_overrides.pop(get_storage, None)


@pytest.fixture
def notifier():
    recorder = RecordingNotifier()
    app.dependency_overrides[get_notifier] = lambda: recorder
    yield recorder
    app.dependency_overrides.pop(get_notifier, None)


@pytest.fixture
def fresh_auth_service():
    """Drop staff sessions between tests."""
    auth_service.clear()
    yield auth_service
    auth_service.clear()


@pytest.fixture
def client(tmp_data, test_db, storage, notifier, fresh_auth_service):
    original_data_dir = settings.data_dir
    settings.data_dir = tmp_data
    c = TestClient(app)
    yield c
    settings.data_dir = original_data_dir
    app.dependency_overrides.clear()


@pytest.fixture
def admin_account(test_db):
    session = test_db()
    try:
        return auth_service.create_staff(session, ADMIN_EMAIL, ADMIN_PASSWORD, "Admin User", StaffRole.SUPER_ADMIN)
    finally:
        session.close()


@pytest.fixture
def auth_headers(client, admin_account):
    r = client.post("/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    return {"Authorization": f"Bearer {r.json()['token']}"}


def order_form(**overrides) -> dict:
    form = {
        "customerName": "John Smith",
        "customerEmail": "john.smith@example.com",
        "customerPhone": "+971501234567",
        "customerAddress": "12 Marina Walk, Dubai",
        "sourceLanguage": "English",
        "targetLanguage": "Arabic",
        "documentType": "LEGAL",
        "urgency": "STANDARD",
        "numberOfPages": "3",
        "specialization": "Contracts",
        "additionalNotes": "Please keep the original layout",
    }
    form.update(overrides)
    return {k: v for k, v in form.items() if v is not None}


@pytest.fixture
def submit_order(client):
    def _submit(filename="contract.pdf", content=PDF_BYTES, content_type="application/pdf", **overrides):
        files = {"file": (filename, content, content_type)} if filename else None
        return client.post("/api/v1/requests", data=order_form(**overrides), files=files)
    return _submit
