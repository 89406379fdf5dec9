# tests/conftest.py
import pytest

from config import Config
from bkchart import create_app, db
from bkchart.models.admin import Admin
from bkchart.models.member import Member
from bkchart.models.point import Point


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-that-is-long-enough-for-hs256"
    SECRET_KEY = "test-secret"
    CHART_TIMEZONE = "UTC"
    MEMBER_DEFAULT_STATUS = "approved"
    MAIL_SERVER = None
    SEED_DEFAULTS = False


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_point(app):
    def _make(text, order_num):
        point = Point(text=text, order_num=order_num)
        db.session.add(point)
        db.session.commit()
        return point

    return _make


@pytest.fixture
def points(make_point):
    return [
        make_point("Spoke with soul consciousness", 1),
        make_point("Powerful amrit vela", 2),
        make_point("Read the murli", 3),
    ]


@pytest.fixture
def make_member(app):
    def _make(mobile="9000000001", password="secret123", status="approved", email=None, name="Asha"):
        member = Member(name=name, centre="Trichy", mobile=mobile, email=email, status=status)
        member.set_password(password)
        db.session.add(member)
        db.session.commit()
        return member

    return _make


@pytest.fixture
def member(make_member):
    return make_member()


@pytest.fixture
def admin(app):
    admin = Admin(username="root")
    admin.set_password("admin-pass")
    db.session.add(admin)
    db.session.commit()
    return admin


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def member_headers(client, member):
    resp = client.post("/api/members/login", json={"mobile": member.mobile, "password": "secret123"})
    assert resp.status_code == 200
    return _bearer(resp.get_json()["token"])


@pytest.fixture
def admin_headers(client, admin):
    resp = client.post("/api/admin/login", json={"username": "root", "password": "admin-pass"})
    assert resp.status_code == 200
    return _bearer(resp.get_json()["token"])
