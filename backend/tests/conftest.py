"""
Shared fixtures: an app bound to a throwaway SQLite file and storage root,
a test client, and helpers that seed users, pages and sections.
"""
from io import BytesIO

import pytest
from PIL import Image

from proofpage import create_app
from proofpage.extensions import db
from proofpage.models.page import ProofPage
from proofpage.models.section import ProofSection
from proofpage.models.user import User
from proofpage.utils.media import get_object_store

PASSWORD = "secret-pass"


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", overrides={
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'proofpage.db'}",
        "STORAGE_ROOT": str(tmp_path / "storage"),
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return get_object_store()


@pytest.fixture
def make_user(app):
    def _make_user(email="alex@example.com", password=PASSWORD):
        user = User()
        user.email = email
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def make_page(app, make_user):
    def _make_page(user=None, slug="alex", status="draft", **fields):
        user = user or make_user()
        page = ProofPage()
        page.user_id = user.id
        page.title = fields.pop("title", "Alex Rivera")
        page.headline = fields.pop("headline", "Product designer")
        page.slug = slug
        page.status = status
        for name, value in fields.items():
            setattr(page, name, value)
        db.session.add(page)
        db.session.commit()
        return page
    return _make_page


@pytest.fixture
def make_section(app):
    def _make_section(page, section_type, position):
        section = ProofSection()
        section.proof_page_id = page.id
        section.type = section_type
        section.position = position
        db.session.add(section)
        db.session.commit()
        return section
    return _make_section


@pytest.fixture
def login(client):
    def _login(email="alex@example.com", password=PASSWORD):
        response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200
        return client
    return _login


@pytest.fixture
def auth_client(make_user, login):
    """A client signed in as a fresh user, plus that user."""
    user = make_user()
    return login(user.email), user


def image_bytes(size=(800, 600), color=(200, 30, 30), fmt="PNG", mode="RGB"):
    out = BytesIO()
    Image.new(mode, size, color).save(out, format=fmt)
    return out.getvalue()
