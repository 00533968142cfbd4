from types import SimpleNamespace

import pytest

from schoolsync import create_app
from schoolsync.config import TestConfig
from schoolsync.extensions import db
from schoolsync.storage import Storage


PASSWORD = "Passw0rd1"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def school(app):
    """A small school: two class levels, one account per role and a subject."""
    with app.app_context():
        storage = Storage(db.session)

        grade5 = storage.create_class_level(name="Grade 5", academic_year=2024)
        grade6 = storage.create_class_level(name="Grade 6", academic_year=2025)

        admin = storage.create_user(
            PASSWORD, username="admin", role="admin",
            full_name="Ada Admin", email="admin@example.com"
        )
        teacher = storage.create_user(
            PASSWORD, username="teacher", role="teacher",
            full_name="Tom Teacher", email="teacher@example.com"
        )
        other_teacher = storage.create_user(
            PASSWORD, username="teacher2", role="teacher",
            full_name="Tia Teacher", email="teacher2@example.com"
        )
        student = storage.create_user(
            PASSWORD, username="student", role="student",
            full_name="Sam Student", email="student@example.com",
            current_class_id=grade5.id, academic_year=2024
        )
        other_student = storage.create_user(
            PASSWORD, username="student2", role="student",
            full_name="Sue Student", email="student2@example.com",
            current_class_id=grade5.id, academic_year=2024
        )

        math = storage.create_subject(
            name="Math", class_level_id=grade5.id, teacher_id=teacher.id
        )
        science = storage.create_subject(name="Science", class_level_id=grade6.id)

        return SimpleNamespace(
            grade5=grade5.id,
            grade6=grade6.id,
            admin=admin.id,
            teacher=teacher.id,
            other_teacher=other_teacher.id,
            student=student.id,
            other_student=other_student.id,
            math=math.id,
            science=science.id,
        )


@pytest.fixture
def storage(app, school):
    with app.app_context():
        yield Storage(db.session)


@pytest.fixture
def login(client):

    def _login(username, password=PASSWORD):
        response = client.post(
            "/api/login",
            json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.get_json()
        return response

    return _login
