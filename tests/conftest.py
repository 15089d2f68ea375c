"""
Shared pytest fixtures for the internship portal test suite.

Provides:
    - api: DRF APIClient without a session
    - make_admin / make_intern: principal factories
    - admin_user, superadmin_user, approved_intern, pending_intern
    - admin_api / superadmin_api / intern_api: clients logged in through /api/auth/login/
"""
import pytest
from django.contrib.auth.hashers import make_password
from rest_framework.test import APIClient

from internportal.authentication import SessionPrincipal
from users.models import AdminPrincipal, Intern

PASSWORD = 'secret-pass-123'


@pytest.fixture(autouse=True)
def _db_for_all_tests(db):
    """Every test in this suite touches the database."""


@pytest.fixture()
def api():
    return APIClient()


@pytest.fixture()
def make_admin():
    counter = {'n': 0}

    def _make(email=None, role='admin', password=PASSWORD, **extra):
        counter['n'] += 1
        return AdminPrincipal.objects.create(
            email=email or f"admin{counter['n']}@portal.test",
            password_hash=make_password(password),
            role=role,
            first_name=extra.pop('first_name', 'Ada'),
            last_name=extra.pop('last_name', f"Admin{counter['n']}"),
            **extra,
        )

    return _make


@pytest.fixture()
def make_intern():
    counter = {'n': 0}

    def _make(email=None, status='approved', password=PASSWORD, **extra):
        counter['n'] += 1
        n = counter['n']
        return Intern.objects.create(
            email=email or f"intern{n}@uni.test",
            matric_number=extra.pop('matric_number', f"MAT{n:04d}"),
            password_hash=make_password(password),
            first_name=extra.pop('first_name', 'Tobi'),
            last_name=extra.pop('last_name', f"Intern{n}"),
            institution=extra.pop('institution', 'University of Lagos'),
            phone_number=extra.pop('phone_number', '08030000000'),
            approval_status=status,
            is_approved=(status == Intern.STATUS_APPROVED),
            **extra,
        )

    return _make


@pytest.fixture()
def admin_user(make_admin):
    return make_admin(email='admin@portal.test')


@pytest.fixture()
def superadmin_user(make_admin):
    return make_admin(email='root@portal.test', role='superadmin', first_name='Root', last_name='User')


@pytest.fixture()
def approved_intern(make_intern):
    return make_intern(email='tobi@uni.test', first_name='Tobi', last_name='Adewale')


@pytest.fixture()
def pending_intern(make_intern):
    return make_intern(email='kemi@uni.test', status='pending', first_name='Kemi', last_name='Bello')


def login(client, email, password=PASSWORD):
    res = client.post('/api/auth/login/', {'email': email, 'password': password}, format='json')
    assert res.status_code == 200, res.content
    return client


@pytest.fixture()
def admin_api(admin_user):
    return login(APIClient(), admin_user.email)


@pytest.fixture()
def superadmin_api(superadmin_user):
    return login(APIClient(), superadmin_user.email)


@pytest.fixture()
def intern_api(approved_intern):
    return login(APIClient(), approved_intern.email)


def principal_of(obj):
    """The SessionPrincipal a login by this admin or intern would produce."""
    role = getattr(obj, 'role', 'intern')
    return SessionPrincipal(
        id=obj.pk,
        role=role,
        email=obj.email,
        first_name=obj.first_name,
        last_name=obj.last_name,
        middle_name=getattr(obj, 'middle_name', '') or '',
    )
