"""Login, logout, session role lookup and intern registration."""
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from internportal.authentication import SESSION_PRINCIPAL_KEY
from internportal.exceptions import CredentialStoreMisconfigured, InvalidCredentials, PendingApproval
from notifications.models import Notification
from users import credentials
from users.models import Intern
from tests.conftest import PASSWORD, login


class TestAuthenticate:
    def test_admin_checked_first(self, admin_user):
        result = credentials.authenticate(admin_user.email, PASSWORD)
        assert result.kind == 'admin'
        assert result.principal.pk == admin_user.pk

    def test_superadmin_kind(self, superadmin_user):
        assert credentials.authenticate(superadmin_user.email, PASSWORD).kind == 'superadmin'

    def test_approved_intern(self, approved_intern):
        result = credentials.authenticate(approved_intern.email, PASSWORD)
        assert result.kind == 'intern'

    def test_pending_intern_is_distinguished(self, pending_intern):
        with pytest.raises(PendingApproval):
            credentials.authenticate(pending_intern.email, PASSWORD)

    def test_rejected_intern_cannot_log_in(self, make_intern):
        intern = make_intern(status='rejected')
        with pytest.raises(PendingApproval):
            credentials.authenticate(intern.email, PASSWORD)

    def test_pending_intern_wrong_password_is_invalid(self, pending_intern):
        with pytest.raises(InvalidCredentials):
            credentials.authenticate(pending_intern.email, 'nope')

    def test_unknown_email(self):
        with pytest.raises(InvalidCredentials):
            credentials.authenticate('ghost@portal.test', PASSWORD)

    def test_unrecognised_admin_hash_is_fatal(self, make_admin):
        admin = make_admin()
        admin.password_hash = 'plaintext-password'
        admin.save()
        with pytest.raises(CredentialStoreMisconfigured):
            credentials.authenticate(admin.email, 'plaintext-password')


class TestLoginEndpoint:
    def test_admin_login_creates_session(self, api, admin_user):
        res = api.post('/api/auth/login/', {'email': admin_user.email, 'password': PASSWORD}, format='json')
        assert res.status_code == 200
        body = res.json()
        assert body['success'] is True
        assert body['role'] == 'admin'
        assert api.session[SESSION_PRINCIPAL_KEY]['id'] == admin_user.pk

    def test_invalid_credentials(self, api, admin_user):
        res = api.post('/api/auth/login/', {'email': admin_user.email, 'password': 'wrong'}, format='json')
        assert res.status_code == 401
        assert res.json() == {'success': False, 'message': 'Invalid credentials.'}

    def test_pending_intern_gets_status_flag_and_no_session(self, api, pending_intern):
        res = api.post('/api/auth/login/', {'email': pending_intern.email, 'password': PASSWORD}, format='json')
        assert res.status_code == 403
        body = res.json()
        assert body['success'] is False
        assert body['status'] == 'pending_approval'
        assert SESSION_PRINCIPAL_KEY not in api.session

    def test_misconfigured_hash_answers_500(self, api, make_admin):
        admin = make_admin()
        admin.password_hash = 'not-a-hash'
        admin.save()
        res = api.post('/api/auth/login/', {'email': admin.email, 'password': 'not-a-hash'}, format='json')
        assert res.status_code == 500
        assert res.json()['message'] == 'Server configuration error.'

    def test_missing_fields(self, api):
        res = api.post('/api/auth/login/', {'email': 'a@b.test'}, format='json')
        assert res.status_code == 400
        body = res.json()
        assert body['success'] is False
        assert 'password' in body['errors']

    def test_role_and_logout(self, api, approved_intern):
        assert api.get('/api/auth/role/').status_code == 401

        login(api, approved_intern.email)
        res = api.get('/api/auth/role/')
        assert res.status_code == 200
        assert res.json()['role'] == 'intern'

        assert api.post('/api/auth/logout/').status_code == 200
        assert api.get('/api/auth/role/').status_code == 401


class TestRoleGates:
    def test_no_session_is_401(self, api):
        res = api.get('/api/admin/pending-users/')
        assert res.status_code == 401
        assert res.json()['success'] is False

    def test_intern_on_admin_route_is_403(self, intern_api):
        assert intern_api.get('/api/admin/pending-users/').status_code == 403

    def test_admin_on_superadmin_route_is_403(self, admin_api):
        assert admin_api.get('/api/superadmin/admins/').status_code == 403

    def test_admin_on_intern_route_is_403(self, admin_api):
        assert admin_api.get('/api/users/logbook/').status_code == 403


def registration_payload(**overrides):
    data = {
        'first_name': 'Ngozi',
        'middle_name': 'Ada',
        'last_name': 'Okafor',
        'matric_number': 'CSC/2021/001',
        'institution': 'University of Ibadan',
        'phone_number': '08031234567',
        'email_address': 'ngozi@uni.test',
        'password': 'hunter22',
        'confirm_password': 'hunter22',
    }
    data.update(overrides)
    return data


class TestRegistration:
    def test_register_creates_pending_intern_and_notifies_admins(self, api, make_admin, mailoutbox):
        admins = [make_admin(), make_admin(role='superadmin')]

        res = api.post('/api/auth/register/', registration_payload(), format='multipart')

        assert res.status_code == 201
        intern = Intern.objects.get(email='ngozi@uni.test')
        assert intern.approval_status == 'pending'
        assert intern.is_approved is False

        notes = Notification.objects.filter(section='user-details')
        assert notes.count() == 2
        assert {n.recipient_id for n in notes} == {a.pk for a in admins}
        for note in notes:
            assert note.recipient_role == 'admin'
            assert note.sender_id == intern.pk
            assert note.message == 'New user registered: Ngozi Ada Okafor'
            assert note.link == f'/admin_dashboard.html#user-details?id={intern.pk}'

        assert len(mailoutbox) == 2
        assert mailoutbox[0].subject == 'New User Registration Pending Approval'

    def test_register_stores_uploaded_files(self, api):
        image = SimpleUploadedFile('me.png', b'\x89PNG-bytes', content_type='image/png')
        letter = SimpleUploadedFile('letter.pdf', b'%PDF-1.4', content_type='application/pdf')

        res = api.post(
            '/api/auth/register/',
            registration_payload(user_image=image, acceptance_letter=letter),
            format='multipart',
        )

        assert res.status_code == 201
        intern = Intern.objects.get(email='ngozi@uni.test')
        assert bytes(intern.user_image) == b'\x89PNG-bytes'
        assert intern.user_image_mime_type == 'image/png'
        assert intern.acceptance_letter_name == 'letter.pdf'

    def test_duplicate_email_is_conflict(self, api, approved_intern):
        res = api.post(
            '/api/auth/register/',
            registration_payload(email_address=approved_intern.email),
            format='multipart',
        )
        assert res.status_code == 409
        assert res.json()['message'] == 'Email or Matric Number already registered.'

    def test_admin_email_cannot_be_reused(self, api, admin_user):
        res = api.post(
            '/api/auth/register/',
            registration_payload(email_address=admin_user.email),
            format='multipart',
        )
        assert res.status_code == 409

    def test_duplicate_matric_number_is_conflict(self, api, approved_intern):
        res = api.post(
            '/api/auth/register/',
            registration_payload(matric_number=approved_intern.matric_number),
            format='multipart',
        )
        assert res.status_code == 409

    def test_password_mismatch(self, api):
        res = api.post('/api/auth/register/', registration_payload(confirm_password='other1'), format='multipart')
        assert res.status_code == 400
        assert res.json()['message'] == 'Passwords do not match!'
        assert not Intern.objects.exists()

    def test_short_password(self, api):
        res = api.post(
            '/api/auth/register/',
            registration_payload(password='abc', confirm_password='abc'),
            format='multipart',
        )
        assert res.status_code == 400
        assert not Intern.objects.exists()

    def test_register_pending_then_approved_flow(self, api, admin_api):
        api.post('/api/auth/register/', registration_payload(), format='multipart')
        intern = Intern.objects.get(email='ngozi@uni.test')

        res = api.post('/api/auth/login/', {'email': intern.email, 'password': 'hunter22'}, format='json')
        assert res.status_code == 403
        assert res.json()['status'] == 'pending_approval'
        assert SESSION_PRINCIPAL_KEY not in api.session

        assert admin_api.put(f'/api/admin/users/{intern.pk}/approve/').status_code == 200

        res = api.post('/api/auth/login/', {'email': intern.email, 'password': 'hunter22'}, format='json')
        assert res.status_code == 200
        assert res.json()['role'] == 'intern'
        assert api.session[SESSION_PRINCIPAL_KEY]['role'] == 'intern'
