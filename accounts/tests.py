# accounts/tests.py
from unittest import mock

from django.conf import settings
from django.contrib.sessions.backends import signed_cookies
from django.test import Client, RequestFactory, SimpleTestCase

from portal.backend import BackendError, Conflict

from .context_processors import header_state, navigation_menu
from .identity import (
    ANONYMOUS, SESSION_AUTHENTICATED, SESSION_REDIRECT_TO, SESSION_USER, Admin, Member,
    safe_redirect_target, session_is_inconsistent, viewer_from_session,
)
from .models import ROLE_ADMIN, ROLE_MEMBER, User, normalize_role

MEMBER = User(id=7, username='Mia Member', email='mia@example.com', role=ROLE_MEMBER)
ADMIN = User(id=1, username='Ada Admin', email='ada@example.com', role=ROLE_ADMIN)


def sign_in(client, user):
    session = client.session
    session[SESSION_USER] = user.to_session()
    session[SESSION_AUTHENTICATED] = True
    session.save()
    # signed-cookie sessions change key on every save
    client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key


class UserModelTest(SimpleTestCase):
    def test_only_explicit_admin_is_admin(self):
        self.assertEqual(normalize_role('ADMIN'), ROLE_ADMIN)
        self.assertEqual(normalize_role('superuser'), ROLE_MEMBER)
        self.assertEqual(normalize_role(None), ROLE_MEMBER)
        self.assertEqual(User(id=1, username='x', email='x@x', role='Admin').role, ROLE_ADMIN)

    def test_session_round_trip_and_malformed(self):
        self.assertEqual(User.from_session(MEMBER.to_session()), MEMBER)
        self.assertIsNone(User.from_session({'username': 'no id'}))
        self.assertIsNone(User.from_session('garbage'))

    def test_from_backend_builds_username_from_names(self):
        user = User.from_backend({'id': '3', 'firstName': 'Sam', 'lastName': 'Lee', 'email': 's@x.io'})
        self.assertEqual(user.id, 3)
        self.assertEqual(user.username, 'Sam Lee')
        self.assertTrue(user.is_member())


class ViewerTest(SimpleTestCase):
    def test_empty_session_is_anonymous(self):
        self.assertIs(viewer_from_session({}), ANONYMOUS)

    def test_member_and_admin(self):
        member = viewer_from_session({SESSION_USER: MEMBER.to_session(), SESSION_AUTHENTICATED: True})
        admin = viewer_from_session({SESSION_USER: ADMIN.to_session(), SESSION_AUTHENTICATED: True})
        self.assertEqual(member, Member(MEMBER))
        self.assertEqual(admin, Admin(ADMIN))
        self.assertTrue(admin.is_admin)
        self.assertFalse(member.is_admin)

    def test_half_logged_in_sessions_are_anonymous(self):
        flag_only = {SESSION_AUTHENTICATED: True}
        user_only = {SESSION_USER: MEMBER.to_session()}
        for session in (flag_only, user_only):
            self.assertIs(viewer_from_session(session), ANONYMOUS)
            self.assertTrue(session_is_inconsistent(session))
        self.assertFalse(session_is_inconsistent({}))

    def test_safe_redirect_target(self):
        request = RequestFactory().get('/')
        self.assertEqual(safe_redirect_target('/jobs/5/apply', request), '/jobs/5/apply')
        self.assertEqual(safe_redirect_target('https://evil.example/', request), '/')
        self.assertEqual(safe_redirect_target('//evil.example/', request), '/')
        self.assertEqual(safe_redirect_target(None, request), '/')


class GateTest(SimpleTestCase):
    def setUp(self):
        self.client = Client()

    def test_anonymous_is_sent_to_login_with_destination(self):
        resp = self.client.get('/jobs/5/apply')
        self.assertRedirects(resp, '/login?redirectTo=/jobs/5/apply&error=unauthorized',
                             fetch_redirect_response=False)
        self.assertEqual(self.client.session[SESSION_REDIRECT_TO], '/jobs/5/apply')

    def test_admin_cannot_apply(self):
        sign_in(self.client, ADMIN)
        resp = self.client.get('/jobs/5/apply')
        self.assertEqual(resp.status_code, 403)
        self.assertContains(resp, "Administrators cannot apply for job positions.", status_code=403)

    def test_member_cannot_reach_admin_pages(self):
        sign_in(self.client, MEMBER)
        resp = self.client.get('/jobs/create')
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.context['message'], "You don't have permission to access this page.")

    def test_inconsistent_session_is_discarded(self):
        session = self.client.session
        session[SESSION_AUTHENTICATED] = True
        session.save()
        self.client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key
        resp = self.client.get('/my-applications')
        self.assertEqual(resp.status_code, 302)
        self.assertTrue(resp['Location'].startswith('/login'))
        self.assertNotIn(SESSION_AUTHENTICATED, self.client.session)


@mock.patch('accounts.views._auth_service')
class LoginViewsTest(SimpleTestCase):
    def setUp(self):
        self.client = Client()

    def test_unknown_error_code_shows_generic_message(self, auth):
        resp = self.client.get('/login?error=foo')
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "An error occurred. Please try again.")

    def test_login_returns_to_remembered_destination(self, auth):
        auth.return_value.login.return_value = MEMBER
        self.client.get('/login?redirectTo=/jobs/5/apply')
        resp = self.client.post('/login', {'email': 'mia@example.com', 'password': 'Secret123'})
        self.assertRedirects(resp, '/jobs/5/apply', fetch_redirect_response=False)
        self.assertEqual(self.client.session[SESSION_USER]['id'], MEMBER.id)
        self.assertIs(self.client.session[SESSION_AUTHENTICATED], True)

    def test_login_lives_in_the_signed_cookie(self, auth):
        auth.return_value.login.return_value = ADMIN
        self.client.post('/login', {'email': 'ada@example.com', 'password': 'Secret123'})
        cookie = self.client.cookies[settings.SESSION_COOKIE_NAME].value
        # any process holding the secret key can read it back
        data = signed_cookies.SessionStore(session_key=cookie).load()
        self.assertEqual(data[SESSION_USER]['id'], ADMIN.id)
        self.assertIs(data[SESSION_AUTHENTICATED], True)

    def test_offsite_redirect_is_ignored(self, auth):
        auth.return_value.login.return_value = MEMBER
        self.client.get('/login?redirectTo=https://evil.example/')
        resp = self.client.post('/login', {'email': 'mia@example.com', 'password': 'Secret123'})
        self.assertRedirects(resp, '/', fetch_redirect_response=False)

    def test_abandoned_destination_is_forgotten(self, auth):
        auth.return_value.login.return_value = MEMBER
        self.client.get('/jobs/5/apply')
        self.client.get('/login')
        resp = self.client.post('/login', {'email': 'mia@example.com', 'password': 'Secret123'})
        self.assertRedirects(resp, '/', fetch_redirect_response=False)

    def test_failed_attempt_keeps_destination(self, auth):
        auth.return_value.login.return_value = MEMBER
        self.client.get('/login?redirectTo=/jobs/5/apply&error=unauthorized')
        self.client.get('/login?error=invalid-credentials')
        resp = self.client.post('/login', {'email': 'mia@example.com', 'password': 'Secret123'})
        self.assertRedirects(resp, '/jobs/5/apply', fetch_redirect_response=False)

    def test_bad_credentials(self, auth):
        auth.return_value.login.return_value = None
        resp = self.client.post('/login', {'email': 'mia@example.com', 'password': 'nope'})
        self.assertRedirects(resp, '/login?error=invalid-credentials', fetch_redirect_response=False)

    def test_backend_failure(self, auth):
        auth.return_value.login.side_effect = BackendError("down")
        resp = self.client.post('/login', {'email': 'mia@example.com', 'password': 'x'})
        self.assertRedirects(resp, '/login?error=login-failed', fetch_redirect_response=False)

    def test_missing_fields_skip_backend(self, auth):
        resp = self.client.post('/login', {'email': ''})
        self.assertRedirects(resp, '/login?error=missing-fields', fetch_redirect_response=False)
        auth.return_value.login.assert_not_called()

    def test_logout_clears_session(self, auth):
        sign_in(self.client, MEMBER)
        resp = self.client.post('/logout')
        self.assertRedirects(resp, '/login?success=logout', fetch_redirect_response=False)
        self.assertNotIn(SESSION_USER, self.client.session)
        auth.return_value.logout.assert_called_once_with()

    def test_logout_requires_post(self, auth):
        self.assertEqual(self.client.get('/logout').status_code, 405)


@mock.patch('accounts.views._auth_service')
class RegisterViewTest(SimpleTestCase):
    valid = {
        'first_name': 'Mia',
        'last_name': 'Member',
        'email': 'mia@example.com',
        'password': 'Secret123',
        'confirm_password': 'Secret123',
    }

    def test_password_mismatch(self, auth):
        resp = self.client.post('/register', dict(self.valid, confirm_password='Secret124'))
        self.assertRedirects(resp, '/register?error=password-mismatch', fetch_redirect_response=False)

    def test_weak_password(self, auth):
        resp = self.client.post('/register', dict(self.valid, password='short', confirm_password='short'))
        self.assertRedirects(resp, '/register?error=weak-password', fetch_redirect_response=False)

    def test_invalid_email(self, auth):
        resp = self.client.post('/register', dict(self.valid, email='not-an-email'))
        self.assertRedirects(resp, '/register?error=invalid-email', fetch_redirect_response=False)

    def test_email_taken(self, auth):
        auth.return_value.register.side_effect = Conflict("exists", 409)
        resp = self.client.post('/register', self.valid)
        self.assertRedirects(resp, '/register?error=email-taken', fetch_redirect_response=False)

    def test_success_logs_in_as_member(self, auth):
        auth.return_value.register.return_value = MEMBER
        resp = self.client.post('/register', self.valid)
        self.assertRedirects(resp, '/?success=registration', fetch_redirect_response=False)
        self.assertEqual(self.client.session[SESSION_USER]['role'], ROLE_MEMBER)
        auth.return_value.register.assert_called_once_with('Mia', 'Member', 'mia@example.com', 'Secret123')


class AuthServiceTest(SimpleTestCase):
    def setUp(self):
        from .services import AuthService
        self.client_mock = mock.Mock()
        self.service = AuthService(client=self.client_mock)

    def test_login_unwraps_user(self):
        self.client_mock.post.return_value = {'data': {'user': {'id': 4, 'email': 'a@b.c', 'role': 'admin'}}}
        user = self.service.login('a@b.c', 'pw')
        self.assertEqual(user.id, 4)
        self.assertTrue(user.is_admin())

    def test_login_rejected(self):
        self.client_mock.post.side_effect = BackendError("nope", 401)
        self.assertIsNone(self.service.login('a@b.c', 'pw'))

    def test_login_server_error_propagates(self):
        self.client_mock.post.side_effect = BackendError("boom", 500)
        with self.assertRaises(BackendError):
            self.service.login('a@b.c', 'pw')

    def test_register_always_member(self):
        self.client_mock.post.return_value = {'id': 9, 'email': 'a@b.c', 'role': 'admin'}
        user = self.service.register('A', 'B', 'a@b.c', 'Secret123')
        self.assertTrue(user.is_member())

    def test_logout_failure_is_not_raised(self):
        self.client_mock.post.side_effect = BackendError("down")
        self.service.logout()


class HeaderTest(SimpleTestCase):
    def test_navigation_by_viewer(self):
        texts = lambda viewer: [item['text'] for item in navigation_menu(viewer)]
        self.assertEqual(texts(ANONYMOUS), ['Home', 'Jobs', 'About', 'Contact'])
        self.assertEqual(texts(Member(MEMBER)), ['Home', 'Jobs', 'View Applications', 'About', 'Contact'])
        self.assertEqual(texts(Admin(ADMIN)), ['Home', 'Jobs', 'Create Job', 'About', 'Contact'])

    def test_header_state(self):
        anonymous = header_state(ANONYMOUS)
        self.assertTrue(anonymous['show_login_button'])
        self.assertIsNone(anonymous['user_display'])
        admin = header_state(Admin(ADMIN))
        self.assertTrue(admin['show_logout_button'])
        self.assertTrue(admin['user_display']['has_admin_badge'])
        self.assertFalse(header_state(Member(MEMBER))['user_display']['has_admin_badge'])
