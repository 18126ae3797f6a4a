# accounts/services.py
import logging

from portal.backend import BackendClient, BackendError, unwrap

from .models import ROLE_MEMBER, User

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, client=None):
        self.client = client or BackendClient()

    def login(self, email, password):
        """
        Returns the User on success, None when the backend rejects the credentials.
        Transport failures propagate as BackendError.
        """
        try:
            payload = self.client.post('/api/auth/login', json={'email': email, 'password': password})
        except BackendError as exc:
            if exc.status_code in (400, 401, 403):
                logger.info("Login rejected for %s (%s)", email, exc.status_code)
                return None
            raise
        user = self._user_from(payload)
        if user is None:
            logger.warning("Login response for %s carried no user", email)
        return user

    def register(self, first_name, last_name, email, password):
        """
        Create a member account. The password confirmation is checked by the
        form and never sent; whatever role the backend reports, the new
        account is a member.
        """
        payload = self.client.post('/api/auth/register', json={
            'firstName': first_name,
            'lastName': last_name,
            'email': email,
            'password': password,
        })
        user = self._user_from(payload)
        if user is None:
            raise BackendError("Registration response carried no user")
        return User(id=user.id, username=user.username, email=user.email, role=ROLE_MEMBER)

    def logout(self):
        try:
            self.client.post('/api/auth/logout')
        except BackendError:
            # the local session is cleared regardless
            logger.warning("Backend logout failed", exc_info=True)

    @staticmethod
    def _user_from(payload):
        raw = unwrap(payload, 'user')
        if isinstance(raw, dict) and 'user' in raw:
            raw = raw['user']
        if not isinstance(raw, dict) or 'id' not in raw:
            return None
        try:
            return User.from_backend(raw)
        except (TypeError, ValueError):
            return None
