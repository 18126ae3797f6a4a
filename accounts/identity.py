# accounts/identity.py
"""
Per-request identity.

The session is reduced to exactly one viewer kind: Anonymous, Member or
Admin. Decision functions receive the viewer explicitly and match on its
kind instead of poking at optional session fields.
"""
import logging

from django.utils.http import url_has_allowed_host_and_scheme

from .models import User

logger = logging.getLogger(__name__)

SESSION_USER = 'user'
SESSION_AUTHENTICATED = 'is_authenticated'
SESSION_REDIRECT_TO = 'redirect_to'


class Anonymous:
    kind = 'anonymous'
    user = None
    is_authenticated = False
    is_admin = False
    is_member = False

    def __eq__(self, other):
        return isinstance(other, Anonymous)

    def __hash__(self):
        return hash(self.kind)

    def __repr__(self):
        return 'Anonymous()'


class _Authenticated:
    kind = None
    is_authenticated = True
    is_admin = False
    is_member = False

    def __init__(self, user):
        self.user = user

    def __eq__(self, other):
        return type(other) is type(self) and other.user == self.user

    def __hash__(self):
        return hash((self.kind, self.user))

    def __repr__(self):
        return f"{type(self).__name__}({self.user!r})"


class Member(_Authenticated):
    kind = 'member'
    is_member = True


class Admin(_Authenticated):
    kind = 'admin'
    is_admin = True


ANONYMOUS = Anonymous()


def viewer_for_user(user):
    if user is None:
        return ANONYMOUS
    return Admin(user) if user.is_admin() else Member(user)


def viewer_from_session(session):
    """
    Resolve the viewer for a session mapping.

    `is_authenticated` must come with a usable user and vice versa; any
    other combination is treated as tampering and yields Anonymous.
    """
    authenticated = session.get(SESSION_AUTHENTICATED) is True
    raw_user = session.get(SESSION_USER)
    if not authenticated and raw_user is None:
        return ANONYMOUS
    user = User.from_session(raw_user)
    if not authenticated or user is None:
        return ANONYMOUS
    return viewer_for_user(user)


def session_is_inconsistent(session):
    """True when the session holds half of a login (user without flag or flag without user)."""
    authenticated = session.get(SESSION_AUTHENTICATED) is True
    raw_user = session.get(SESSION_USER)
    if not authenticated and raw_user is None:
        return False
    return not (authenticated and User.from_session(raw_user) is not None)


def safe_redirect_target(target, request, default='/'):
    if target and url_has_allowed_host_and_scheme(target, allowed_hosts={request.get_host()}) \
            and target.startswith('/') and not target.startswith('//'):
        return target
    return default


def remember_destination(request):
    request.session[SESSION_REDIRECT_TO] = request.get_full_path()


def login_session(request, user):
    """
    Store a freshly authenticated user and return where to send them next.
    """
    redirect_to = request.session.pop(SESSION_REDIRECT_TO, None)
    request.session.cycle_key()
    request.session[SESSION_USER] = user.to_session()
    request.session[SESSION_AUTHENTICATED] = True
    request.viewer = viewer_for_user(user)
    logger.info("User %s logged in as %s", user.id, user.role)
    return safe_redirect_target(redirect_to, request)


def logout_session(request):
    viewer = getattr(request, 'viewer', ANONYMOUS)
    request.session.flush()
    request.viewer = ANONYMOUS
    if viewer.is_authenticated:
        logger.info("User %s logged out", viewer.user.id)
