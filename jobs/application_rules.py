# jobs/application_rules.py
"""
Application lifecycle.

    pending -> reviewed -> accepted | rejected

`accepted` and `rejected` are terminal. Only admins move an application
forward, and only through `accept` or `reject`.
"""
from .constants import DEFAULT_ACCEPT_NOTES, DEFAULT_REJECT_NOTES, MIN_COVER_LETTER_LENGTH
from .job_rules import accepts_applications
from .models import (
    APPLICATION_ACCEPTED, APPLICATION_PENDING, APPLICATION_REJECTED, APPLICATION_REVIEWED,
)

PENDING = APPLICATION_PENDING
REVIEWED = APPLICATION_REVIEWED
ACCEPTED = APPLICATION_ACCEPTED
REJECTED = APPLICATION_REJECTED

ACTIONABLE_STATUSES = frozenset({PENDING, REVIEWED})

ACCEPT = 'accept'
REJECT = 'reject'
TRANSITIONS = {
    ACCEPT: ACCEPTED,
    REJECT: REJECTED,
}

DEFAULT_NOTES = {
    ACCEPT: DEFAULT_ACCEPT_NOTES,
    REJECT: DEFAULT_REJECT_NOTES,
}


class InvalidTransition(ValueError):
    def __init__(self, status, action):
        super().__init__(f"Cannot {action} an application in status {status!r}")
        self.status = status
        self.action = action


def can_transition(status, action):
    return action in TRANSITIONS and status in ACTIONABLE_STATUSES


def transition(status, action):
    if not can_transition(status, action):
        raise InvalidTransition(status, action)
    return TRANSITIONS[action]


def default_notes(action):
    return DEFAULT_NOTES[action]


def resolve_notes(action, notes):
    notes = (notes or '').strip()
    return notes or default_notes(action)


def application_actions(application, viewer, job_id=None):
    """
    Buttons an application detail / list row offers.

    Admins always get View Details (terminal applications stay readable);
    Accept and Reject only while the application is still undecided.
    """
    is_admin = viewer.is_admin
    can_take_action = is_admin and application.status in ACTIONABLE_STATUSES
    base = f"/jobs/{job_id or application.job_id}/applications/{application.id}"
    return {
        'can_take_action': can_take_action,
        'show_view_details': is_admin,
        'view_details_href': base if is_admin else '',
        'show_accept': can_take_action,
        'accept_href': f"{base}/accept" if can_take_action else '',
        'show_reject': can_take_action,
        'reject_href': f"{base}/reject" if can_take_action else '',
    }


STATUS_DISPLAY = {
    PENDING: {
        'text': 'Pending',
        'badge_class': 'bg-yellow-100 text-yellow-800',
        'icon_class': 'clock',
    },
    REVIEWED: {
        'text': 'Reviewed',
        'badge_class': 'bg-blue-100 text-blue-800',
        'icon_class': 'eye',
    },
    ACCEPTED: {
        'text': 'Accepted',
        'badge_class': 'bg-green-100 text-green-800',
        'icon_class': 'circle-check',
    },
    REJECTED: {
        'text': 'Rejected',
        'badge_class': 'bg-red-100 text-red-800',
        'icon_class': 'circle-x',
    },
}

UNKNOWN_STATUS_DISPLAY = {
    'text': 'Unknown',
    'badge_class': 'bg-gray-100 text-gray-800',
    'icon_class': 'help-circle',
}


def application_status_display(status):
    # the backend may grow new statuses before we do
    return dict(STATUS_DISPLAY.get(status, UNKNOWN_STATUS_DISPLAY))


def cover_letter_is_sufficient(cover_letter):
    return len((cover_letter or '').strip()) >= MIN_COVER_LETTER_LENGTH


def check_application_preconditions(job, viewer, cover_letter, already_applied):
    """
    Error code for the first failed precondition of a new application, or None.

    Local checks come first (role, cover letter), then the ones that need
    backend data (job availability, existing application).
    """
    if not viewer.is_member:
        return 'unauthorized' if not viewer.is_authenticated else 'forbidden'
    if not cover_letter_is_sufficient(cover_letter):
        return 'validation-failed'
    if not accepts_applications(job):
        return 'not-available'
    if already_applied:
        return 'already-applied'
    return None
