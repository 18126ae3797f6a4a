# accounts/context_processors.py
from .identity import ANONYMOUS

ADMIN_BADGE_CLASS = 'bg-blue-100 text-blue-800 text-xs px-2 py-1 rounded-full ml-1'


def navigation_menu(viewer):
    items = [
        {'text': 'Home', 'href': '/', 'visible': True},
        {'text': 'Jobs', 'href': '/jobs', 'visible': True},
        {'text': 'About', 'href': '#', 'visible': True},
        {'text': 'Contact', 'href': '#', 'visible': True},
    ]
    if viewer.is_admin:
        items.insert(2, {'text': 'Create Job', 'href': '/jobs/create', 'visible': True})
    elif viewer.is_member:
        items.insert(2, {'text': 'View Applications', 'href': '/my-applications', 'visible': True})
    return items


def user_display(viewer):
    if not viewer.is_authenticated:
        return None
    return {
        'username': viewer.user.username,
        'has_admin_badge': viewer.is_admin,
        'admin_badge_text': 'Admin',
        'admin_badge_class': ADMIN_BADGE_CLASS,
    }


def header_state(viewer):
    return {
        'navigation': navigation_menu(viewer),
        'user_display': user_display(viewer),
        'is_authenticated': viewer.is_authenticated,
        'show_login_button': not viewer.is_authenticated,
        'show_logout_button': viewer.is_authenticated,
    }


def header(request):
    viewer = getattr(request, 'viewer', ANONYMOUS)
    return {
        'viewer': viewer,
        'current_user': viewer.user,
        'header': header_state(viewer),
    }
