import logging
from functools import wraps
from urllib.parse import quote

from django.shortcuts import redirect, render

from .identity import remember_destination

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = "You don't have permission to access this page."
ADMIN_CANNOT_APPLY_MESSAGE = "Administrators cannot apply for job positions."


def forbidden(request, message=ACCESS_DENIED_MESSAGE, title="Access Denied"):
    return render(request, 'error.html', {
        'title': title,
        'message': message,
        'status_code': 403,
    }, status=403)


def login_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.viewer.is_authenticated:
            remember_destination(request)
            target = quote(request.get_full_path(), safe='/')
            return redirect(f'/login?redirectTo={target}&error=unauthorized')
        return view_func(request, *args, **kwargs)
    return _wrapped


def admin_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.viewer.is_admin:
            logger.info("Denied %s to non-admin viewer %r", request.path, request.viewer)
            return forbidden(request)
        return view_func(request, *args, **kwargs)
    return _wrapped


def member_required(view_func):
    """Admins are barred from member-only actions such as applying for a job."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if request.viewer.is_admin:
            logger.info("Denied member-only %s to admin %s", request.path, request.viewer.user.id)
            return forbidden(request, ADMIN_CANNOT_APPLY_MESSAGE)
        return view_func(request, *args, **kwargs)
    return _wrapped
