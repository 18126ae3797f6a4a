# accounts/middleware.py
import logging

from .identity import session_is_inconsistent, viewer_from_session

logger = logging.getLogger(__name__)


class ViewerMiddleware:
    """
    Attach `request.viewer` for every request. Must run after SessionMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if session_is_inconsistent(request.session):
            logger.warning("Discarding inconsistent session for %s", request.path)
            request.session.flush()
        request.viewer = viewer_from_session(request.session)
        return self.get_response(request)
