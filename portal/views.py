# portal/views.py
from django.shortcuts import render


def _error(request, status, title, message):
    return render(request, 'error.html', {
        'title': title,
        'message': message,
        'status_code': status,
    }, status=status)


def permission_denied(request, exception=None):
    return _error(request, 403, "Access Denied", "You don't have permission to access this page.")


def page_not_found(request, exception=None):
    return _error(request, 404, "Page Not Found", "The page you're looking for doesn't exist.")


def server_error(request):
    return _error(request, 500, "Server Error", "An unexpected error occurred. Please try again later.")
