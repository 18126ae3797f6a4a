# portal/feedback.py
"""
Display helpers for the short status codes carried on redirects.

State-changing views redirect after the work is done and only pass a code
such as ``?error=not-found`` or ``?success=created``. The functions here
turn that code into everything a template needs to show a banner. They
never raise: unknown codes get a generic message, empty codes hide the banner.
"""

ERROR = 'error'
WARNING = 'warning'
INFO = 'info'
SUCCESS = 'success'

DEFAULT_ERROR_MESSAGE = "An error occurred. Please try again."
DEFAULT_SUCCESS_MESSAGE = "Operation completed successfully!"

ERROR_MESSAGES = {
    # Authentication
    'unauthorized': ("Please log in to access this page.", ERROR),
    'invalid-credentials': ("Invalid email or password. Please try again.", ERROR),
    'session-expired': ("Your session has expired. Please log in again.", WARNING),
    'login-failed': ("Login failed. Please try again.", ERROR),

    # Jobs
    'invalid-id': ("Invalid job ID provided.", ERROR),
    'not-found': ("The job you're looking for doesn't exist or has been removed.", ERROR),
    'not-available': ("This job is no longer available for applications.", WARNING),

    # Application form
    'missing-fields': ("Please fill in all required fields.", ERROR),
    'missing-cv-file': ("Please upload your CV file.", ERROR),
    'invalid-file-type': ("Please upload a CV in PDF, DOC, or DOCX format only.", ERROR),
    'file-too-large': ("CV file is too large. Please upload a file smaller than 5MB.", ERROR),
    'submission-failed': ("Failed to submit application. Please try again.", ERROR),
    'already-applied': (
        "You have already applied for this job. You cannot apply for the same job twice.", WARNING),
    'file-upload-failed': ("Failed to upload file. Please try again with a different file.", ERROR),

    # Registration
    'invalid-email': ("Please enter a valid email address.", ERROR),
    'password-mismatch': ("Passwords do not match.", ERROR),
    'weak-password': (
        "Password must be at least 8 characters with uppercase, lowercase, and number.", ERROR),
    'registration-failed': ("Registration failed. Please try again.", ERROR),
    'email-taken': ("An account with this email already exists.", WARNING),

    # General
    'server-error': ("An unexpected error occurred. Please try again later.", ERROR),
    'validation-failed': ("Please check your input and try again.", ERROR),
    'update-failed': ("Failed to update. Please try again.", ERROR),
    'delete-failed': ("Failed to delete. Please try again.", ERROR),
    'invalid-transition': ("This application has already been decided.", WARNING),
}

SUCCESS_MESSAGES = {
    'created': "Job role created successfully!",
    'updated': "Updated successfully!",
    'deleted': "Deleted successfully!",
    'submitted': "Application submitted successfully!",
    'accepted': "Application accepted successfully!",
    'rejected': "Application rejected.",
    'login': "Login successful!",
    'logout': "Logged out successfully!",
    'registration': "Welcome! Your account has been created successfully!",
}

ICONS = {
    ERROR: 'alert-circle',
    WARNING: 'alert-triangle',
    INFO: 'info',
    SUCCESS: 'check-circle',
}

STYLES = {
    ERROR: ('bg-red-50 border border-red-200 text-red-700 px-4 py-3 rounded mb-6', 'text-red-700'),
    WARNING: ('bg-yellow-50 border border-yellow-200 text-yellow-700 px-4 py-3 rounded mb-6', 'text-yellow-700'),
    INFO: ('bg-blue-50 border border-blue-200 text-blue-700 px-4 py-3 rounded mb-6', 'text-blue-700'),
    SUCCESS: ('bg-green-50 border border-green-200 text-green-700 px-4 py-3 rounded mb-6', 'text-green-700'),
}


def _hidden(severity):
    return {
        'show': False,
        'message': '',
        'severity': severity,
        'icon_class': '',
        'container_class': '',
        'text_class': '',
    }


def _display(message, severity):
    container_class, text_class = STYLES.get(severity, STYLES[ERROR])
    return {
        'show': True,
        'message': message,
        'severity': severity,
        'icon_class': ICONS.get(severity, ICONS[ERROR]),
        'container_class': container_class,
        'text_class': text_class,
    }


def get_error_display(code):
    if not code or not isinstance(code, str):
        return _hidden(ERROR)
    message, severity = ERROR_MESSAGES.get(code, (DEFAULT_ERROR_MESSAGE, ERROR))
    return _display(message, severity)


def get_success_display(code):
    if not code or not isinstance(code, str):
        return _hidden(SUCCESS)
    return _display(SUCCESS_MESSAGES.get(code, DEFAULT_SUCCESS_MESSAGE), SUCCESS)


def feedback_context(request):
    """Banner context for a request: reads ?error= and ?success=."""
    return {
        'error_display': get_error_display(request.GET.get('error')),
        'success_display': get_success_display(request.GET.get('success')),
    }

