# accounts/views.py
import logging

from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods, require_POST

from portal.backend import BackendError, Conflict
from portal.feedback import feedback_context

from .forms import LoginForm, RegisterForm
from .identity import SESSION_REDIRECT_TO, login_session, logout_session, safe_redirect_target
from .services import AuthService

logger = logging.getLogger(__name__)


def _auth_service():
    return AuthService()


@require_http_methods(["GET", "POST"])
def login_view(request):
    if request.viewer.is_authenticated:
        return redirect('/')

    if request.method == 'GET':
        redirect_to = request.GET.get('redirectTo')
        if redirect_to:
            request.session[SESSION_REDIRECT_TO] = safe_redirect_target(redirect_to, request)
        elif not request.GET.get('error'):
            # a plain visit forgets any abandoned destination; failed attempts keep it
            request.session.pop(SESSION_REDIRECT_TO, None)
        context = {'title': 'Login', 'form': LoginForm()}
        context.update(feedback_context(request))
        return render(request, 'accounts/login.html', context)

    form = LoginForm(request.POST)
    if not form.is_valid():
        return redirect('/login?error=missing-fields')

    try:
        user = _auth_service().login(form.cleaned_data['email'], form.cleaned_data['password'])
    except BackendError:
        logger.exception("Login failed against backend")
        return redirect('/login?error=login-failed')

    if user is None:
        return redirect('/login?error=invalid-credentials')

    return redirect(login_session(request, user))


@require_POST
def logout_view(request):
    _auth_service().logout()
    logout_session(request)
    return redirect('/login?success=logout')


@require_http_methods(["GET", "POST"])
def register(request):
    if request.viewer.is_authenticated:
        return redirect('/')

    if request.method == 'GET':
        context = {'title': 'Register', 'form': RegisterForm()}
        context.update(feedback_context(request))
        return render(request, 'accounts/register.html', context)

    form = RegisterForm(request.POST)
    if not form.is_valid():
        return redirect(f'/register?error={form.error_code()}')

    data = form.cleaned_data
    try:
        user = _auth_service().register(data['first_name'], data['last_name'], data['email'], data['password'])
    except Conflict:
        return redirect('/register?error=email-taken')
    except BackendError:
        logger.exception("Registration failed for %s", data['email'])
        return redirect('/register?error=registration-failed')

    # auto-login after signup
    login_session(request, user)
    return redirect('/?success=registration')
