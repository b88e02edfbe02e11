"""HTTP views for registration and sessions."""

from django.conf import settings
from django.contrib.auth import login, logout
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import (
    require_GET,
    require_http_methods,
)

from server.apps.accounts.forms import LoginForm, RegistrationForm
from server.apps.accounts.logic.authentication import (
    AuthFailure,
    authenticate_credentials,
    current_principal,
)
from server.apps.accounts.logic.registration import register_user
from server.apps.drive.exceptions import ConflictError


@require_GET
def index(request: HttpRequest) -> HttpResponse:
    """Render the landing page."""
    return render(request, 'index.html', {
        'principal': current_principal(request),
    })


@require_http_methods(['GET', 'POST'])
def register(request: HttpRequest) -> HttpResponse:
    """Show the sign-up form or create an account."""
    if request.method == 'GET':
        return render(request, 'accounts/register.html', {
            'form': RegistrationForm(),
        })

    form = RegistrationForm(request.POST)
    if not form.is_valid():
        return JsonResponse({'errors': form.error_list()}, status=400)

    try:
        register_user(
            first_name=form.cleaned_data['first_name'],
            last_name=form.cleaned_data['last_name'],
            username=form.cleaned_data['username'],
            password=form.cleaned_data['password'],
        )
    except ConflictError as exc:
        return JsonResponse({'error': str(exc)}, status=exc.status_code)
    return redirect('accounts:index')


@require_http_methods(['GET', 'POST'])
def log_in(request: HttpRequest) -> HttpResponse:
    """Show the log-in form or start a session."""
    if request.method == 'GET':
        return render(request, 'accounts/login.html', {'form': LoginForm()})

    form = LoginForm(request.POST)
    if not form.is_valid():
        return render(request, 'accounts/login.html', {
            'form': form,
            'error': AuthFailure().message,
        })

    outcome = authenticate_credentials(
        request,
        form.cleaned_data['username'],
        form.cleaned_data['password'],
    )
    if isinstance(outcome, AuthFailure):
        return render(request, 'accounts/login.html', {
            'form': form,
            'error': outcome.message,
        })

    login(request, outcome)
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(
        next_url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return redirect(next_url)
    return redirect(settings.LOGIN_REDIRECT_URL)


@require_http_methods(['GET', 'POST'])
def log_out(request: HttpRequest) -> HttpResponse:
    """End the session."""
    logout(request)
    return redirect(settings.LOGOUT_REDIRECT_URL)


@login_required
@require_GET
def profile(request: HttpRequest) -> HttpResponse:
    """Render the profile of the signed-in user."""
    return render(request, 'accounts/profile.html', {
        'principal': request.user,
    })
