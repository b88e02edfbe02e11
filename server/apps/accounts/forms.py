"""Forms for accounts app."""

from typing import Any, Final, override

from django import forms
from django.core.validators import RegexValidator

_NAME_MAX_LENGTH: Final = 150
_PASSWORD_MIN_LENGTH: Final = 5
_PASSWORD_TOO_SHORT: Final = 'Password must be at least 5 characters.'


def _alphanumeric(label: str) -> RegexValidator:
    return RegexValidator(
        regex=r'^[A-Za-z0-9]+$',
        message=f'{label} must be alphanumeric.',
    )


def _name_field(label: str) -> forms.CharField:
    return forms.CharField(
        max_length=_NAME_MAX_LENGTH,
        validators=[_alphanumeric(label)],
        error_messages={'required': f'{label} is required.'},
    )


class RegistrationForm(forms.Form):
    """Sign-up form.

    Field names match the names posted by the registration page.
    """

    first_name = _name_field('First name')
    last_name = _name_field('Last name')
    username = _name_field('Username')
    password = forms.CharField(
        min_length=_PASSWORD_MIN_LENGTH,
        strip=False,
        widget=forms.PasswordInput,
        error_messages={
            'required': _PASSWORD_TOO_SHORT,
            'min_length': _PASSWORD_TOO_SHORT,
        },
    )
    passwordConfirmation = forms.CharField(  # noqa: N815
        required=False,
        strip=False,
        widget=forms.PasswordInput,
    )

    @override
    def clean(self) -> dict[str, Any]:
        """Check that both passwords match."""
        cleaned_data = super().clean()
        password = self.data.get('password', '')
        confirmation = self.data.get('passwordConfirmation', '')
        if password != confirmation:
            self.add_error('passwordConfirmation', 'Passwords do not match.')
        return cleaned_data

    def error_list(self) -> list[dict[str, str]]:
        """Flatten validation errors for a JSON response.

        Returns:
            One ``{'field': ..., 'message': ...}`` entry per error.
        """
        return [
            {'field': field, 'message': str(message)}
            for field, messages in self.errors.items()
            for message in messages
        ]


class LoginForm(forms.Form):
    """Log-in form."""

    username = forms.CharField(max_length=_NAME_MAX_LENGTH)
    password = forms.CharField(strip=False, widget=forms.PasswordInput)
