"""Tests for RegistrationForm."""

from server.apps.accounts.forms import RegistrationForm


def test_valid_form(registration_data):
    """Test valid data passes."""
    form = RegistrationForm(registration_data)

    assert form.is_valid()
    assert form.error_list() == []


def test_required_fields():
    """Test missing fields report one message each."""
    form = RegistrationForm({})

    assert not form.is_valid()
    assert form.error_list() == [
        {'field': 'first_name', 'message': 'First name is required.'},
        {'field': 'last_name', 'message': 'Last name is required.'},
        {'field': 'username', 'message': 'Username is required.'},
        {'field': 'password', 'message': 'Password must be at least 5 characters.'},
    ]


def test_alphanumeric_names(registration_data):
    """Test names with other characters are rejected."""
    registration_data['first_name'] = 'Bo b'
    registration_data['username'] = 'bob!'

    form = RegistrationForm(registration_data)

    assert not form.is_valid()
    assert {'field': 'first_name', 'message': 'First name must be alphanumeric.'} in form.error_list()
    assert {'field': 'username', 'message': 'Username must be alphanumeric.'} in form.error_list()


def test_short_password(registration_data):
    """Test passwords shorter than five characters are rejected."""
    registration_data['password'] = 'abcd'
    registration_data['passwordConfirmation'] = 'abcd'

    form = RegistrationForm(registration_data)

    assert form.error_list() == [
        {'field': 'password', 'message': 'Password must be at least 5 characters.'},
    ]


def test_password_mismatch(registration_data):
    """Test the confirmation must match the password."""
    registration_data['passwordConfirmation'] = 'hunter3'

    form = RegistrationForm(registration_data)

    assert form.error_list() == [
        {'field': 'passwordConfirmation', 'message': 'Passwords do not match.'},
    ]
