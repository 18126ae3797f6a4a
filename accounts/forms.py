# accounts/forms.py
import re

from django import forms
from django.core.exceptions import ValidationError


def password_is_strong(password):
    # at least 8 characters, one uppercase, one lowercase, one digit
    return (
        len(password) >= 8
        and re.search(r'[A-Z]', password) is not None
        and re.search(r'[a-z]', password) is not None
        and re.search(r'\d', password) is not None
    )


class LoginForm(forms.Form):
    email = forms.CharField(max_length=254)
    password = forms.CharField(strip=False, widget=forms.PasswordInput)


class RegisterForm(forms.Form):
    first_name = forms.CharField(max_length=150)
    last_name = forms.CharField(max_length=150)
    email = forms.EmailField(error_messages={'invalid': "Please enter a valid email address."})
    password = forms.CharField(strip=False, widget=forms.PasswordInput)
    confirm_password = forms.CharField(strip=False, widget=forms.PasswordInput)

    def clean_password(self):
        password = self.cleaned_data.get('password', '')
        if password and not password_is_strong(password):
            raise ValidationError("Password is too weak.", code='weak-password')
        return password

    def clean(self):
        cleaned = super().clean()
        password = cleaned.get('password')
        confirm = cleaned.get('confirm_password')
        if password and confirm and password != confirm:
            raise ValidationError("Passwords do not match.", code='password-mismatch')
        return cleaned

    def error_code(self):
        """The redirect code for the first problem on a bound, invalid form."""
        data = self.errors.as_data()
        codes = {e.code for errors in data.values() for e in errors}
        if 'required' in codes:
            return 'missing-fields'
        if 'email' in data:
            return 'invalid-email'
        for code in ('weak-password', 'password-mismatch'):
            if code in codes:
                return code
        return 'validation-failed'
