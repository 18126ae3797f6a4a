# jobs/forms.py
import os

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils import timezone

from .constants import BAND_CHOICES, CAPABILITY_CHOICES, MIN_COVER_LETTER_LENGTH, STATUSES
from .models import JOB_OPEN, job_payload


def form_error_code(form):
    """
    Collapse a bound form's errors into one redirect code.

    A missing required field wins; upload problems keep their own codes;
    everything else is a generic validation failure.
    """
    codes = {e.code for errors in form.errors.as_data().values() for e in errors}
    if 'required' in codes:
        return 'missing-fields'
    for code in ('invalid-file-type', 'file-too-large'):
        if code in codes:
            return code
    return 'validation-failed'


class JobForm(forms.Form):
    name = forms.CharField(max_length=255)
    location = forms.CharField(max_length=255)
    capability = forms.ChoiceField(choices=CAPABILITY_CHOICES)
    band = forms.ChoiceField(choices=BAND_CHOICES)
    closing_date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date'}))
    summary = forms.CharField(widget=forms.Textarea(attrs={'rows': 4}))
    key_responsibilities = forms.CharField(widget=forms.Textarea(attrs={'rows': 6}))
    status = forms.ChoiceField(choices=STATUSES, initial=JOB_OPEN)
    number_of_open_positions = forms.IntegerField(min_value=1)

    def __init__(self, *args, require_future_closing_date=True, **kwargs):
        self.require_future_closing_date = require_future_closing_date
        super().__init__(*args, **kwargs)

    @classmethod
    def from_job(cls, job, **kwargs):
        return cls(initial={
            'name': job.name,
            'location': job.location,
            'capability': job.capability,
            'band': job.band,
            'closing_date': job.closing_date,
            'summary': job.summary,
            'key_responsibilities': job.key_responsibilities,
            'status': job.status,
            'number_of_open_positions': job.number_of_open_positions,
        }, **kwargs)

    def clean_closing_date(self):
        d = self.cleaned_data.get('closing_date')
        if d and self.require_future_closing_date and d <= timezone.localdate():
            raise ValidationError("Closing date must be in the future.", code='past-date')
        return d

    def to_payload(self):
        data = self.cleaned_data
        return job_payload(
            name=data['name'],
            location=data['location'],
            capability=data['capability'],
            band=data['band'],
            closing_date=data['closing_date'],
            summary=data['summary'],
            key_responsibilities=data['key_responsibilities'],
            status=data['status'],
            number_of_open_positions=data['number_of_open_positions'],
        )


class ApplyForm(forms.Form):
    """
    Cover letter is mandatory (at least 50 characters once trimmed); a CV
    upload and phone number are optional.
    """
    cover_letter = forms.CharField(
        min_length=MIN_COVER_LETTER_LENGTH,
        max_length=5000,
        widget=forms.Textarea(attrs={'rows': 8}),
    )
    phone_number = forms.CharField(required=False, max_length=32)
    cv_file = forms.FileField(required=False)

    def clean_cv_file(self):
        f = self.cleaned_data.get('cv_file')
        if not f:
            return f
        ext = os.path.splitext(f.name.lower())[1]
        if ext not in settings.CV_ALLOWED_EXTENSIONS:
            raise ValidationError("Only PDF, DOC and DOCX files are allowed.", code='invalid-file-type')
        if f.size > settings.CV_MAX_UPLOAD_SIZE:
            raise ValidationError("File size must be <= 5 MB.", code='file-too-large')
        return f


class DecisionForm(forms.Form):
    notes = forms.CharField(required=False, max_length=2000, widget=forms.Textarea(attrs={'rows': 3}))
