# jobs/constants.py
from .models import JOB_STATUS

CAPABILITIES = (
    'Engineering',
    'Platforms',
    'Data',
    'Artificial Intelligence',
    'Cyber Security',
    'Workday',
    'Experience Design',
)

BANDS = (
    'Trainee',
    'Associate',
    'Senior Associate',
    'Consultant',
    'Manager',
    'Principal',
    'Leadership Community',
)

STATUSES = JOB_STATUS

CAPABILITY_CHOICES = [(c, c) for c in CAPABILITIES]
BAND_CHOICES = [(b, b) for b in BANDS]

MIN_COVER_LETTER_LENGTH = 50

DEFAULT_ACCEPT_NOTES = "Application accepted by reviewer"
DEFAULT_REJECT_NOTES = "Application rejected by reviewer"
