# jobs/models.py
"""
Read-side records for jobs and applications.

These are plain dataclasses built from backend JSON; the backend owns
persistence. Field names follow Python conventions, `from_backend`
accepts the camelCase the API sends.
"""
from dataclasses import dataclass
from datetime import date, datetime

JOB_OPEN = 'open'
JOB_CLOSED = 'closed'
JOB_STATUS = (
    (JOB_OPEN, 'Open'),
    (JOB_CLOSED, 'Closed'),
)

APPLICATION_PENDING = 'pending'
APPLICATION_REVIEWED = 'reviewed'
APPLICATION_ACCEPTED = 'accepted'
APPLICATION_REJECTED = 'rejected'

# backend vocabulary -> ours; unknown values are kept as-is
BACKEND_APPLICATION_STATUS = {
    'in progress': APPLICATION_PENDING,
    'pending': APPLICATION_PENDING,
    'reviewed': APPLICATION_REVIEWED,
    'hired': APPLICATION_ACCEPTED,
    'accepted': APPLICATION_ACCEPTED,
    'rejected': APPLICATION_REJECTED,
}


def parse_date(value):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
    except ValueError:
        return date.fromisoformat(text[:10])


def parse_datetime(value):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))


def _int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class Job:
    id: int
    name: str
    location: str = ''
    capability: str = ''
    band: str = ''
    closing_date: date = None
    summary: str = ''
    key_responsibilities: str = ''
    status: str = JOB_OPEN
    number_of_open_positions: int = 0

    def __str__(self):
        return f"{self.name} ({self.location or '-'})"

    @classmethod
    def from_backend(cls, payload):
        positions = payload.get('numberOfOpenPositions', payload.get('positions', 0))
        return cls(
            id=int(payload['id']),
            name=payload.get('name') or payload.get('roleName') or '',
            location=payload.get('location') or '',
            capability=payload.get('capability') or '',
            band=payload.get('band') or '',
            closing_date=parse_date(payload.get('closingDate')),
            summary=payload.get('summary') or payload.get('description') or '',
            key_responsibilities=payload.get('keyResponsibilities') or payload.get('responsibilities') or '',
            status=str(payload.get('status') or JOB_OPEN).strip().lower(),
            number_of_open_positions=max(_int(positions), 0),
        )


def job_payload(name, location, capability, band, closing_date, summary,
                key_responsibilities, status, number_of_open_positions):
    return {
        'name': name,
        'location': location,
        'capability': capability,
        'band': band,
        'closingDate': closing_date.isoformat() if closing_date else None,
        'summary': summary,
        'keyResponsibilities': key_responsibilities,
        'status': status,
        'numberOfOpenPositions': number_of_open_positions,
    }


@dataclass
class Application:
    id: int
    job_id: int
    applicant_name: str
    email: str
    phone_number: str = ''
    cover_letter: str = ''
    cv_url: str = None
    cv_file_name: str = None
    application_date: datetime = None
    status: str = APPLICATION_PENDING
    notes: str = ''
    user_id: int = None

    def __str__(self):
        return f"{self.applicant_name} -> job {self.job_id} ({self.status})"

    @classmethod
    def from_backend(cls, payload):
        if payload.get('applicantName'):
            applicant_name = payload['applicantName']
        elif payload.get('firstName') or payload.get('lastName'):
            applicant_name = f"{payload.get('firstName', '')} {payload.get('lastName', '')}".strip()
        else:
            applicant_name = payload.get('email') or 'Unknown applicant'

        cv_path = payload.get('cvFilePath')
        if cv_path:
            cv_url = '/' + cv_path.lstrip('/')
        else:
            cv_url = payload.get('cv') or None

        raw_status = str(payload.get('status') or APPLICATION_PENDING).strip().lower()
        user_id = payload.get('userId')
        return cls(
            id=int(payload['id']),
            job_id=_int(payload.get('jobRoleId', payload.get('jobId'))),
            applicant_name=applicant_name,
            email=payload.get('email') or '',
            phone_number=payload.get('phoneNumber') or '',
            cover_letter=payload.get('coverLetter') or payload.get('cvText') or '',
            cv_url=cv_url,
            cv_file_name=payload.get('cvFileName') or None,
            application_date=parse_datetime(payload.get('createdAt') or payload.get('applicationDate')),
            status=BACKEND_APPLICATION_STATUS.get(raw_status, raw_status),
            notes=payload.get('notes') or '',
            user_id=_int(user_id, None) if user_id is not None else None,
        )
