# jobs/services.py
"""
Job and application calls against the backend API.

Methods return `Job` / `Application` records or raise `BackendError`
(see portal.backend). Malformed payloads are reported as BackendError too,
so views only ever handle one family of exceptions.
"""
import logging

from portal.backend import BackendClient, BackendError, NotFound, unwrap

from .application_rules import ACCEPT, REJECT, resolve_notes
from .models import Application, Job

logger = logging.getLogger(__name__)

FILTER_FIELDS = ('location', 'capability', 'band')


def _records(payload, factory, *keys):
    items = unwrap(payload, *keys)
    if items is None:
        return []
    if not isinstance(items, list):
        raise BackendError(f"Expected a list from backend, got {type(items).__name__}")
    try:
        return [factory(item) for item in items]
    except (KeyError, TypeError, ValueError) as exc:
        raise BackendError(f"Malformed record from backend: {exc}") from exc


def _record(payload, factory, *keys):
    item = unwrap(payload, *keys)
    if not isinstance(item, dict):
        raise BackendError("Empty or malformed record from backend")
    try:
        return factory(item)
    except (KeyError, TypeError, ValueError) as exc:
        raise BackendError(f"Malformed record from backend: {exc}") from exc


def _matches(job, search, filters):
    if search:
        needle = search.lower()
        haystack = ' '.join((job.name, job.location, job.capability, job.band, job.summary)).lower()
        if needle not in haystack:
            return False
    for field, value in filters.items():
        if value and getattr(job, field, '').lower() != value.lower():
            return False
    return True


class JobService:
    def __init__(self, client=None):
        self.client = client or BackendClient()

    def list_jobs(self, limit=10, offset=0, search=None, filters=None):
        """
        One page of jobs and the total count.

        Deployments that answer with a bare list ignore the query
        parameters; that list is filtered and sliced here instead. A wrapped
        page without a total is taken as already paginated.
        """
        filters = {k: v for k, v in (filters or {}).items() if k in FILTER_FIELDS and v}
        params = {'limit': limit, 'offset': offset}
        if search:
            params['search'] = search
        params.update(filters)

        payload = self.client.get('/api/jobs', params=params)
        jobs = _records(payload, Job.from_backend, 'jobs')

        if isinstance(payload, dict) and payload.get('total') is not None:
            try:
                return jobs, int(payload['total'])
            except (TypeError, ValueError) as exc:
                raise BackendError(f"Malformed total from backend: {payload['total']!r}") from exc

        if isinstance(payload, dict):
            # total unknown: allow one more page while pages come back full
            return jobs, offset + len(jobs) + (1 if len(jobs) == limit else 0)

        matching = [job for job in jobs if _matches(job, search, filters)]
        return matching[offset:offset + limit], len(matching)

    def all_jobs(self):
        return _records(self.client.get('/api/jobs'), Job.from_backend, 'jobs')

    def get_job(self, job_id):
        return _record(self.client.get(f'/api/jobs/{job_id}'), Job.from_backend, 'job')

    def create_job(self, payload):
        logger.info("Creating job %r", payload.get('name'))
        result = self.client.post('/api/jobs', json=payload)
        return _record(result, Job.from_backend, 'job') if result else None

    def update_job(self, job_id, payload):
        logger.info("Updating job %s", job_id)
        result = self.client.put(f'/api/jobs/{job_id}', json=payload)
        return _record(result, Job.from_backend, 'job') if result else None

    def delete_job(self, job_id):
        logger.info("Deleting job %s", job_id)
        self.client.delete(f'/api/jobs/{job_id}')


class ApplicationService:
    def __init__(self, client=None):
        self.client = client or BackendClient()

    def get_application(self, application_id):
        return _record(self.client.get(f'/api/applications/{application_id}'),
                       Application.from_backend, 'application')

    def for_job(self, job_id):
        return _records(self.client.get(f'/api/applications/job/{job_id}'),
                        Application.from_backend, 'applications')

    def for_user(self, user_id):
        return _records(self.client.get(f'/api/applications/user/{user_id}'),
                        Application.from_backend, 'applications')

    def for_user_and_job(self, user_id, job_id):
        return _record(self.client.get(f'/api/applications/user/{user_id}/job/{job_id}'),
                       Application.from_backend, 'application')

    def has_applied(self, user_id, job_id):
        # a lookup, not a constraint: two racing submissions can both pass
        try:
            self.for_user_and_job(user_id, job_id)
        except NotFound:
            return False
        return True

    def create_application(self, job_id, user, cover_letter, phone_number='', cv_file=None):
        """
        Submit a new application. Status is never sent: the backend starts it as pending.

        With a CV the request is multipart, otherwise JSON.
        """
        fields = {
            'userId': str(user.id),
            'jobRoleId': str(job_id),
            'applicantName': user.username,
            'email': user.email,
            'phoneNumber': phone_number or '',
            'coverLetter': cover_letter,
        }
        logger.info("User %s applying for job %s (cv=%s)", user.id, job_id, bool(cv_file))
        if cv_file is not None:
            cv_file.seek(0)
            files = {'cvFile': (cv_file.name, cv_file, getattr(cv_file, 'content_type', None)
                                or 'application/octet-stream')}
            result = self.client.post('/api/applications', data=fields, files=files)
        else:
            result = self.client.post('/api/applications', json=dict(fields, userId=user.id, jobRoleId=job_id))
        return _record(result, Application.from_backend, 'application') if result else None

    def accept(self, application_id, notes=None):
        return self._decide(application_id, 'hire', resolve_notes(ACCEPT, notes))

    def reject(self, application_id, notes=None):
        return self._decide(application_id, 'reject', resolve_notes(REJECT, notes))

    def _decide(self, application_id, endpoint, notes):
        logger.info("Application %s -> %s", application_id, endpoint)
        result = self.client.put(f'/api/applications/{application_id}/{endpoint}', json={'notes': notes})
        return _record(result, Application.from_backend, 'application') if result else None

    def stream_cv(self, path):
        return self.client.stream(path)
