# jobs/views.py
import logging
import math

from django.conf import settings
from django.http import HttpResponse, StreamingHttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods, require_POST

from accounts.decorators import admin_required, login_required, member_required
from portal.backend import BackendError, Conflict, NotFound
from portal.feedback import feedback_context, get_error_display

from .application_rules import (
    ACCEPT, REJECT, application_actions, application_status_display, can_transition,
    check_application_preconditions,
)
from .constants import BANDS, CAPABILITIES, STATUSES
from .forms import ApplyForm, DecisionForm, JobForm, form_error_code
from .job_rules import (
    accepts_applications, filter_options, format_date, job_detail_actions, job_metadata,
    resolve_job_action,
)
from .services import ApplicationService, JobService

logger = logging.getLogger(__name__)

CV_CHUNK_SIZE = 64 * 1024


def _jobs():
    return JobService()


def _applications():
    return ApplicationService()


def _parse_id(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _job_card(job, viewer):
    return {
        'job': job,
        'closing_date': format_date(job.closing_date),
        'action_button': resolve_job_action(job, viewer),
        'metadata': job_metadata(job),
    }


def _application_row(application, viewer, job_id=None):
    return {
        'application': application,
        'application_date': format_date(application.application_date),
        'status_display': application_status_display(application.status),
        'actions': application_actions(application, viewer, job_id),
    }


# -------------------------
# Public pages
# -------------------------
def home(request):
    context = {'message': 'Find Your Next Career Opportunity', 'latest_jobs': []}
    context.update(feedback_context(request))
    try:
        jobs = _jobs().all_jobs()
    except BackendError:
        logger.exception("Could not load jobs for the home page")
        context['error_display'] = get_error_display('server-error')
    else:
        jobs.sort(key=lambda j: j.closing_date.toordinal() if j.closing_date else 0, reverse=True)
        context['latest_jobs'] = [_job_card(job, request.viewer) for job in jobs[:3]]
    return render(request, 'home.html', context)


def job_list(request):
    """
    Paginated, searchable, filterable job list.
    """
    page = max(_parse_id(request.GET.get('page')) or 1, 1)
    limit = settings.JOBS_PAGE_SIZE
    offset = (page - 1) * limit
    search = request.GET.get('search', '').strip()
    filters = {}
    for field in ('location', 'capability', 'band'):
        value = request.GET.get(field, '').strip()
        if value:
            filters[field] = value

    context = {
        'title': 'Available Job Roles',
        'jobs': [],
        'search_query': search,
        'filters': filters,
        'locations': [],
        'capabilities': [],
        'bands': [],
        'is_admin': request.viewer.is_admin,
    }
    context.update(feedback_context(request))

    service = _jobs()
    try:
        jobs, total = service.list_jobs(limit=limit, offset=offset, search=search or None, filters=filters)
        # dropdowns list every value, not just the ones on this page
        context.update(filter_options(service.all_jobs()))
    except BackendError:
        logger.exception("Could not load job list")
        context['error_display'] = get_error_display('server-error')
        jobs, total = [], 0

    total_pages = math.ceil(total / limit) if total else 0
    context['jobs'] = [_job_card(job, request.viewer) for job in jobs]
    context['pagination'] = {
        'current_page': page,
        'total_pages': total_pages,
        'has_next': page < total_pages,
        'has_previous': page > 1,
        'total': total,
        'limit': limit,
    }
    return render(request, 'jobs/job_list.html', context)


def job_detail(request, job_id):
    job_id = _parse_id(job_id)
    if job_id is None:
        return redirect('/jobs?error=invalid-id')

    try:
        job = _jobs().get_job(job_id)
    except NotFound:
        return redirect('/jobs?error=not-found')
    except BackendError:
        logger.exception("Could not load job %s", job_id)
        return redirect('/jobs?error=server-error')

    context = {
        'title': job.name,
        'job': job,
        'metadata': job_metadata(job),
        'actions': job_detail_actions(job, request.viewer),
    }
    context.update(feedback_context(request))
    return render(request, 'jobs/job_detail.html', context)


# -------------------------
# Job CRUD (admin)
# -------------------------
def _job_form_context(request, form, job=None):
    context = {
        'form': form,
        'job': job,
        'capabilities': CAPABILITIES,
        'bands': BANDS,
        'statuses': STATUSES,
        'title': f"Edit {job.name}" if job else 'Create New Job Role',
    }
    context.update(feedback_context(request))
    return context


@login_required
@admin_required
@require_http_methods(["GET", "POST"])
def job_create(request):
    if request.method == 'GET':
        return render(request, 'jobs/job_form.html', _job_form_context(request, JobForm()))

    form = JobForm(request.POST)
    if not form.is_valid():
        return redirect(f'/jobs/create?error={form_error_code(form)}')

    try:
        _jobs().create_job(form.to_payload())
    except BackendError:
        logger.exception("Error creating job role")
        return redirect('/jobs/create?error=server-error')
    return redirect('/jobs?success=created')


@login_required
@admin_required
@require_http_methods(["GET", "POST"])
def job_edit(request, job_id):
    job_id = _parse_id(job_id)
    if job_id is None:
        return redirect('/jobs?error=invalid-id')

    if request.method == 'GET':
        try:
            job = _jobs().get_job(job_id)
        except NotFound:
            return redirect('/jobs?error=not-found')
        except BackendError:
            logger.exception("Error loading job %s for edit", job_id)
            return redirect('/jobs?error=server-error')
        return render(request, 'jobs/job_form.html', _job_form_context(request, JobForm.from_job(job), job))

    form = JobForm(request.POST, require_future_closing_date=False)
    if not form.is_valid():
        return redirect(f'/jobs/{job_id}/edit?error={form_error_code(form)}')

    try:
        _jobs().update_job(job_id, form.to_payload())
    except NotFound:
        return redirect('/jobs?error=not-found')
    except BackendError:
        logger.exception("Error updating job %s", job_id)
        return redirect(f'/jobs/{job_id}/edit?error=server-error')
    return redirect(f'/jobs/{job_id}?success=updated')


@login_required
@admin_required
@require_http_methods(["GET", "POST"])
def job_delete(request, job_id):
    job_id = _parse_id(job_id)
    if job_id is None:
        return redirect('/jobs?error=invalid-id')

    if request.method == 'GET':
        try:
            job = _jobs().get_job(job_id)
        except NotFound:
            return redirect('/jobs?error=not-found')
        except BackendError:
            logger.exception("Error loading job %s for delete", job_id)
            return redirect('/jobs?error=server-error')
        return render(request, 'jobs/job_confirm_delete.html', {'job': job, 'title': f"Delete {job.name}"})

    try:
        _jobs().delete_job(job_id)
    except BackendError:
        logger.exception("Error deleting job %s", job_id)
        return redirect(f'/jobs/{job_id}?error=delete-failed')
    return redirect('/jobs?success=deleted')


# -------------------------
# Application flow (members)
# -------------------------
@login_required
@member_required
@require_http_methods(["GET", "POST"])
def apply_start(request, job_id):
    job_id = _parse_id(job_id)
    if job_id is None:
        return redirect('/jobs?error=invalid-id')

    user = request.viewer.user

    if request.method == 'POST':
        form = ApplyForm(request.POST, request.FILES)
        # form problems are reported before anything is sent to the backend
        if not form.is_valid():
            return redirect(f'/jobs/{job_id}/apply?error={form_error_code(form)}')
        cover_letter = form.cleaned_data['cover_letter']
    else:
        form = ApplyForm()
        cover_letter = None

    try:
        job = _jobs().get_job(job_id)
        already_applied = accepts_applications(job) and _applications().has_applied(user.id, job_id)
    except NotFound:
        return redirect('/jobs?error=not-found')
    except BackendError:
        logger.exception("Error preparing application for job %s", job_id)
        return redirect('/jobs?error=server-error')

    if request.method == 'GET':
        if not accepts_applications(job):
            return redirect(f'/jobs/{job_id}?error=not-available')
        if already_applied:
            return redirect(f'/jobs/{job_id}?error=already-applied')
        context = {
            'title': f"Apply for {job.name}",
            'job': job,
            'metadata': job_metadata(job),
            'form': form,
        }
        context.update(feedback_context(request))
        return render(request, 'jobs/apply.html', context)

    problem = check_application_preconditions(job, request.viewer, cover_letter, already_applied)
    if problem == 'validation-failed':
        return redirect(f'/jobs/{job_id}/apply?error=validation-failed')
    if problem is not None:
        return redirect(f'/jobs/{job_id}?error={problem}')

    try:
        _applications().create_application(
            job_id,
            user,
            cover_letter,
            phone_number=form.cleaned_data.get('phone_number', ''),
            cv_file=form.cleaned_data.get('cv_file'),
        )
    except Conflict:
        return redirect(f'/jobs/{job_id}?error=already-applied')
    except BackendError:
        logger.exception("Error submitting application for job %s", job_id)
        return redirect(f'/jobs/{job_id}/apply?error=submission-failed')

    return redirect(f'/jobs/{job_id}/apply/success')


@login_required
@member_required
def apply_success(request, job_id):
    job_id = _parse_id(job_id)
    if job_id is None:
        return redirect('/jobs?error=invalid-id')
    try:
        job = _jobs().get_job(job_id)
    except NotFound:
        return redirect('/jobs?error=not-found')
    except BackendError:
        logger.exception("Could not load job %s after applying", job_id)
        return redirect('/jobs?error=server-error')
    return render(request, 'jobs/apply_success.html', {
        'title': 'Application Submitted',
        'job': job,
        'metadata': job_metadata(job),
    })


def _jobs_by_id():
    try:
        return {job.id: job for job in _jobs().all_jobs()}
    except BackendError:
        logger.warning("Could not load jobs to label applications", exc_info=True)
        return {}


@login_required
@member_required
def my_applications(request):
    context = {'title': 'My Applications', 'rows': []}
    context.update(feedback_context(request))
    try:
        applications = _applications().for_user(request.viewer.user.id)
    except NotFound:
        applications = []
    except BackendError:
        logger.exception("Could not load applications for user %s", request.viewer.user.id)
        context['error_display'] = get_error_display('server-error')
        applications = []

    jobs = _jobs_by_id() if applications else {}
    for application in applications:
        row = _application_row(application, request.viewer)
        row['job'] = jobs.get(application.job_id)
        context['rows'].append(row)
    return render(request, 'jobs/my_applications.html', context)


@login_required
@member_required
def my_application_detail(request, app_id):
    app_id = _parse_id(app_id)
    if app_id is None:
        return redirect('/my-applications?error=invalid-id')
    try:
        application = _applications().get_application(app_id)
    except NotFound:
        return redirect('/my-applications?error=not-found')
    except BackendError:
        logger.exception("Could not load application %s", app_id)
        return redirect('/my-applications?error=server-error')

    # members only ever see their own applications
    if application.user_id != request.viewer.user.id:
        return redirect('/my-applications?error=not-found')

    try:
        job = _jobs().get_job(application.job_id)
    except BackendError:
        job = None

    context = {'title': 'Application Details', 'job': job}
    context.update(_application_row(application, request.viewer))
    return render(request, 'jobs/my_application_detail.html', context)


# -------------------------
# Applications review (admins)
# -------------------------
@login_required
@admin_required
def applications_for_job(request, job_id):
    job_id = _parse_id(job_id)
    if job_id is None:
        return redirect('/jobs?error=invalid-id')
    try:
        job = _jobs().get_job(job_id)
        applications = _applications().for_job(job_id)
    except NotFound:
        return redirect('/jobs?error=not-found')
    except BackendError:
        logger.exception("Error showing applications for job %s", job_id)
        return redirect('/jobs?error=server-error')

    context = {
        'title': f"Applications for {job.name}",
        'job': job,
        'metadata': job_metadata(job),
        'rows': [_application_row(a, request.viewer, job_id) for a in applications],
    }
    context.update(feedback_context(request))
    return render(request, 'jobs/applications_list.html', context)


@login_required
@admin_required
def application_detail(request, job_id, app_id):
    job_id, app_id = _parse_id(job_id), _parse_id(app_id)
    if job_id is None or app_id is None:
        return redirect('/jobs?error=invalid-id')
    try:
        job = _jobs().get_job(job_id)
        application = _applications().get_application(app_id)
    except NotFound:
        return redirect(f'/jobs/{job_id}/applications?error=not-found')
    except BackendError:
        logger.exception("Error showing application %s", app_id)
        return redirect('/jobs?error=server-error')

    if application.job_id != job_id:
        return redirect(f'/jobs/{job_id}/applications?error=not-found')

    context = {
        'title': f"Application from {application.applicant_name}",
        'job': job,
        'metadata': job_metadata(job),
        'decision_form': DecisionForm(),
    }
    context.update(_application_row(application, request.viewer, job_id))
    context.update(feedback_context(request))
    return render(request, 'jobs/application_detail.html', context)


def _decide(request, job_id, app_id, action):
    job_id, app_id = _parse_id(job_id), _parse_id(app_id)
    if job_id is None or app_id is None:
        return redirect('/jobs?error=invalid-id')

    service = _applications()
    try:
        application = service.get_application(app_id)
    except NotFound:
        return redirect(f'/jobs/{job_id}/applications?error=not-found')
    except BackendError:
        logger.exception("Error loading application %s before %s", app_id, action)
        return redirect(f'/jobs/{job_id}/applications?error=update-failed')

    if application.job_id != job_id:
        return redirect(f'/jobs/{job_id}/applications?error=not-found')

    # checked here against fresh data; the backend still has the final word
    if not can_transition(application.status, action):
        return redirect(f'/jobs/{job_id}/applications/{app_id}?error=invalid-transition')

    form = DecisionForm(request.POST)
    notes = form.cleaned_data.get('notes') if form.is_valid() else None
    try:
        if action == ACCEPT:
            service.accept(app_id, notes)
        else:
            service.reject(app_id, notes)
    except BackendError:
        logger.exception("Error applying %s to application %s", action, app_id)
        return redirect(f'/jobs/{job_id}/applications?error=update-failed')

    outcome = 'accepted' if action == ACCEPT else 'rejected'
    logger.info("Admin %s %s application %s", request.viewer.user.id, outcome, app_id)
    return redirect(f'/jobs/{job_id}/applications/{app_id}?success={outcome}')


@login_required
@admin_required
@require_POST
def application_accept(request, job_id, app_id):
    return _decide(request, job_id, app_id, ACCEPT)


@login_required
@admin_required
@require_POST
def application_reject(request, job_id, app_id):
    return _decide(request, job_id, app_id, REJECT)


# -------------------------
# CV download proxy
# -------------------------
def _owns_cv(service, user, path):
    """Members may only download a CV attached to one of their own applications."""
    try:
        applications = service.for_user(user.id)
    except NotFound:
        return False
    return any(application.cv_url == path for application in applications)


@login_required
def cv_download(request, year, month, filename):
    if filename.startswith('.'):
        return HttpResponse("File not found", status=404, content_type='text/plain')

    path = f"/uploads/cvs/{year}/{month}/{filename}"
    service = _applications()
    try:
        if not request.viewer.is_admin and not _owns_cv(service, request.viewer.user, path):
            # answered exactly like a missing file
            return HttpResponse("File not found", status=404, content_type='text/plain')
        logger.info("Proxying CV download %s", path)
        upstream = service.stream_cv(path)
    except NotFound:
        return HttpResponse("File not found", status=404, content_type='text/plain')
    except BackendError:
        logger.exception("Error proxying file download for %s", path)
        return HttpResponse("Error downloading file", status=500, content_type='text/plain')

    def _chunks():
        try:
            for chunk in upstream.iter_content(CV_CHUNK_SIZE):
                if chunk:
                    yield chunk
        finally:
            upstream.close()

    response = StreamingHttpResponse(
        _chunks(),
        content_type=upstream.headers.get('Content-Type', 'application/octet-stream'),
    )
    if upstream.headers.get('Content-Length'):
        response['Content-Length'] = upstream.headers['Content-Length']
    response['Content-Disposition'] = upstream.headers.get(
        'Content-Disposition', f'attachment; filename="{filename}"')
    return response
