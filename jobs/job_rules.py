# jobs/job_rules.py
"""
What a viewer can do with a job, and how the job's status is shown.

All functions are pure: same job + same viewer gives the same result.
"""
from .models import JOB_CLOSED, JOB_OPEN

PRIMARY_CLASS = 'btn bg-blue-600 hover:bg-blue-700 text-white border-none'
ADMIN_CLASS = 'btn btn-sm bg-purple-600 hover:bg-purple-700 text-white border-none'
DISABLED_CLASS = 'btn bg-gray-400 text-white border-none cursor-not-allowed'

VIEW_APPLICATIONS = 'View Applications'
APPLY_NOW = 'Apply Now'
LOGIN_TO_APPLY = 'Login to Apply'
NO_POSITIONS = 'No Positions'
CLOSED = 'Closed'


def action_button(text='', href='', class_name='', disabled=False, show=True):
    return {
        'show': show,
        'text': text,
        'href': href,
        'class_name': class_name,
        'disabled': disabled,
    }


NO_ACTION = action_button(show=False)


def accepts_applications(job):
    return job.status == JOB_OPEN and job.number_of_open_positions > 0


def apply_url(job):
    return f"/jobs/{job.id}/apply"


def login_to_apply_url(job):
    return f"/login?redirectTo={apply_url(job)}"


def resolve_job_action(job, viewer):
    """
    The single primary action for a job card / detail header.

    First match wins:
      admin                      -> View Applications
      open, positions, member    -> Apply Now
      open, positions, anonymous -> Login to Apply
      open, no positions         -> No Positions (disabled)
      closed                     -> Closed (disabled)
    An unrecognised job status yields a hidden button.
    """
    if viewer.is_admin:
        return action_button(VIEW_APPLICATIONS, f"/jobs/{job.id}/applications", ADMIN_CLASS)

    if accepts_applications(job):
        if viewer.is_member:
            return action_button(APPLY_NOW, apply_url(job), PRIMARY_CLASS)
        return action_button(LOGIN_TO_APPLY, login_to_apply_url(job), PRIMARY_CLASS)

    if job.status == JOB_OPEN:
        return action_button(NO_POSITIONS, '', DISABLED_CLASS, disabled=True)

    if job.status == JOB_CLOSED:
        return action_button(CLOSED, '', DISABLED_CLASS, disabled=True)

    return dict(NO_ACTION)


def job_detail_actions(job, viewer):
    """Header action plus the sidebar apply/manage sections of the detail page."""
    wide = ' w-full'
    if viewer.is_admin:
        apply_action = dict(NO_ACTION)
    elif accepts_applications(job):
        if viewer.is_member:
            apply_action = action_button(APPLY_NOW, apply_url(job), PRIMARY_CLASS + wide)
        else:
            apply_action = action_button(LOGIN_TO_APPLY, login_to_apply_url(job), PRIMARY_CLASS + wide)
    elif job.status == JOB_OPEN:
        apply_action = action_button('No Positions Available', '', DISABLED_CLASS + wide, disabled=True)
    elif job.status == JOB_CLOSED:
        apply_action = action_button('Applications Closed', '', DISABLED_CLASS + wide, disabled=True)
    else:
        apply_action = dict(NO_ACTION)

    return {
        'header_action': resolve_job_action(job, viewer),
        'sidebar': {
            'show_apply_section': not viewer.is_admin,
            'show_manage_section': viewer.is_admin,
            'apply_action': apply_action,
        },
    }


def job_status_display(job):
    if job.status == JOB_OPEN:
        return {
            'text': 'Open',
            'color': 'text-green-600',
            'icon_class': 'circle-check',
            'badge_class': 'bg-green-100 text-green-800',
        }
    return {
        'text': 'Closed',
        'color': 'text-red-600',
        'icon_class': 'circle-x',
        'badge_class': 'bg-red-100 text-red-800',
    }


def format_date(value):
    return value.strftime('%d/%m/%Y') if value else ''


def positions_text(count):
    return f"{count} position{'' if count == 1 else 's'}"


def job_metadata(job):
    return {
        'formatted_closing_date': format_date(job.closing_date),
        'positions_text': positions_text(job.number_of_open_positions),
        'status_display': job_status_display(job),
    }


def filter_options(jobs):
    """Distinct values for the list page filter dropdowns."""
    return {
        'locations': sorted({j.location for j in jobs if j.location}),
        'capabilities': sorted({j.capability for j in jobs if j.capability}),
        'bands': sorted({j.band for j in jobs if j.band}),
    }
