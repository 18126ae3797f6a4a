# jobs/tests.py
from datetime import date
from unittest import mock

from django.conf import settings
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client, SimpleTestCase

from accounts.identity import ANONYMOUS, SESSION_AUTHENTICATED, SESSION_USER, Admin, Member
from accounts.models import ROLE_ADMIN, ROLE_MEMBER, User
from portal.backend import BackendError, Conflict, NotFound

from .application_rules import (
    ACCEPT, ACCEPTED, PENDING, REJECT, REJECTED, REVIEWED, InvalidTransition, application_actions,
    application_status_display, can_transition, check_application_preconditions, resolve_notes,
    transition,
)
from .forms import ApplyForm, JobForm, form_error_code
from .job_rules import filter_options, job_detail_actions, job_metadata, resolve_job_action
from .models import Application, Job
from .services import ApplicationService, JobService

MEMBER = User(id=7, username='Mia Member', email='mia@example.com', role=ROLE_MEMBER)
ADMIN = User(id=1, username='Ada Admin', email='ada@example.com', role=ROLE_ADMIN)
COVER_LETTER = "I have spent six years building data platforms and would love to join."


def make_job(**overrides):
    fields = dict(id=5, name='Data Engineer', location='Belfast', capability='Data',
                  band='Consultant', closing_date=date(2030, 1, 31), summary='Pipelines',
                  key_responsibilities='Build things', status='open', number_of_open_positions=2)
    fields.update(overrides)
    return Job(**fields)


def make_application(**overrides):
    fields = dict(id=12, job_id=5, applicant_name='Mia Member', email='mia@example.com',
                  status=PENDING, user_id=MEMBER.id)
    fields.update(overrides)
    return Application(**fields)


def sign_in(client, user):
    session = client.session
    session[SESSION_USER] = user.to_session()
    session[SESSION_AUTHENTICATED] = True
    session.save()
    # signed-cookie sessions change key on every save
    client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key


class JobRulesTest(SimpleTestCase):
    def test_admin_always_views_applications(self):
        for job in (make_job(), make_job(status='closed'), make_job(number_of_open_positions=0)):
            action = resolve_job_action(job, Admin(ADMIN))
            self.assertEqual(action['text'], 'View Applications')
            self.assertEqual(action['href'], '/jobs/5/applications')

    def test_open_job_with_positions(self):
        self.assertEqual(resolve_job_action(make_job(), Member(MEMBER))['href'], '/jobs/5/apply')
        anonymous = resolve_job_action(make_job(), ANONYMOUS)
        self.assertEqual(anonymous['text'], 'Login to Apply')
        self.assertEqual(anonymous['href'], '/login?redirectTo=/jobs/5/apply')

    def test_disabled_actions(self):
        no_positions = resolve_job_action(make_job(number_of_open_positions=0), Member(MEMBER))
        closed = resolve_job_action(make_job(status='closed'), ANONYMOUS)
        self.assertEqual((no_positions['text'], no_positions['disabled']), ('No Positions', True))
        self.assertEqual((closed['text'], closed['disabled']), ('Closed', True))

    def test_every_viewer_gets_exactly_one_action(self):
        viewers = (ANONYMOUS, Member(MEMBER), Admin(ADMIN))
        for status in ('open', 'closed'):
            for positions in (0, 1, 3):
                for viewer in viewers:
                    job = make_job(status=status, number_of_open_positions=positions)
                    self.assertTrue(resolve_job_action(job, viewer)['show'])
                    self.assertEqual(resolve_job_action(job, viewer), resolve_job_action(job, viewer))

    def test_unrecognised_status_is_hidden(self):
        self.assertFalse(resolve_job_action(make_job(status='archived'), ANONYMOUS)['show'])

    def test_detail_sidebar(self):
        admin = job_detail_actions(make_job(), Admin(ADMIN))['sidebar']
        self.assertTrue(admin['show_manage_section'])
        self.assertFalse(admin['apply_action']['show'])
        closed = job_detail_actions(make_job(status='closed'), Member(MEMBER))['sidebar']
        self.assertEqual(closed['apply_action']['text'], 'Applications Closed')

    def test_metadata(self):
        meta = job_metadata(make_job(number_of_open_positions=1))
        self.assertEqual(meta['formatted_closing_date'], '31/01/2030')
        self.assertEqual(meta['positions_text'], '1 position')
        self.assertEqual(meta['status_display']['text'], 'Open')
        self.assertEqual(job_metadata(make_job(status='closed'))['status_display']['text'], 'Closed')

    def test_filter_options(self):
        jobs = [make_job(location='Derry'), make_job(location='Belfast', band=''), make_job()]
        options = filter_options(jobs)
        self.assertEqual(options['locations'], ['Belfast', 'Derry'])
        self.assertEqual(options['bands'], ['Consultant'])


class ApplicationRulesTest(SimpleTestCase):
    def test_transitions(self):
        self.assertEqual(transition(PENDING, ACCEPT), ACCEPTED)
        self.assertEqual(transition(REVIEWED, REJECT), REJECTED)
        for status in (ACCEPTED, REJECTED, 'withdrawn'):
            self.assertFalse(can_transition(status, ACCEPT))
            with self.assertRaises(InvalidTransition):
                transition(status, REJECT)

    def test_default_notes(self):
        self.assertEqual(resolve_notes(ACCEPT, None), "Application accepted by reviewer")
        self.assertEqual(resolve_notes(REJECT, '   '), "Application rejected by reviewer")
        self.assertEqual(resolve_notes(ACCEPT, 'Great fit'), 'Great fit')

    def test_actions_for_admin(self):
        actions = application_actions(make_application(), Admin(ADMIN))
        self.assertTrue(actions['can_take_action'])
        self.assertEqual(actions['accept_href'], '/jobs/5/applications/12/accept')
        decided = application_actions(make_application(status=ACCEPTED), Admin(ADMIN))
        self.assertFalse(decided['show_accept'])
        self.assertFalse(decided['show_reject'])
        self.assertTrue(decided['show_view_details'])

    def test_actions_for_member(self):
        actions = application_actions(make_application(), Member(MEMBER))
        self.assertFalse(actions['can_take_action'])
        self.assertFalse(actions['show_view_details'])

    def test_status_display_falls_back(self):
        self.assertEqual(application_status_display(REVIEWED)['text'], 'Reviewed')
        self.assertEqual(application_status_display('on hold')['text'], 'Unknown')

    def test_preconditions_in_order(self):
        job = make_job()
        self.assertEqual(check_application_preconditions(job, ANONYMOUS, COVER_LETTER, False), 'unauthorized')
        self.assertEqual(check_application_preconditions(job, Admin(ADMIN), COVER_LETTER, False), 'forbidden')
        member = Member(MEMBER)
        self.assertEqual(check_application_preconditions(job, member, 'x' * 49, False), 'validation-failed')
        self.assertEqual(check_application_preconditions(job, member, ' ' * 60, False), 'validation-failed')
        self.assertEqual(check_application_preconditions(make_job(status='closed'), member, COVER_LETTER, False),
                         'not-available')
        self.assertEqual(check_application_preconditions(job, member, COVER_LETTER, True), 'already-applied')
        self.assertIsNone(check_application_preconditions(job, member, COVER_LETTER, False))


class ModelsTest(SimpleTestCase):
    def test_job_from_backend(self):
        job = Job.from_backend({'id': '3', 'name': 'QA', 'closingDate': '2030-02-01T00:00:00Z',
                                'status': 'OPEN', 'numberOfOpenPositions': '4'})
        self.assertEqual((job.id, job.status, job.number_of_open_positions), (3, 'open', 4))
        self.assertEqual(job.closing_date, date(2030, 2, 1))

    def test_application_status_mapping(self):
        hired = Application.from_backend({'id': 1, 'jobRoleId': 5, 'status': 'Hired'})
        in_progress = Application.from_backend({'id': 2, 'jobRoleId': 5, 'status': 'in progress'})
        unknown = Application.from_backend({'id': 3, 'jobRoleId': 5, 'status': 'on hold'})
        self.assertEqual(hired.status, ACCEPTED)
        self.assertEqual(in_progress.status, PENDING)
        self.assertEqual(unknown.status, 'on hold')

    def test_application_cv_and_name(self):
        app = Application.from_backend({'id': 1, 'jobRoleId': '5', 'firstName': 'Sam', 'lastName': 'Lee',
                                        'cvFilePath': 'uploads/cvs/2025/1/cv.pdf', 'userId': '7'})
        self.assertEqual(app.applicant_name, 'Sam Lee')
        self.assertEqual(app.cv_url, '/uploads/cvs/2025/1/cv.pdf')
        self.assertEqual((app.job_id, app.user_id), (5, 7))


class FormsTest(SimpleTestCase):
    def test_apply_form_rejects_short_cover_letter(self):
        form = ApplyForm({'cover_letter': 'x' * 40})
        self.assertFalse(form.is_valid())
        self.assertEqual(form_error_code(form), 'validation-failed')

    def test_apply_form_file_checks(self):
        exe = SimpleUploadedFile('cv.exe', b'MZ', content_type='application/octet-stream')
        form = ApplyForm({'cover_letter': COVER_LETTER}, {'cv_file': exe})
        self.assertFalse(form.is_valid())
        self.assertEqual(form_error_code(form), 'invalid-file-type')

        with self.settings(CV_MAX_UPLOAD_SIZE=10):
            big = SimpleUploadedFile('cv.pdf', b'%PDF' + b'0' * 100, content_type='application/pdf')
            form = ApplyForm({'cover_letter': COVER_LETTER}, {'cv_file': big})
            self.assertFalse(form.is_valid())
            self.assertEqual(form_error_code(form), 'file-too-large')

    def test_job_form_payload(self):
        form = JobForm({
            'name': 'Data Engineer', 'location': 'Belfast', 'capability': 'Data', 'band': 'Consultant',
            'closing_date': '2099-06-30', 'summary': 'S', 'key_responsibilities': 'K', 'status': 'open',
            'number_of_open_positions': '3',
        })
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.to_payload()
        self.assertEqual(payload['closingDate'], '2099-06-30')
        self.assertEqual(payload['numberOfOpenPositions'], 3)

    def test_job_form_missing_fields(self):
        form = JobForm({'name': 'Only a name'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form_error_code(form), 'missing-fields')


class ServicesTest(SimpleTestCase):
    def setUp(self):
        self.client_mock = mock.Mock()

    def test_list_jobs_uses_backend_total(self):
        self.client_mock.get.return_value = {'data': [{'id': 1, 'name': 'A'}], 'total': 25}
        jobs, total = JobService(self.client_mock).list_jobs(limit=10, offset=10, search='a')
        self.assertEqual((len(jobs), total), (1, 25))
        self.client_mock.get.assert_called_once_with(
            '/api/jobs', params={'limit': 10, 'offset': 10, 'search': 'a'})

    def test_list_jobs_filters_bare_list_locally(self):
        self.client_mock.get.return_value = [
            {'id': 1, 'name': 'Data Engineer', 'location': 'Belfast'},
            {'id': 2, 'name': 'Data Analyst', 'location': 'Derry'},
            {'id': 3, 'name': 'Tester', 'location': 'Belfast'},
        ]
        jobs, total = JobService(self.client_mock).list_jobs(search='data', filters={'location': 'belfast'})
        self.assertEqual([job.id for job in jobs], [1])
        self.assertEqual(total, 1)

    def test_wrapped_page_without_total_is_not_sliced_again(self):
        self.client_mock.get.return_value = {'data': [{'id': i, 'name': f'Job {i}'} for i in range(11, 21)]}
        jobs, total = JobService(self.client_mock).list_jobs(limit=10, offset=10)
        self.assertEqual([job.id for job in jobs], list(range(11, 21)))
        self.assertEqual(total, 21)

        self.client_mock.get.return_value = {'jobs': [{'id': 21, 'name': 'Last'}]}
        jobs, total = JobService(self.client_mock).list_jobs(limit=10, offset=20)
        self.assertEqual([job.id for job in jobs], [21])
        self.assertEqual(total, 21)

    def test_get_job_accepts_wrapped_shapes(self):
        service = JobService(self.client_mock)
        for payload in ({'id': 5, 'name': 'X'}, {'job': {'id': 5, 'name': 'X'}}, {'data': {'id': 5, 'name': 'X'}}):
            self.client_mock.get.return_value = payload
            self.assertEqual(service.get_job(5).id, 5)

    def test_malformed_record_is_backend_error(self):
        self.client_mock.get.return_value = {'name': 'no id'}
        with self.assertRaises(BackendError):
            JobService(self.client_mock).get_job(5)

    def test_has_applied(self):
        service = ApplicationService(self.client_mock)
        self.client_mock.get.side_effect = NotFound("none", 404)
        self.assertFalse(service.has_applied(7, 5))
        self.client_mock.get.side_effect = None
        self.client_mock.get.return_value = {'id': 12, 'jobRoleId': 5}
        self.assertTrue(service.has_applied(7, 5))

    def test_accept_sends_default_notes_to_hire(self):
        self.client_mock.put.return_value = {'id': 12, 'jobRoleId': 5, 'status': 'hired'}
        app = ApplicationService(self.client_mock).accept(12)
        self.client_mock.put.assert_called_once_with(
            '/api/applications/12/hire', json={'notes': "Application accepted by reviewer"})
        self.assertEqual(app.status, ACCEPTED)

    def test_create_application_without_cv_is_json(self):
        self.client_mock.post.return_value = {'id': 12, 'jobRoleId': 5, 'status': 'pending'}
        ApplicationService(self.client_mock).create_application(5, MEMBER, COVER_LETTER)
        _, kwargs = self.client_mock.post.call_args
        self.assertEqual(kwargs['json']['jobRoleId'], 5)
        self.assertNotIn('status', kwargs['json'])

    def test_create_application_with_cv_is_multipart(self):
        self.client_mock.post.return_value = None
        cv = SimpleUploadedFile('cv.pdf', b'%PDF-1.4', content_type='application/pdf')
        ApplicationService(self.client_mock).create_application(5, MEMBER, COVER_LETTER, cv_file=cv)
        _, kwargs = self.client_mock.post.call_args
        self.assertEqual(kwargs['files']['cvFile'][0], 'cv.pdf')
        self.assertEqual(kwargs['data']['jobRoleId'], '5')


class PublicPagesTest(SimpleTestCase):
    def setUp(self):
        self.client = Client()

    @mock.patch('jobs.views._jobs')
    def test_job_list(self, jobs):
        jobs.return_value.list_jobs.return_value = ([make_job()], 1)
        jobs.return_value.all_jobs.return_value = [make_job()]
        resp = self.client.get('/jobs?search=data&location=Belfast')
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, 'Login to Apply')
        jobs.return_value.list_jobs.assert_called_once_with(
            limit=10, offset=0, search='data', filters={'location': 'Belfast'})
        self.assertEqual(resp.context['pagination']['total_pages'], 1)

    @mock.patch('jobs.views._jobs')
    def test_job_list_backend_down(self, jobs):
        jobs.return_value.list_jobs.side_effect = BackendError("down")
        resp = self.client.get('/jobs')
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, 'An unexpected error occurred. Please try again later.')

    @mock.patch('jobs.views._jobs')
    def test_job_detail_not_found(self, jobs):
        jobs.return_value.get_job.side_effect = NotFound("gone", 404)
        resp = self.client.get('/jobs/99')
        self.assertRedirects(resp, '/jobs?error=not-found', fetch_redirect_response=False)

    def test_job_detail_bad_id(self):
        resp = self.client.get('/jobs/abc')
        self.assertRedirects(resp, '/jobs?error=invalid-id', fetch_redirect_response=False)

    @mock.patch('jobs.views._jobs')
    def test_home_shows_latest_three(self, jobs):
        jobs.return_value.all_jobs.return_value = [
            make_job(id=i, closing_date=date(2030, 1, i)) for i in range(1, 6)
        ]
        resp = self.client.get('/')
        self.assertEqual([card['job'].id for card in resp.context['latest_jobs']], [5, 4, 3])


@mock.patch('jobs.views._applications')
@mock.patch('jobs.views._jobs')
class ApplyFlowTest(SimpleTestCase):
    def setUp(self):
        self.client = Client()
        sign_in(self.client, MEMBER)

    def test_short_cover_letter_never_reaches_backend(self, jobs, applications):
        resp = self.client.post('/jobs/5/apply', {'cover_letter': 'x' * 40})
        self.assertRedirects(resp, '/jobs/5/apply?error=validation-failed', fetch_redirect_response=False)
        jobs.assert_not_called()
        applications.assert_not_called()

    def test_successful_application(self, jobs, applications):
        jobs.return_value.get_job.return_value = make_job()
        applications.return_value.has_applied.return_value = False
        resp = self.client.post('/jobs/5/apply', {'cover_letter': COVER_LETTER, 'phone_number': '0123'})
        self.assertRedirects(resp, '/jobs/5/apply/success', fetch_redirect_response=False)
        applications.return_value.create_application.assert_called_once_with(
            5, MEMBER, COVER_LETTER, phone_number='0123', cv_file=None)

    def test_already_applied(self, jobs, applications):
        jobs.return_value.get_job.return_value = make_job()
        applications.return_value.has_applied.return_value = True
        resp = self.client.post('/jobs/5/apply', {'cover_letter': COVER_LETTER})
        self.assertRedirects(resp, '/jobs/5?error=already-applied', fetch_redirect_response=False)
        applications.return_value.create_application.assert_not_called()

    def test_racing_duplicate_rejected_by_backend(self, jobs, applications):
        jobs.return_value.get_job.return_value = make_job()
        applications.return_value.has_applied.return_value = False
        applications.return_value.create_application.side_effect = Conflict("dup", 409)
        resp = self.client.post('/jobs/5/apply', {'cover_letter': COVER_LETTER})
        self.assertRedirects(resp, '/jobs/5?error=already-applied', fetch_redirect_response=False)

    def test_closed_job(self, jobs, applications):
        jobs.return_value.get_job.return_value = make_job(status='closed')
        resp = self.client.post('/jobs/5/apply', {'cover_letter': COVER_LETTER})
        self.assertRedirects(resp, '/jobs/5?error=not-available', fetch_redirect_response=False)

    def test_submission_failure(self, jobs, applications):
        jobs.return_value.get_job.return_value = make_job()
        applications.return_value.has_applied.return_value = False
        applications.return_value.create_application.side_effect = BackendError("boom", 500)
        resp = self.client.post('/jobs/5/apply', {'cover_letter': COVER_LETTER})
        self.assertRedirects(resp, '/jobs/5/apply?error=submission-failed', fetch_redirect_response=False)

    def test_apply_form_renders(self, jobs, applications):
        jobs.return_value.get_job.return_value = make_job()
        applications.return_value.has_applied.return_value = False
        resp = self.client.get('/jobs/5/apply')
        self.assertEqual(resp.status_code, 200)
        self.assertTemplateUsed(resp, 'jobs/apply.html')

    def test_success_page_job_missing(self, jobs, applications):
        jobs.return_value.get_job.side_effect = NotFound("gone", 404)
        resp = self.client.get('/jobs/5/apply/success')
        self.assertRedirects(resp, '/jobs?error=not-found', fetch_redirect_response=False)

    def test_success_page_backend_down(self, jobs, applications):
        jobs.return_value.get_job.side_effect = BackendError("timeout")
        with self.assertLogs('jobs.views', level='ERROR'):
            resp = self.client.get('/jobs/5/apply/success')
        self.assertRedirects(resp, '/jobs?error=server-error', fetch_redirect_response=False)

    def test_other_members_application_is_hidden(self, jobs, applications):
        applications.return_value.get_application.return_value = make_application(user_id=99)
        resp = self.client.get('/my-applications/12')
        self.assertRedirects(resp, '/my-applications?error=not-found', fetch_redirect_response=False)

    def test_my_applications(self, jobs, applications):
        applications.return_value.for_user.return_value = [make_application()]
        jobs.return_value.all_jobs.return_value = [make_job()]
        resp = self.client.get('/my-applications')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.context['rows'][0]['job'].name, 'Data Engineer')
        applications.return_value.for_user.assert_called_once_with(MEMBER.id)


@mock.patch('jobs.views._applications')
class DecisionTest(SimpleTestCase):
    def setUp(self):
        self.client = Client()
        sign_in(self.client, ADMIN)

    def test_accept_pending_application(self, applications):
        applications.return_value.get_application.return_value = make_application()
        resp = self.client.post('/jobs/5/applications/12/accept')
        self.assertRedirects(resp, '/jobs/5/applications/12?success=accepted', fetch_redirect_response=False)
        applications.return_value.accept.assert_called_once_with(12, '')

    def test_reject_with_notes(self, applications):
        applications.return_value.get_application.return_value = make_application(status=REVIEWED)
        resp = self.client.post('/jobs/5/applications/12/reject', {'notes': 'Not enough experience'})
        self.assertRedirects(resp, '/jobs/5/applications/12?success=rejected', fetch_redirect_response=False)
        applications.return_value.reject.assert_called_once_with(12, 'Not enough experience')

    def test_decided_application_cannot_move(self, applications):
        applications.return_value.get_application.return_value = make_application(status=REJECTED)
        resp = self.client.post('/jobs/5/applications/12/accept')
        self.assertRedirects(resp, '/jobs/5/applications/12?error=invalid-transition',
                             fetch_redirect_response=False)
        applications.return_value.accept.assert_not_called()

    def test_backend_refuses(self, applications):
        applications.return_value.get_application.return_value = make_application()
        applications.return_value.accept.side_effect = BackendError("refused", 400)
        resp = self.client.post('/jobs/5/applications/12/accept')
        self.assertRedirects(resp, '/jobs/5/applications?error=update-failed', fetch_redirect_response=False)

    def test_application_from_other_job(self, applications):
        applications.return_value.get_application.return_value = make_application(job_id=6)
        resp = self.client.post('/jobs/5/applications/12/accept')
        self.assertRedirects(resp, '/jobs/5/applications?error=not-found', fetch_redirect_response=False)

    def test_accept_requires_post(self, applications):
        self.assertEqual(self.client.get('/jobs/5/applications/12/accept').status_code, 405)

    def test_member_cannot_decide(self, applications):
        sign_in(self.client, MEMBER)
        resp = self.client.post('/jobs/5/applications/12/accept')
        self.assertEqual(resp.status_code, 403)
        applications.assert_not_called()

    @mock.patch('jobs.views._jobs')
    def test_detail_shows_decision_forms(self, jobs, applications):
        jobs.return_value.get_job.return_value = make_job()
        applications.return_value.get_application.return_value = make_application()
        resp = self.client.get('/jobs/5/applications/12')
        self.assertContains(resp, '/jobs/5/applications/12/accept')
        self.assertContains(resp, '/jobs/5/applications/12/reject')


@mock.patch('jobs.views._jobs')
class JobAdminTest(SimpleTestCase):
    def setUp(self):
        self.client = Client()
        sign_in(self.client, ADMIN)

    def test_create(self, jobs):
        resp = self.client.post('/jobs/create', {
            'name': 'Data Engineer', 'location': 'Belfast', 'capability': 'Data', 'band': 'Consultant',
            'closing_date': '2099-06-30', 'summary': 'S', 'key_responsibilities': 'K', 'status': 'open',
            'number_of_open_positions': '3',
        })
        self.assertRedirects(resp, '/jobs?success=created', fetch_redirect_response=False)
        payload = jobs.return_value.create_job.call_args[0][0]
        self.assertEqual(payload['name'], 'Data Engineer')

    def test_create_missing_fields(self, jobs):
        resp = self.client.post('/jobs/create', {'name': 'Data Engineer'})
        self.assertRedirects(resp, '/jobs/create?error=missing-fields', fetch_redirect_response=False)
        jobs.return_value.create_job.assert_not_called()

    def test_delete_failure(self, jobs):
        jobs.return_value.delete_job.side_effect = BackendError("boom", 500)
        resp = self.client.post('/jobs/5/delete')
        self.assertRedirects(resp, '/jobs/5?error=delete-failed', fetch_redirect_response=False)


@mock.patch('jobs.views._applications')
class CvDownloadTest(SimpleTestCase):
    def setUp(self):
        self.client = Client()
        sign_in(self.client, ADMIN)

    def test_streams_from_backend(self, applications):
        upstream = mock.Mock()
        upstream.headers = {'Content-Type': 'application/pdf', 'Content-Length': '8'}
        upstream.iter_content.return_value = iter([b'%PDF', b'-1.4'])
        applications.return_value.stream_cv.return_value = upstream

        resp = self.client.get('/uploads/cvs/2025/01/cv.pdf')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(b''.join(resp.streaming_content), b'%PDF-1.4')
        self.assertEqual(resp['Content-Type'], 'application/pdf')
        applications.return_value.stream_cv.assert_called_once_with('/uploads/cvs/2025/01/cv.pdf')
        upstream.close.assert_called_once_with()

    def test_missing_file(self, applications):
        applications.return_value.stream_cv.side_effect = NotFound("gone", 404)
        resp = self.client.get('/uploads/cvs/2025/01/cv.pdf')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.content, b"File not found")

    def test_member_downloads_own_cv(self, applications):
        sign_in(self.client, MEMBER)
        applications.return_value.for_user.return_value = [
            make_application(cv_url='/uploads/cvs/2025/01/cv.pdf')]
        upstream = mock.Mock()
        upstream.headers = {'Content-Type': 'application/pdf'}
        upstream.iter_content.return_value = iter([b'%PDF'])
        applications.return_value.stream_cv.return_value = upstream

        resp = self.client.get('/uploads/cvs/2025/01/cv.pdf')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(b''.join(resp.streaming_content), b'%PDF')
        applications.return_value.for_user.assert_called_once_with(MEMBER.id)

    def test_member_cannot_download_someone_elses_cv(self, applications):
        sign_in(self.client, MEMBER)
        applications.return_value.for_user.return_value = [
            make_application(cv_url='/uploads/cvs/2025/01/mine.pdf')]
        resp = self.client.get('/uploads/cvs/2025/01/theirs.pdf')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.content, b"File not found")
        applications.return_value.stream_cv.assert_not_called()

    def test_member_without_applications(self, applications):
        sign_in(self.client, MEMBER)
        applications.return_value.for_user.side_effect = NotFound("none", 404)
        resp = self.client.get('/uploads/cvs/2025/01/cv.pdf')
        self.assertEqual(resp.status_code, 404)
        applications.return_value.stream_cv.assert_not_called()

    def test_requires_login(self, applications):
        resp = Client().get('/uploads/cvs/2025/01/cv.pdf')
        self.assertEqual(resp.status_code, 302)
