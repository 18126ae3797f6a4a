# portal/tests.py
from unittest import mock

import requests
from django.test import RequestFactory, SimpleTestCase

from .backend import BackendClient, BackendError, BackendUnavailable, Conflict, NotFound, unwrap
from .feedback import (
    DEFAULT_ERROR_MESSAGE, DEFAULT_SUCCESS_MESSAGE, ERROR_MESSAGES, SUCCESS_MESSAGES, feedback_context,
    get_error_display, get_success_display,
)


def fake_response(status_code=200, payload=None, content=b'{}'):
    response = mock.Mock()
    response.status_code = status_code
    response.content = content
    if payload is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


class FeedbackTest(SimpleTestCase):
    def test_every_known_code_is_shown(self):
        for code, (message, severity) in ERROR_MESSAGES.items():
            display = get_error_display(code)
            self.assertTrue(display['show'])
            self.assertEqual((display['message'], display['severity']), (message, severity))
        for code, message in SUCCESS_MESSAGES.items():
            self.assertEqual(get_success_display(code)['message'], message)

    def test_unknown_codes_fall_back(self):
        self.assertEqual(get_error_display('foo')['message'], DEFAULT_ERROR_MESSAGE)
        self.assertEqual(get_success_display('bar')['message'], DEFAULT_SUCCESS_MESSAGE)

    def test_empty_codes_hide_banner(self):
        for code in (None, '', 42):
            self.assertFalse(get_error_display(code)['show'])
            self.assertFalse(get_success_display(code)['show'])

    def test_severity_styling(self):
        warning = get_error_display('already-applied')
        self.assertEqual(warning['severity'], 'warning')
        self.assertEqual(warning['icon_class'], 'alert-triangle')
        self.assertIn('yellow', warning['container_class'])

    def test_feedback_context(self):
        request = RequestFactory().get('/jobs?error=not-found&success=deleted')
        context = feedback_context(request)
        self.assertTrue(context['error_display']['show'])
        self.assertEqual(context['success_display']['message'], "Deleted successfully!")


class UnwrapTest(SimpleTestCase):
    def test_shapes(self):
        jobs = [{'id': 1}]
        self.assertIs(unwrap(jobs, 'jobs'), jobs)
        self.assertIs(unwrap({'jobs': jobs}, 'jobs'), jobs)
        self.assertIs(unwrap({'data': jobs}, 'jobs'), jobs)
        self.assertEqual(unwrap({'id': 1}, 'job'), {'id': 1})
        self.assertIsNone(unwrap(None, 'job'))


class BackendClientTest(SimpleTestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.client = BackendClient(base_url='http://api.test/', timeout=3, session=self.session)

    def test_get_json(self):
        self.session.request.return_value = fake_response(payload={'id': 1})
        self.assertEqual(self.client.get('/api/jobs/1'), {'id': 1})
        self.session.request.assert_called_once_with('GET', 'http://api.test/api/jobs/1', timeout=3)

    def test_no_content(self):
        self.session.request.return_value = fake_response(status_code=204, content=b'')
        self.assertIsNone(self.client.delete('/api/jobs/1'))

    def test_status_codes_map_to_errors(self):
        cases = ((404, NotFound), (409, Conflict), (500, BackendError), (401, BackendError))
        for status, exc_class in cases:
            self.session.request.return_value = fake_response(status_code=status, payload={'error': 'nope'})
            with self.assertRaises(exc_class) as caught:
                self.client.get('/api/jobs/1')
            self.assertEqual(caught.exception.status_code, status)
            self.assertEqual(str(caught.exception), 'nope')

    def test_transport_errors(self):
        for error in (requests.exceptions.Timeout(), requests.exceptions.ConnectionError()):
            self.session.request.side_effect = error
            with self.assertRaises(BackendUnavailable) as caught:
                self.client.get('/api/jobs')
            self.assertIsNone(caught.exception.status_code)

    def test_stream(self):
        response = fake_response(payload={})
        self.session.request.return_value = response
        self.assertIs(self.client.stream('/uploads/cvs/2025/1/cv.pdf'), response)
        self.session.request.assert_called_once_with(
            'GET', 'http://api.test/uploads/cvs/2025/1/cv.pdf', stream=True, timeout=3)


class ErrorPagesTest(SimpleTestCase):
    def test_unknown_route_renders_error_page(self):
        resp = self.client.get('/no/such/page')
        self.assertEqual(resp.status_code, 404)
        self.assertTemplateUsed(resp, 'error.html')
        self.assertEqual(resp.context['status_code'], 404)
