"""Tests for the health endpoint, root endpoint and domain error mapping."""

import unittest
from unittest.mock import patch, MagicMock

from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from api.main import app, VERSION
from api.errors import detail_for, status_for
from domain.model.errors import (
    AccountDisabledError,
    DomainError,
    DuplicateEmailError,
    ForbiddenError,
    InvalidCredentialsError,
    NotAllowedError,
    NotFoundError,
    ProviderError,
    ValidationError,
)


class TestHealth(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    @patch('api.routes.health.get_mongodb_client')
    def test_healthy(self, mock_get_client):
        mock_get_client.return_value = MagicMock()

        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['status'], 'healthy')
        self.assertEqual(data['services']['mongodb']['status'], 'healthy')

    @patch('api.routes.health.get_mongodb_client')
    def test_not_configured(self, mock_get_client):
        mock_get_client.return_value = None

        response = self.client.get("/health")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['status'], 'degraded')

    @patch('api.routes.health.get_mongodb_client')
    def test_ping_failure(self, mock_get_client):
        client = MagicMock()
        client.admin.command.side_effect = ServerSelectionTimeoutError('no servers')
        mock_get_client.return_value = client

        response = self.client.get("/health")

        self.assertEqual(response.status_code, 503)
        self.assertIn('no servers', response.json()['services']['mongodb']['message'])


class TestRoot(unittest.TestCase):

    def test_root(self):
        response = TestClient(app).get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['version'], VERSION)
        self.assertEqual(response.json()['status'], 'running')


class TestErrorMapping(unittest.TestCase):

    def test_status_codes(self):
        cases = [
            (InvalidCredentialsError(), 401),
            (AccountDisabledError(), 403),
            (NotAllowedError('off'), 403),
            (ForbiddenError('no'), 403),
            (NotFoundError('gone'), 404),
            (DuplicateEmailError('a@x.com'), 409),
            (ValidationError('bad'), 400),
            (ProviderError('down'), 503),
            (DomainError('unknown'), 500),
        ]
        for error, expected in cases:
            with self.subTest(error=type(error).__name__):
                self.assertEqual(status_for(error), expected)

    def test_sign_in_failures_are_generic(self):
        self.assertEqual(detail_for(InvalidCredentialsError()), 'Invalid email or password')
        self.assertNotIn('connection refused', detail_for(ProviderError('connection refused to 10.0.0.5')))

    def test_admin_failures_are_specific(self):
        self.assertEqual(detail_for(NotFoundError('User not found')), 'User not found')


if __name__ == '__main__':
    unittest.main()
