"""
Unit tests for ClueClient class.
"""
import logging
import unittest
from unittest.mock import patch

import requests

from trivia.clue_client import DEFAULT_API_URL, ClueClient
from trivia.errors import BadStatusError, DecodeError, FetchError, NetworkError
from trivia.models import Clue
from tests.test_fixtures import TestFixtures


class TestClueClientFetch(unittest.TestCase):
    """Test cases for fetching clues over HTTP."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = ClueClient()
        logging.disable(logging.CRITICAL)

    def tearDown(self):
        self.client.close()
        logging.disable(logging.NOTSET)

    def test_fetch_success(self):
        """Test that a 200 response yields every clue in order."""
        payload = TestFixtures.create_valid_clues_json(100)
        response = TestFixtures.create_mock_response(200, payload)

        with patch.object(self.client.session, 'get', return_value=response):
            clues = self.client.fetch()

        self.assertEqual(len(clues), 100)
        self.assertIsInstance(clues[0], Clue)
        self.assertEqual([c.answer for c in clues[:3]], ["answer-0", "answer-1", "answer-2"])

    def test_fetch_sends_accept_header(self):
        """Test that the request asks for JSON at the configured endpoint."""
        response = TestFixtures.create_mock_response(200, TestFixtures.create_valid_clues_json(1))

        with patch.object(self.client.session, 'get', return_value=response) as mock_get:
            self.client.fetch()

        mock_get.assert_called_once()
        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], DEFAULT_API_URL)
        self.assertEqual(kwargs['headers'], {'Accept': 'application/json'})
        self.assertEqual(kwargs['timeout'], 10)

    def test_fetch_bad_status(self):
        """Test that non-200 responses raise BadStatusError with the status."""
        for status in (201, 404, 500, 503):
            response = TestFixtures.create_mock_response(status, {})
            with patch.object(self.client.session, 'get', return_value=response):
                with self.assertRaises(BadStatusError) as context:
                    self.client.fetch()

            self.assertEqual(context.exception.status_code, status)
            self.assertEqual(str(context.exception),
                             f"Error: bad response code of {status} received.")

    def test_fetch_does_not_retry(self):
        """Test that a failing request is attempted exactly once."""
        response = TestFixtures.create_mock_response(500, {})

        with patch.object(self.client.session, 'get', return_value=response) as mock_get:
            with self.assertRaises(BadStatusError):
                self.client.fetch()

        self.assertEqual(mock_get.call_count, 1)

    def test_fetch_network_error(self):
        """Test that transport failures raise NetworkError."""
        failures = [
            requests.ConnectionError("connection refused"),
            requests.Timeout("timed out"),
        ]
        for failure in failures:
            with patch.object(self.client.session, 'get', side_effect=failure):
                with self.assertRaises(NetworkError) as context:
                    self.client.fetch()

            self.assertIs(context.exception.__cause__, failure)

    def test_fetch_invalid_json(self):
        """Test that an undecodable body raises DecodeError."""
        response = TestFixtures.create_mock_response(200, body="{ invalid json }")

        with patch.object(self.client.session, 'get', return_value=response):
            with self.assertRaises(DecodeError):
                self.client.fetch()

    def test_fetch_invalid_structure(self):
        """Test that a JSON body without clues raises DecodeError."""
        response = TestFixtures.create_mock_response(200, {"questions": []})

        with patch.object(self.client.session, 'get', return_value=response):
            with self.assertRaises(DecodeError):
                self.client.fetch()

    def test_fetch_rejects_non_object_category(self):
        """Test that a clue whose category is not an object raises DecodeError."""
        payload = TestFixtures.create_valid_clues_json(3)
        payload["clues"][1]["category"] = "Science"
        response = TestFixtures.create_mock_response(200, payload)

        with patch.object(self.client.session, 'get', return_value=response):
            with self.assertRaises(DecodeError):
                self.client.fetch()

    def test_fetch_out_of_range_value_becomes_zero(self):
        """Test that a dollar value int() cannot convert is read as 0."""
        payload = TestFixtures.create_valid_clues_json(2)
        payload["clues"][0]["value"] = float("inf")
        response = TestFixtures.create_mock_response(200, payload)

        with patch.object(self.client.session, 'get', return_value=response):
            clues = self.client.fetch()

        self.assertEqual(clues[0].value, 0)
        self.assertEqual(clues[1].value, 200)

    def test_all_fetch_errors_share_base(self):
        for error_cls in (NetworkError, BadStatusError, DecodeError):
            self.assertTrue(issubclass(error_cls, FetchError))

    def test_custom_url_and_timeout(self):
        """Test that configured endpoint and timeout are used."""
        client = ClueClient("http://localhost:8000/api/clues", timeout=3)
        response = TestFixtures.create_mock_response(200, TestFixtures.create_valid_clues_json(1))

        with patch.object(client.session, 'get', return_value=response) as mock_get:
            client.fetch()
        client.close()

        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], "http://localhost:8000/api/clues")
        self.assertEqual(kwargs['timeout'], 3)


class TestClueClientValidation(unittest.TestCase):
    """Test cases for payload validation and parsing."""

    def setUp(self):
        self.client = ClueClient()

    def tearDown(self):
        self.client.close()

    def test_validate_payload_valid_data(self):
        """Test validation with a valid payload."""
        self.client.validate_payload(TestFixtures.create_valid_clues_json(5))

    def test_validate_payload_invalid_structures(self):
        """Test that every malformed payload is rejected."""
        for data in TestFixtures.create_invalid_clues_json_structures():
            with self.subTest(data=data):
                with self.assertRaises(DecodeError):
                    self.client.validate_payload(data)

    def test_parse_clues_does_not_enforce_batch_size(self):
        """Test that batches other than 100 clues are accepted."""
        clues = self.client.parse_clues(TestFixtures.create_valid_clues_json(7))

        self.assertEqual(len(clues), 7)


if __name__ == '__main__':
    unittest.main()
