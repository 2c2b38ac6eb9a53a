"""
Integration tests wiring the clue client, configuration and game session together.
"""
import json
import logging
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import main
from trivia.clue_client import ClueClient
from trivia.config_manager import ConfigManager
from trivia.errors import BadStatusError
from trivia.game_session import GameSession
from trivia.models import Outcome, SessionState
from tests.test_fixtures import TestFixtures


class TestGameFlowIntegration(unittest.TestCase):
    """End-to-end games against a mocked HTTP session."""

    def setUp(self):
        """Set up test fixtures."""
        logging.disable(logging.CRITICAL)
        self.config_manager = ConfigManager()
        self.client = ClueClient(self.config_manager.get_api_url(),
                                 self.config_manager.get_request_timeout())
        self.session = GameSession(self.client, self.config_manager.get_game_settings())

    def tearDown(self):
        self.client.close()
        logging.disable(logging.NOTSET)

    def test_complete_game(self):
        """Test a full game: fetch, answer some, skip some, finish."""
        response = TestFixtures.create_mock_response(200, TestFixtures.create_valid_clues_json(100))

        with patch.object(self.client.session, 'get', return_value=response) as mock_get:
            self.session.start()

        mock_get.assert_called_once()
        self.assertEqual(self.session.total_questions, 10)

        expected_score = 0
        while self.session.state != SessionState.FINISHED:
            if self.session.cursor % 2 == 0:
                answer = self.session.current_clue.answer.upper()
                self.assertEqual(self.session.submit(f"who is {answer}"), Outcome.CORRECT)
                expected_score += 1
            else:
                for _ in range(45):
                    self.session.tick()
                self.assertEqual(self.session.last_outcome, Outcome.TIMEOUT)
            self.session.advance()

        self.assertEqual(self.session.score, expected_score)
        self.assertEqual(self.session.render_state().summary, "You scored 5 out of 10!")

    def test_server_error_then_successful_retry(self):
        """Test that a failed start can be retried from IDLE."""
        bad = TestFixtures.create_mock_response(500, {})
        good = TestFixtures.create_mock_response(200, TestFixtures.create_valid_clues_json(100))

        with patch.object(self.client.session, 'get', side_effect=[bad, good]):
            with self.assertRaises(BadStatusError):
                self.session.start()
            self.assertEqual(self.session.state, SessionState.IDLE)

            self.session.start()

        self.assertEqual(self.session.state, SessionState.AWAITING_ANSWER)

    def test_configured_game_length(self):
        self.config_manager.apply_config({"game": {"question_count": 3, "timer_duration": 20}})
        session = GameSession(self.client, self.config_manager.get_game_settings())
        response = TestFixtures.create_mock_response(200, TestFixtures.create_valid_clues_json(100))

        with patch.object(self.client.session, 'get', return_value=response):
            session.start()

        self.assertEqual(session.total_questions, 3)
        self.assertEqual(session.seconds_left, 20)


class TestEntryPointConfiguration(unittest.TestCase):
    """Test cases for config.json loading and logging setup in main.py."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            if isinstance(handler, logging.FileHandler):
                handler.close()
                root.removeHandler(handler)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_load_config_missing_file_uses_defaults(self):
        self.assertEqual(main.load_config(Path(self.temp_dir) / "config.json"), {})

    def test_load_config_valid_file(self):
        path = Path(self.temp_dir) / "config.json"
        path.write_text(json.dumps({"game": {"question_count": 5}}), encoding='utf-8')

        self.assertEqual(main.load_config(path), {"game": {"question_count": 5}})

    def test_load_config_invalid_json_exits(self):
        path = Path(self.temp_dir) / "config.json"
        path.write_text("{ invalid json }", encoding='utf-8')

        with patch('builtins.print'):
            with self.assertRaises(SystemExit) as context:
                main.load_config(path)
        self.assertEqual(context.exception.code, 1)

    def test_load_config_non_object_exits(self):
        path = Path(self.temp_dir) / "config.json"
        path.write_text("[1, 2, 3]", encoding='utf-8')

        with patch('builtins.print'):
            with self.assertRaises(SystemExit):
                main.load_config(path)

    def test_setup_logging_creates_log_directory(self):
        log_dir = Path(self.temp_dir) / "logs"

        with patch('logging.basicConfig') as mock_basic_config:
            main.setup_logging_from_config({"logging": {"level": "debug", "log_directory": str(log_dir)}})

        self.assertTrue(log_dir.exists())
        kwargs = mock_basic_config.call_args.kwargs
        self.assertEqual(kwargs['level'], logging.DEBUG)
        for handler in kwargs['handlers']:
            handler.close()

    def test_project_config_file_is_valid(self):
        """Test that the shipped config.json applies without errors."""
        config = main.load_config(Path(__file__).resolve().parent.parent / "config.json")
        logging.disable(logging.CRITICAL)
        try:
            self.assertEqual(ConfigManager().apply_config(config), [])
        finally:
            logging.disable(logging.NOTSET)


if __name__ == '__main__':
    unittest.main()
