"""
Configuration manager for trivia game settings and parameters.
"""
import logging
from typing import Any, Dict, List
from urllib.parse import urlparse

from .clue_client import DEFAULT_API_URL
from .models import GameSettings


class ConfigManager:
    """Manages game configuration settings."""

    # Default configuration values
    DEFAULT_API_URL = DEFAULT_API_URL
    DEFAULT_QUESTION_COUNT = 10
    DEFAULT_TIMER_DURATION = 45
    DEFAULT_URGENCY_THRESHOLD = 10
    DEFAULT_REQUEST_TIMEOUT = 10

    # Validation limits
    MIN_QUESTION_COUNT = 1
    MAX_QUESTION_COUNT = 100  # One batch holds 100 clues
    MIN_TIMER_DURATION = 5
    MAX_TIMER_DURATION = 300  # 5 minutes
    MIN_REQUEST_TIMEOUT = 1
    MAX_REQUEST_TIMEOUT = 120

    def __init__(self):
        """Initialize ConfigManager with default settings."""
        self.logger = logging.getLogger(__name__)
        self._settings = GameSettings(
            question_count=self.DEFAULT_QUESTION_COUNT,
            timer_duration=self.DEFAULT_TIMER_DURATION,
            urgency_threshold=self.DEFAULT_URGENCY_THRESHOLD
        )
        self._api_url = self.DEFAULT_API_URL
        self._request_timeout = self.DEFAULT_REQUEST_TIMEOUT

    def get_game_settings(self) -> GameSettings:
        """
        Get current game settings.

        Returns:
            GameSettings object with current configuration
        """
        return GameSettings(
            question_count=self._settings.question_count,
            timer_duration=self._settings.timer_duration,
            urgency_threshold=self._settings.urgency_threshold
        )

    def _validate_int(self, value: Any, name: str, minimum: int, maximum: int,
                      unit: str = "") -> Dict[str, Any]:
        """Shared type and range check for integer settings."""
        suffix = f" {unit}" if unit else ""

        # bool is an int subclass but never a sensible setting value
        if not isinstance(value, int) or isinstance(value, bool):
            error_msg = f"{name.capitalize()} must be an integer, got {type(value).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a number, got {type(value).__name__}"
            }

        if value < minimum:
            error_msg = f"{name.capitalize()} must be at least {minimum}{suffix}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ {name.capitalize()} too small: Minimum is {minimum}{suffix}"
            }

        if value > maximum:
            error_msg = f"{name.capitalize()} cannot exceed {maximum}{suffix}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ {name.capitalize()} too large: Maximum is {maximum}{suffix}"
            }

        return {'success': True}

    def set_question_count(self, count: int) -> Dict[str, Any]:
        """
        Set the number of questions played per game.

        Args:
            count: Number of questions

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        result = self._validate_int(count, "question count",
                                    self.MIN_QUESTION_COUNT, self.MAX_QUESTION_COUNT)
        if not result['success']:
            return result

        self._settings.question_count = count
        self.logger.info(f"Question count set to {count}")
        return {
            'success': True,
            'message': f"Question count set to {count}",
            'user_message': f"✅ Question count set to {count}"
        }

    def get_question_count(self) -> int:
        return self._settings.question_count

    def set_timer_duration(self, duration: int) -> Dict[str, Any]:
        """
        Set the countdown length for each question.

        Args:
            duration: Timer duration in seconds

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        result = self._validate_int(duration, "timer duration",
                                    self.MIN_TIMER_DURATION, self.MAX_TIMER_DURATION, "seconds")
        if not result['success']:
            return result

        self._settings.timer_duration = duration
        if self._settings.urgency_threshold > duration:
            self._settings.urgency_threshold = duration
            self.logger.warning(f"Urgency threshold lowered to {duration} seconds to fit the timer")

        self.logger.info(f"Timer duration set to {duration} seconds")
        return {
            'success': True,
            'message': f"Timer duration set to {duration} seconds",
            'user_message': f"✅ Timer set to {duration} seconds"
        }

    def get_timer_duration(self) -> int:
        return self._settings.timer_duration

    def set_urgency_threshold(self, threshold: int) -> Dict[str, Any]:
        """
        Set the remaining time at which the countdown turns red.

        Args:
            threshold: Seconds left, no more than the timer duration

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        result = self._validate_int(threshold, "urgency threshold",
                                    0, self._settings.timer_duration, "seconds")
        if not result['success']:
            return result

        self._settings.urgency_threshold = threshold
        self.logger.info(f"Urgency threshold set to {threshold} seconds")
        return {
            'success': True,
            'message': f"Urgency threshold set to {threshold} seconds",
            'user_message': f"✅ Timer turns red at {threshold} seconds"
        }

    def get_urgency_threshold(self) -> int:
        return self._settings.urgency_threshold

    def set_request_timeout(self, timeout: int) -> Dict[str, Any]:
        """
        Set the HTTP timeout used when fetching clues.

        Args:
            timeout: Timeout in seconds

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        result = self._validate_int(timeout, "request timeout",
                                    self.MIN_REQUEST_TIMEOUT, self.MAX_REQUEST_TIMEOUT, "seconds")
        if not result['success']:
            return result

        self._request_timeout = timeout
        self.logger.info(f"Request timeout set to {timeout} seconds")
        return {
            'success': True,
            'message': f"Request timeout set to {timeout} seconds",
            'user_message': f"✅ Request timeout set to {timeout} seconds"
        }

    def get_request_timeout(self) -> int:
        return self._request_timeout

    def set_api_url(self, url: str) -> Dict[str, Any]:
        """
        Set the clues endpoint with validation.

        Args:
            url: Absolute http or https URL

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not isinstance(url, str):
            error_msg = f"API URL must be a string, got {type(url).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid input: Expected a URL string, got {type(url).__name__}"
            }

        if not url.strip():
            error_msg = "API URL cannot be empty"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': "❌ API URL cannot be empty"
            }

        parsed = urlparse(url.strip())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            error_msg = f"API URL must be an absolute http(s) URL: {url}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"❌ Invalid URL: {url}"
            }

        self._api_url = url.strip()
        self.logger.info(f"API URL set to {self._api_url}")
        return {
            'success': True,
            'message': f"API URL set to {self._api_url}",
            'user_message': f"✅ Clues will be fetched from {self._api_url}"
        }

    def get_api_url(self) -> str:
        return self._api_url

    def apply_config(self, config: Dict[str, Any]) -> List[str]:
        """
        Apply settings from a parsed config.json document.

        Invalid values are skipped and the current value is kept.

        Returns:
            List of error messages for the values that were rejected
        """
        errors = []
        sections = {}
        for name in ('api', 'game'):
            section = config.get(name) or {}
            if not isinstance(section, dict):
                error_msg = f"Config section '{name}' must be an object, got {type(section).__name__}"
                self.logger.warning(error_msg)
                errors.append(error_msg)
                section = {}
            sections[name] = section
        api_config = sections['api']
        game_config = sections['game']

        setters = [
            (api_config, 'url', self.set_api_url),
            (api_config, 'request_timeout', self.set_request_timeout),
            (game_config, 'question_count', self.set_question_count),
            (game_config, 'timer_duration', self.set_timer_duration),
            (game_config, 'urgency_threshold', self.set_urgency_threshold),
        ]

        for section, key, setter in setters:
            if key not in section:
                continue
            result = setter(section[key])
            if not result['success']:
                errors.append(result['error'])

        if errors:
            self.logger.warning(f"Ignored {len(errors)} invalid configuration values")
        else:
            self.logger.info("Configuration applied successfully")
        return errors

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values."""
        self._settings = GameSettings(
            question_count=self.DEFAULT_QUESTION_COUNT,
            timer_duration=self.DEFAULT_TIMER_DURATION,
            urgency_threshold=self.DEFAULT_URGENCY_THRESHOLD
        )
        self._api_url = self.DEFAULT_API_URL
        self._request_timeout = self.DEFAULT_REQUEST_TIMEOUT
        self.logger.info("All settings reset to default values")

    def validate_settings(self) -> Dict[str, Any]:
        """
        Validate current settings and return validation results.

        Returns:
            Dictionary with validation results and any issues found
        """
        validation_result = {
            "valid": True,
            "issues": []
        }

        settings = self._settings
        if not (self.MIN_QUESTION_COUNT <= settings.question_count <= self.MAX_QUESTION_COUNT):
            validation_result["valid"] = False
            validation_result["issues"].append(
                f"Invalid question count: {settings.question_count}"
            )

        if not (self.MIN_TIMER_DURATION <= settings.timer_duration <= self.MAX_TIMER_DURATION):
            validation_result["valid"] = False
            validation_result["issues"].append(
                f"Invalid timer duration: {settings.timer_duration}"
            )

        if not (0 <= settings.urgency_threshold <= settings.timer_duration):
            validation_result["valid"] = False
            validation_result["issues"].append(
                f"Invalid urgency threshold: {settings.urgency_threshold}"
            )

        if not (self.MIN_REQUEST_TIMEOUT <= self._request_timeout <= self.MAX_REQUEST_TIMEOUT):
            validation_result["valid"] = False
            validation_result["issues"].append(
                f"Invalid request timeout: {self._request_timeout}"
            )

        return validation_result

    def get_settings_summary(self) -> str:
        """
        Get a formatted summary of current settings.

        Returns:
            Human-readable string describing current settings
        """
        return (
            f"Game Settings:\n"
            f"• Questions: {self._settings.question_count}\n"
            f"• Timer: {self._settings.timer_duration} seconds\n"
            f"• Urgent at: {self._settings.urgency_threshold} seconds\n"
            f"• Clues API: {self._api_url} (timeout {self._request_timeout}s)"
        )
