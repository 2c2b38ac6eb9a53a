"""
HTTP client for the clues API.
Fetches one batch of clues and validates it into Clue records.
"""
import logging
from typing import Any, List

import requests

from .errors import BadStatusError, DecodeError, NetworkError
from .models import Clue


DEFAULT_API_URL = "https://jservice.kenzie.academy/api/clues"


class ClueClient:
    """Fetches batches of clues from the clues API."""

    def __init__(self, api_url: str = DEFAULT_API_URL, timeout: int = 10):
        """
        Initialize the client.

        Args:
            api_url: Endpoint returning a ``{"clues": [...]}`` document
            timeout: Request timeout in seconds
        """
        self.api_url = api_url
        self.timeout = timeout
        self.session = requests.Session()
        self.logger = logging.getLogger(__name__)

    def fetch(self) -> List[Clue]:
        """
        Issue a single GET to the clues endpoint and return its clues.

        Returns:
            List of Clue objects, in the order the API returned them

        Raises:
            NetworkError: If the request failed before a response arrived
            BadStatusError: If the response status is not 200
            DecodeError: If the body is not a valid clues payload
        """
        self.logger.info(f"Fetching clues from {self.api_url}")
        try:
            response = self.session.get(
                self.api_url,
                headers={'Accept': 'application/json'},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            self.logger.error(f"Error fetching clues: {e}")
            raise NetworkError(f"Could not reach the clues service: {e}") from e

        if response.status_code != 200:
            self.logger.error(f"Clues API returned status {response.status_code}")
            raise BadStatusError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            # requests raises a ValueError subclass for undecodable bodies
            self.logger.error(f"Invalid JSON in clues response: {e}")
            raise DecodeError(f"Invalid JSON in clues response: {e}") from e

        clues = self.parse_clues(data)
        self.logger.info(f"Fetched {len(clues)} clues")
        return clues

    def parse_clues(self, data: Any) -> List[Clue]:
        """
        Validate a decoded payload and build Clue objects from it.

        Raises:
            DecodeError: If the payload structure is invalid
        """
        self.validate_payload(data)
        return [Clue.from_dict(entry) for entry in data["clues"]]

    def validate_payload(self, data: Any) -> None:
        """
        Validate that decoded JSON has the clues structure.

        Expected structure:
        {
            "clues": [
                {
                    "answer": str,
                    "question": str,
                    ...
                }
            ]
        }

        Raises:
            DecodeError: Describing the first problem found
        """
        if not isinstance(data, dict):
            raise DecodeError("Clues response must be a JSON object")

        if "clues" not in data:
            raise DecodeError("Clues response must contain a 'clues' key")

        clues = data["clues"]
        if not isinstance(clues, list):
            raise DecodeError("'clues' value must be an array")

        if not clues:
            raise DecodeError("Clues response contained no clues")

        for i, entry in enumerate(clues):
            if not isinstance(entry, dict):
                raise DecodeError(f"Clue {i} must be an object")

            if not isinstance(entry.get("answer"), str):
                raise DecodeError(f"Clue {i} 'answer' field must be a string")

            if not isinstance(entry.get("question"), str):
                raise DecodeError(f"Clue {i} 'question' field must be a string")

            for nested in ("category", "game"):
                value = entry.get(nested)
                if value is not None and not isinstance(value, dict):
                    raise DecodeError(f"Clue {i} '{nested}' field must be an object")

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()
