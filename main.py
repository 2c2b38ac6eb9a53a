#!/usr/bin/env python3
"""
Trivia Game - Main Entry Point

This script opens the trivia window. Settings are read from config.json
when it exists; otherwise the built-in defaults are used.

Usage:
    python main.py

Configuration (config.json, every key optional):
    api.url                 Clues endpoint
    api.request_timeout     HTTP timeout in seconds
    game.question_count     Questions per game
    game.timer_duration     Seconds per question
    game.urgency_threshold  Seconds left when the timer turns red
    logging.level           Log level name
    logging.log_directory   Directory for trivia.log
"""

import sys
import json
import logging
from pathlib import Path


def load_config(config_path: Path = Path("config.json")) -> dict:
    """Load configuration from config.json file."""
    if not config_path.exists():
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        print(f"❌ Error: Invalid JSON in {config_path}: {e}")
        sys.exit(1)
    except OSError as e:
        print(f"❌ Error loading {config_path}: {e}")
        sys.exit(1)

    if not isinstance(config, dict):
        print(f"❌ Error: {config_path} must contain a JSON object")
        sys.exit(1)
    return config


def setup_logging_from_config(config: dict) -> None:
    """Set up logging based on configuration."""
    log_config = config.get('logging', {})
    log_level = getattr(logging, str(log_config.get('level', 'INFO')).upper(), logging.INFO)
    log_directory = Path(log_config.get('log_directory', './logs/'))

    # Create logs directory
    log_directory.mkdir(parents=True, exist_ok=True)

    # Configure logging
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_directory / "trivia.log", encoding='utf-8')
        ]
    )

    # Reduce HTTP client noise
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def run_game_with_config() -> None:
    """Build the game components from configuration and open the window."""
    config = load_config()
    setup_logging_from_config(config)
    logger = logging.getLogger(__name__)

    from trivia.clue_client import ClueClient
    from trivia.config_manager import ConfigManager
    from trivia.game_session import GameSession
    from trivia.game_window import run

    config_manager = ConfigManager()
    for error in config_manager.apply_config(config):
        logger.warning(f"Using default for invalid setting: {error}")
    logger.info(config_manager.get_settings_summary())

    client = ClueClient(config_manager.get_api_url(), config_manager.get_request_timeout())
    try:
        session = GameSession(client, config_manager.get_game_settings())
        run(session)
    finally:
        client.close()


if __name__ == "__main__":
    try:
        print("🎲 Starting Trivia...")
        run_game_with_config()
    except KeyboardInterrupt:
        print("\n👋 Game closed by user")
    except Exception as e:
        print(f"❌ Failed to run game: {e}")
        sys.exit(1)
