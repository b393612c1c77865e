"""Pytest fixtures for dofactory tests"""

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv
from loguru import logger

from dofactory import DIContainer

# =============================================================================
# Global Test Setup
# =============================================================================

# Add src to Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Load environment variables from .env file for all tests
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


@pytest.fixture
def container() -> DIContainer:
    """Empty DI container"""
    return DIContainer()


@pytest.fixture
def log_messages():
    """Capture dofactory log records as plain messages"""
    messages: list[str] = []
    logger.enable("dofactory")
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)
    logger.disable("dofactory")
