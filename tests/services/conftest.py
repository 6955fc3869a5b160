from datetime import datetime, timezone

import pytest

from app.services import BlockCreator, BlockReclaimer, InterviewClassifier


@pytest.fixture
def classifier(config):
    return InterviewClassifier(config)


@pytest.fixture
def block_creator(gateway, config):
    """Create BlockCreator bound to the in-memory calendar."""
    return BlockCreator(gateway, config)


@pytest.fixture
def block_reclaimer(gateway, config):
    """Create BlockReclaimer bound to the in-memory calendar."""
    return BlockReclaimer(gateway, config)


@pytest.fixture
def sample_interview_data():
    """Sample interview event data for testing."""
    return {
        "title": "Team Screen w/ Jane",
        "description": "Scorecard: https://app.greenhouse.io/guides/abc123",
        "start": datetime(2026, 10, 18, 13, 0, tzinfo=timezone.utc),
        "minutes": 60,
    }
