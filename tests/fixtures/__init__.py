"""Test fixtures and mocks."""

from tests.fixtures.mocks import (
    FakeIndex,
    MockClaudeService,
    StubVerifier,
    create_mock_with_error,
    fixed_score_index,
    verified,
)

__all__ = [
    "FakeIndex",
    "MockClaudeService",
    "StubVerifier",
    "create_mock_with_error",
    "fixed_score_index",
    "verified",
]
