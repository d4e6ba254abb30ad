"""Tests for the pipe sizing calculator."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from plumbprep.services.ai.ai_agents import PipeSizeRecommendation

PIPE_SIZE_URL = "/api/v1/calculator/pipe-size"
REQUEST = {"fixture_units": 24, "pipe_length": 80, "material": "copper_l"}


@pytest.fixture
def ai_enabled() -> Iterator[None]:
    with patch("plumbprep.dependencies.is_ai_enabled", return_value=True):
        yield


class TestPipeSize:
    def test_ai_disabled_returns_gone(self, client: TestClient) -> None:
        with patch("plumbprep.dependencies.is_ai_enabled", return_value=False):
            response = client.post(PIPE_SIZE_URL, json=REQUEST)

        assert response.status_code == status.HTTP_410_GONE
        assert response.json()["detail"] == "AI features are not enabled on this server"

    def test_returns_recommendation(self, client: TestClient, ai_enabled: None) -> None:
        recommendation = PipeSizeRecommendation(
            recommended_size='1"',
            velocity_check=True,
            pressure_loss=3.2,
            explanation="24 WSFU over 80 feet of Type L copper needs a 1 inch line.",
        )
        with patch(
            "plumbprep.services.calculator_service.get_pipe_size_recommendation",
            new=AsyncMock(return_value=recommendation),
        ) as mock_recommend:
            response = client.post(PIPE_SIZE_URL, json=REQUEST)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["recommended_size"] == '1"'
        assert data["velocity_check"] is True
        assert data["pressure_loss"] == 3.2
        mock_recommend.assert_awaited_once_with(24, 80, "Copper Type L")

    def test_agent_failure_returns_500(self, client: TestClient, ai_enabled: None) -> None:
        with patch(
            "plumbprep.services.calculator_service.get_pipe_size_recommendation",
            new=AsyncMock(side_effect=RuntimeError("model unavailable")),
        ):
            response = client.post(PIPE_SIZE_URL, json=REQUEST)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == "Failed to calculate pipe size. Please try again later."

    @pytest.mark.parametrize(
        "payload",
        [
            {**REQUEST, "fixture_units": 0},
            {**REQUEST, "pipe_length": -5},
            {**REQUEST, "material": "galvanized"},
        ],
    )
    def test_invalid_input_rejected(
        self, client: TestClient, ai_enabled: None, payload: dict
    ) -> None:
        response = client.post(PIPE_SIZE_URL, json=payload)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_requires_authentication(self, anonymous_client: TestClient) -> None:
        response = anonymous_client.post(PIPE_SIZE_URL, json=REQUEST)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
