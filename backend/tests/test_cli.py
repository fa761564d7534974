"""Tests for the operator CLI."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

import main
from modules.filters import DEFAULT_FILTERS, Filter, FilterStoreError


def make_container(filters=DEFAULT_FILTERS, error=None):
    container = MagicMock()
    container.controller.load = AsyncMock(return_value=filters)
    container.controller.state.error = error
    container.trends.check_and_generate_daily_trend = AsyncMock(return_value=None)
    container.aclose = AsyncMock()
    return container


class TestRenderFilters:
    def test_one_row_per_filter(self):
        table = main.render_filters(DEFAULT_FILTERS)
        assert table.row_count == len(DEFAULT_FILTERS)
        assert len(table.columns) == 6

    def test_created_column(self):
        item = Filter(
            id="f1",
            name="Sepia",
            description="d",
            prompt="p",
            preview_image_url="u",
            created_at=datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc),
        )
        table = main.render_filters([item])
        assert list(table.columns[4].cells) == ["2025-03-14 09:30"]


class TestMain:
    def test_list(self):
        container = make_container()
        with patch("main.ServiceContainer", return_value=container), patch("main.configure_logging"):
            assert main.main(["list"]) == 0
        container.controller.load.assert_awaited_once()
        container.aclose.assert_awaited_once()

    def test_trend_failure_exit_code(self):
        container = make_container()
        container.trends.check_and_generate_daily_trend.side_effect = FilterStoreError(
            "save the filter", "denied"
        )
        with patch("main.ServiceContainer", return_value=container), patch("main.configure_logging"):
            assert main.main(["trend"]) == 1
        container.aclose.assert_awaited_once()

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            main.main(["frobnicate"])
