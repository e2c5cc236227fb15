"""Unit tests for runtime settings."""

import os
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from boardsync.config import (
    DEFAULT_GRAPHQL_URL,
    DEFAULT_OWNER,
    DEFAULT_REPO,
    DEFAULT_STATUS_FIELD_KEYWORDS,
    Settings,
    get_github_token,
)


@pytest.mark.unit
class TestGetGithubToken:
    """Tests for get_github_token."""

    @patch.dict(os.environ, {"GITHUB_TOKEN": "env-token"})
    def test_prefers_environment(self) -> None:
        with patch("boardsync.config.subprocess.run") as run:
            assert get_github_token() == "env-token"
            run.assert_not_called()

    @patch.dict(os.environ, {"GITHUB_TOKEN": ""})
    def test_falls_back_to_gh_cli(self) -> None:
        result = MagicMock(stdout="cli-token\n")
        with patch("boardsync.config.subprocess.run", return_value=result) as run:
            assert get_github_token() == "cli-token"
            assert run.call_args.args[0] == ["gh", "auth", "token"]

    @patch.dict(os.environ, {"GITHUB_TOKEN": ""})
    def test_empty_when_gh_missing(self) -> None:
        with patch("boardsync.config.subprocess.run", side_effect=FileNotFoundError):
            assert get_github_token() == ""

    @patch.dict(os.environ, {"GITHUB_TOKEN": ""})
    def test_empty_when_gh_not_logged_in(self) -> None:
        error = subprocess.CalledProcessError(1, ["gh", "auth", "token"])
        with patch("boardsync.config.subprocess.run", side_effect=error):
            assert get_github_token() == ""


@pytest.mark.unit
class TestSettingsFromEnv:
    """Tests for Settings.from_env."""

    @patch.dict(
        os.environ,
        {
            "GITHUB_TOKEN": "t",
            "GITHUB_OWNER": "",
            "GITHUB_REPO": "",
            "GITHUB_GRAPHQL_URL": "",
            "BOARDSYNC_API_TOKENS": "",
            "BOARDSYNC_STATUS_FIELD_KEYWORDS": "",
            "BOARDSYNC_NOTICE_SECONDS": "",
            "BOARDSYNC_ERROR_NOTICE_SECONDS": "",
        },
    )
    def test_defaults(self) -> None:
        settings = Settings.from_env()

        assert settings.github_token == "t"
        assert settings.owner == DEFAULT_OWNER
        assert settings.repo == DEFAULT_REPO
        assert settings.graphql_url == DEFAULT_GRAPHQL_URL
        assert settings.api_tokens == ()
        assert settings.status_field_keywords == DEFAULT_STATUS_FIELD_KEYWORDS
        assert settings.notice_seconds == 3.0
        assert settings.error_notice_seconds == 5.0

    @patch.dict(
        os.environ,
        {
            "GITHUB_TOKEN": "t",
            "GITHUB_OWNER": "acme",
            "GITHUB_REPO": "widgets",
            "BOARDSYNC_API_TOKENS": "alpha, beta,,",
            "BOARDSYNC_STATUS_FIELD_KEYWORDS": "lane,phase",
            "BOARDSYNC_STATUS_VALUE_KEYWORDS": "shipped",
            "BOARDSYNC_NOTICE_SECONDS": "0.5",
            "BOARDSYNC_ERROR_NOTICE_SECONDS": "1.5",
        },
    )
    def test_overrides(self) -> None:
        settings = Settings.from_env()

        assert settings.owner == "acme"
        assert settings.repo == "widgets"
        assert settings.api_tokens == ("alpha", "beta")
        assert settings.status_field_keywords == ("lane", "phase")
        assert settings.status_value_keywords == ("shipped",)
        assert settings.notice_seconds == 0.5
        assert settings.error_notice_seconds == 1.5
