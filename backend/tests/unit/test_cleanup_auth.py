"""Unit tests for cleanup trigger authorization."""

import pytest

from checkout_api.cleanup.auth import has_valid_cron_secret, is_authorized_trigger, is_cron_invocation
from checkout_api.config import Settings


class TestCronInvocation:

    def test_marker_header(self, settings):
        assert is_cron_invocation({"x-vercel-cron": "1"}, settings)
        assert not is_cron_invocation({"x-vercel-cron": "0"}, settings)
        assert not is_cron_invocation({}, settings)

    def test_custom_marker_header(self, settings):
        settings.CRON_MARKER_HEADER = "x-cloudscheduler"

        assert is_cron_invocation({"x-cloudscheduler": "1"}, settings)
        assert not is_cron_invocation({"x-vercel-cron": "1"}, settings)


class TestCronSecret:

    def test_matching_bearer_token(self, settings):
        assert has_valid_cron_secret({"authorization": "Bearer test-cron-secret"}, settings)

    @pytest.mark.parametrize("authorization", [
        "",
        "Bearer",
        "Bearer ",
        "Bearer wrong-secret",
        "test-cron-secret",
        "Basic test-cron-secret",
        "bearer test-cron-secret",
    ])
    def test_rejected_tokens(self, settings, authorization):
        assert not has_valid_cron_secret({"authorization": authorization}, settings)

    def test_no_secret_configured_rejects_everything(self):
        settings = Settings(_env_file=None, CRON_SECRET=None)

        assert not has_valid_cron_secret({"authorization": "Bearer "}, settings)
        assert not has_valid_cron_secret({"authorization": "Bearer None"}, settings)

    def test_either_credential_authorizes(self, settings):
        assert is_authorized_trigger({"x-vercel-cron": "1"}, settings)
        assert is_authorized_trigger({"authorization": "Bearer test-cron-secret"}, settings)
        assert not is_authorized_trigger({}, settings)
