"""
Integration tests for the scheduled and on-demand key sweep.
"""
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command

from keys.infrastructure.models import Key
from keys.tasks import sweep_expired_keys_task


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestKeySweep:
    """Integration tests for the janitor entry points."""

    def test_task_marks_expired_keys(self, make_key):
        """Test the Celery sweep task."""
        expired = make_key(expires_in=timedelta(minutes=-1))
        valid = make_key()

        result = sweep_expired_keys_task.apply()

        assert result.get() == 1
        assert Key.objects.get(id=expired.id).status == "expired"
        assert Key.objects.get(id=valid.id).status == "active"

    def test_beat_schedule(self, settings):
        """Test that the sweep is scheduled on the configured interval."""
        entry = settings.CELERY_BEAT_SCHEDULE["sweep-expired-keys"]
        assert entry["task"] == "keys.tasks.sweep_expired_keys_task"
        assert entry["schedule"] == float(settings.KEY_SWEEP_INTERVAL_SECONDS)

    def test_command(self, make_key):
        """Test the management command."""
        expired = make_key(expires_in=timedelta(minutes=-1))
        out = StringIO()

        call_command("sweep_expired_keys", stdout=out)

        assert "Successfully marked 1 key(s) as expired" in out.getvalue()
        assert Key.objects.get(id=expired.id).status == "expired"

    def test_command_dry_run(self, make_key):
        """Test that a dry run lists keys without changing them."""
        expired = make_key(expires_in=timedelta(minutes=-1))
        out = StringIO()

        call_command("sweep_expired_keys", "--dry-run", stdout=out)

        assert "Found 1 expired key(s)" in out.getvalue()
        assert Key.objects.get(id=expired.id).status == "active"
