"""
Tests for audit sink loading and the default logging sink.
"""

import logging

import pytest
from django.core.exceptions import ImproperlyConfigured

from packman import packs
from packman.adapters import LoggingAuditSink, get_audit_sink, reset_audit_sink
from packman.adapters.games import ModelGameLookup, get_game_lookup, reset_game_lookup
from packman.adapters.loading import AdapterLoader
from packman.adapters.noop import NoopAuditSink
from packman.protocols import AuditEntry, AuditSink, GameLookup
from packman.tests.sinks import RecordingAuditSink


pytestmark = pytest.mark.django_db


class TestSinkLoading:
    """Tests for get_audit_sink()."""

    def test_configured_sink(self, audit_sink):
        assert isinstance(audit_sink, RecordingAuditSink)
        assert get_audit_sink() is audit_sink

    def test_sinks_satisfy_protocol(self):
        assert isinstance(LoggingAuditSink(), AuditSink)
        assert isinstance(NoopAuditSink(), AuditSink)
        assert isinstance(ModelGameLookup(), GameLookup)

    def test_bad_path(self, settings):
        settings.PACKMAN = {'AUDIT_SINK': 'packman.adapters.missing.Sink'}
        reset_audit_sink()

        with pytest.raises(ImproperlyConfigured):
            get_audit_sink()

    def test_empty_path(self, settings):
        settings.PACKMAN = {'GAME_LOOKUP': ''}
        reset_game_lookup()

        with pytest.raises(ImproperlyConfigured):
            get_game_lookup()

    def test_loader_caches_until_reset(self):
        loader = AdapterLoader('GAME_LOOKUP', 'game lookup', 'x.Lookup')

        first = loader.get()
        assert isinstance(first, ModelGameLookup)
        assert loader.get() is first

        loader.reset()
        assert loader.get() is not first


class TestLoggingAuditSink:
    """The default sink logs after commit only."""

    @pytest.fixture
    def logging_sink(self, settings):
        settings.PACKMAN = {'AUDIT_SINK': 'packman.adapters.audit.LoggingAuditSink'}
        reset_audit_sink()
        return get_audit_sink()

    def test_logs_on_commit(self, logging_sink, received_pack, bin_1, caplog,
                            django_capture_on_commit_callbacks):
        with caplog.at_level(logging.INFO, logger='packman.audit'):
            with django_capture_on_commit_callbacks(execute=True):
                packs.move_pack(received_pack, bin_1)

        records = [r for r in caplog.records if r.name == 'packman.audit']
        assert [r.getMessage() for r in records] == ['packman.audit.update']
        assert records[0].table == 'packman_pack'
        assert records[0].new_values == {'current_bin_id': bin_1.pk}

    def test_nothing_logged_without_commit(self, logging_sink, received_pack, bin_1, caplog,
                                           django_capture_on_commit_callbacks):
        with caplog.at_level(logging.INFO, logger='packman.audit'):
            with django_capture_on_commit_callbacks(execute=False) as callbacks:
                packs.move_pack(received_pack, bin_1)

        assert len(callbacks) == 1
        assert not [r for r in caplog.records if r.name == 'packman.audit']


class TestAuditEntry:
    """Tests for AuditEntry."""

    def test_as_dict(self):
        entry = AuditEntry(
            table='packman_pack',
            record_id=1,
            action='UPDATE',
            old_values={'status': 'active'},
            new_values={'status': 'depleted'},
            user_id=7,
        )

        assert entry.as_dict()['new_values'] == {'status': 'depleted'}
        assert entry.as_dict()['user_id'] == 7
