"""Tests for logging setup and time helpers."""

import logging
from datetime import datetime, timezone

import pytest

from eth_wallet.utils.logging import REDACTED, redact_secrets, setup_logging
from eth_wallet.utils.time import block_time, to_utc_timestamp


class TestRedaction:

    def test_private_key_masked(self):
        event = redact_secrets(None, "info", {"event": "Wallet loaded", "private_key": "0xdead"})

        assert event["private_key"] == REDACTED
        assert event["event"] == "Wallet loaded"

    def test_other_keys_untouched(self):
        event = redact_secrets(None, "info", {"event": "x", "address": "0xabc"})

        assert event == {"event": "x", "address": "0xabc"}


class TestSetupLogging:

    def test_file_handler_not_duplicated(self, config, tmp_path):
        config.log_file = str(tmp_path / "logs" / "wallet.log")
        root = logging.getLogger()

        try:
            setup_logging(config)
            setup_logging(config, verbose=True)

            file_handlers = [h for h in root.handlers if h.get_name() == "eth_wallet_file"]
            assert len(file_handlers) == 1
            assert root.level == logging.DEBUG
        finally:
            config.log_file = None
            setup_logging(config)

        assert not [h for h in root.handlers if h.get_name() == "eth_wallet_file"]


class TestTimeHelpers:

    def test_naive_datetime_taken_as_utc(self):
        naive = datetime(2024, 1, 15, 12, 0, 0)

        assert to_utc_timestamp(naive) == naive.replace(tzinfo=timezone.utc)

    def test_block_time_from_unix(self):
        assert block_time(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_negative_block_time_rejected(self):
        with pytest.raises(ValueError):
            block_time(-1)
