"""Tests for correlation-aware logging."""

import logging

import pytest

from xml_surgeon.shared.logging import CorrelationLogger, configure_logging, get_logger


class TestCorrelationLogger:
    """Test CorrelationLogger extra handling."""

    def test_records_carry_correlation_and_component(self, caplog):
        """Test that every record is tagged with the session information."""
        logger = get_logger("xml_surgeon.test", "session-1", "indexer")

        with caplog.at_level(logging.INFO, logger="xml_surgeon.test"):
            logger.info("Indexed", extra={"element_count": 3})

        record = caplog.records[-1]
        assert record.correlation_id == "session-1"
        assert record.component == "indexer"
        assert record.element_count == 3

    def test_component_defaults_to_last_name_part(self):
        logger = CorrelationLogger("xml_surgeon.tree.indexer")

        assert logger.component == "indexer"
        assert logger.correlation_id is None

    def test_debug_enabled_follows_level(self, caplog):
        logger = get_logger("xml_surgeon.debug_check")

        with caplog.at_level(logging.DEBUG, logger="xml_surgeon.debug_check"):
            assert logger.is_debug_enabled()


class TestConfigureLogging:
    """Test command-line logging setup."""

    def test_rejects_unknown_level(self):
        with pytest.raises(ValueError, match="logging level"):
            configure_logging("CHATTY")

    def test_accepts_lowercase_level(self):
        configure_logging("warning")
