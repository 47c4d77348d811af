"""
Test suite for context-prefixed logging.
"""

import logging

from wabridge.core.logging import event_context, get_logger
from wabridge.core.logging.logger import ShortNameFormatter


def test_prefix_follows_event_context(caplog):
    logger = get_logger("wabridge.tests.prefix")

    with caplog.at_level(logging.INFO, logger="wabridge.tests.prefix"):
        with event_context(account_id="628123:1@s.whatsapp.net", event_id="3EB0"):
            logger.info("handled")
        logger.info("idle")

    assert caplog.messages == ["[A:628123:1@s.whatsapp.net][E:3EB0] handled", "idle"]


def test_bound_values_used_outside_event(caplog):
    logger = get_logger("wabridge.tests.bind").bind(account_id="628123@s.whatsapp.net")

    with caplog.at_level(logging.INFO, logger="wabridge.tests.bind"):
        logger.info("startup")

    assert caplog.messages == ["[A:628123@s.whatsapp.net] startup"]


def test_short_name_formatter():
    record = logging.LogRecord(
        "wabridge.core.events.event_dispatcher", logging.INFO, __file__, 1, "msg", None, None
    )

    assert ShortNameFormatter("%(short_name)s").format(record) == "events.event_dispatcher"
