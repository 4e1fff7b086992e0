"""
Tests for correlation-id logging.

Run with: pytest tests/test_logging_config.py -v
"""

import logging

from chatsync.application.sync.invalidation_router import MutationKind
from chatsync.application.sync.mutation_pipeline import MutationSpec
from chatsync.config.logging_config import (
    CorrelationIdFilter,
    SafeFormatter,
    correlation_id_var,
    setup_logging,
)


def make_record() -> logging.LogRecord:
    return logging.LogRecord("chatsync.test", logging.INFO, __file__, 1, "hello", None, None)


def test_filter_copies_current_correlation_id():
    token = correlation_id_var.set("send_message-1234")
    try:
        record = make_record()
        assert CorrelationIdFilter().filter(record)
    finally:
        correlation_id_var.reset(token)

    assert record.correlation_id == "send_message-1234"


def test_formatter_tolerates_records_without_correlation_id():
    formatter = SafeFormatter("%(correlation_id)s %(message)s")

    assert formatter.format(make_record()) == "NO Correlation ID hello"


async def test_mutation_runs_under_its_own_correlation_id(pipeline):
    seen = []

    async def remote():
        seen.append(correlation_id_var.get())

    await pipeline.execute(MutationSpec(kind=MutationKind.CREATE_CHAT, remote=remote))

    assert seen[0].startswith("create_chat-")
    assert correlation_id_var.get() == "NO Correlation ID"


def test_setup_logging_writes_rotating_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_filters, saved_level = root.handlers[:], root.filters[:], root.level
    package_logger = logging.getLogger("chatsync")
    saved_package_level = package_logger.level
    log_file = tmp_path / "logs" / "chatsync.log"
    try:
        setup_logging(level="DEBUG", log_file=str(log_file))
        logging.getLogger("chatsync.test").debug("cache warmed")
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers[len(saved_handlers):]:
            handler.close()
        root.handlers[:] = saved_handlers
        root.filters[:] = saved_filters
        root.setLevel(saved_level)
        configured_level = package_logger.level
        package_logger.setLevel(saved_package_level)

    assert "cache warmed" in log_file.read_text()
    assert configured_level == logging.DEBUG
