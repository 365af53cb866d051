"""Property-based tests for operation logging"""
import logging
import os
import time
import tempfile
from pathlib import Path
from hypothesis import given, strategies as st, settings

from kea_config.config import settings as app_settings
from kea_config.logger import OperationLogger, cleanup_old_logs, operation_logger


words = st.text(
    min_size=1,
    max_size=30,
    alphabet=st.characters(whitelist_categories=('L', 'N'), whitelist_characters='-_./'),
)


# **Feature: kea-config, Property: Operation logging**
@given(
    operator=st.text(min_size=1, max_size=20, alphabet=st.characters(whitelist_categories=('L', 'N'))),
    action=st.sampled_from(["CREATE", "ROLLBACK"]),
    obj=words,
    details=st.one_of(st.none(), words),
)
@settings(max_examples=50)
def test_operation_logging(operator: str, action: str, obj: str, details):
    """For any write, a log entry is created with timestamp, server tag and object."""
    with tempfile.NamedTemporaryFile(suffix=".log", delete=False) as f:
        temp_path = Path(f.name)

    try:
        logger = OperationLogger(temp_path, name="test-operation-logging")

        logger.log_operation(operator=operator, action=action, obj=obj, details=details)

        with open(temp_path, "r", encoding="utf-8") as f:
            content = f.read()

        assert operator in content
        assert action in content
        assert obj in content

        logs = logger.get_logs(limit=10)
        assert len(logs) == 1

        latest = logs[0]
        assert latest["operator"] == operator
        assert latest["action"] == action
        assert latest["object"] == obj
        assert latest["details"] == (details or "")
    finally:
        temp_path.unlink(missing_ok=True)


def test_log_filtering():
    """Test log filtering by server tag."""
    with tempfile.NamedTemporaryFile(suffix=".log", delete=False) as f:
        temp_path = Path(f.name)

    try:
        logger = OperationLogger(temp_path, name="test-log-filtering")

        logger.log_operation("all", "CREATE", "shared-network net1")
        logger.log_operation("server2", "CREATE", "subnet 10.0.0.0/24")
        logger.log_operation("all", "ROLLBACK", "subnet 10.0.1.0/24", "duplicate", level="ERROR")

        all_logs = logger.get_logs(filter_operator="all")
        assert len(all_logs) == 2
        assert all(log["operator"] == "all" for log in all_logs)
        # Newest first
        assert all_logs[0]["action"] == "ROLLBACK"
        assert all_logs[0]["level"] == "ERROR"
        assert all_logs[0]["details"] == "duplicate"

        server2_logs = logger.get_logs(filter_operator="server2")
        assert len(server2_logs) == 1
    finally:
        temp_path.unlink(missing_ok=True)


def test_log_limit():
    """Test log limit."""
    with tempfile.NamedTemporaryFile(suffix=".log", delete=False) as f:
        temp_path = Path(f.name)

    try:
        logger = OperationLogger(temp_path, name="test-log-limit")

        for i in range(20):
            logger.log_operation("all", "CREATE", f"subnet 10.0.{i}.0/24")

        logs = logger.get_logs(limit=5)
        assert len(logs) == 5
        assert logs[0]["object"] == "subnet 10.0.19.0/24"
    finally:
        temp_path.unlink(missing_ok=True)


def test_module_loggers_are_not_operations():
    """Debug lines from module loggers are skipped by get_logs."""
    with tempfile.NamedTemporaryFile(suffix=".log", delete=False) as f:
        temp_path = Path(f.name)

    try:
        logger = OperationLogger(temp_path, name="test-module-loggers")
        logging.getLogger(f"{logger.name}.services.writer").info("a | b | c | d")
        logger.log_operation("all", "CREATE", "server all")

        logs = logger.get_logs()
        assert len(logs) == 1
        assert logs[0]["object"] == "server all"
    finally:
        temp_path.unlink(missing_ok=True)


def test_instances_do_not_share_handlers():
    """A second logger leaves the first one, and the global one, writing where they were."""
    with tempfile.TemporaryDirectory() as d:
        first = OperationLogger(Path(d) / "first.log", name="test-first")
        second = OperationLogger(Path(d) / "second.log", name="test-second")

        first.log_operation("all", "CREATE", "server all")

        assert [e["object"] for e in first.get_logs()] == ["server all"]
        assert second.get_logs() == []
        assert operation_logger.file_handler in operation_logger.logger.handlers
        assert Path(operation_logger.file_handler.baseFilename) == app_settings.log_file

        for logger in (first, second):
            logger.file_handler.close()


def test_cleanup_old_logs():
    """Stale rotated files are removed; fresh ones and the current log are kept."""
    with tempfile.TemporaryDirectory() as d:
        logs_dir = Path(d)
        current = logs_dir / app_settings.log_file.name
        stale_backup = logs_dir / f"{app_settings.log_file.name}.1"
        fresh_backup = logs_dir / f"{app_settings.log_file.name}.2"
        for path in (current, stale_backup, fresh_backup):
            path.write_text("line\n", encoding="utf-8")

        stale = time.time() - 40 * 86400
        os.utime(current, (stale, stale))
        os.utime(stale_backup, (stale, stale))

        assert cleanup_old_logs(logs_dir, max_age_days=30) == 1
        assert current.exists()
        assert fresh_backup.exists()
        assert not stale_backup.exists()

    assert cleanup_old_logs(logs_dir) == 0
