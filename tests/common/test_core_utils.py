import logging

from common.core_utils import SymbolFormatter, setup_logging


def test_symbol_formatter_adds_level_symbol():
    formatter = SymbolFormatter(
        fmt="%(symbol)s %(message)s", symbols={"warning": "W", "info": "I"}
    )
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)

    assert formatter.format(record) == "W careful"


def test_setup_logging_writes_to_file_and_console(tmp_path, capsys, restore_root_logger):
    log_file = tmp_path / "ros2_kilted_install.log"

    setup_logging(log_file=log_file, log_prefix="[ROS2-SETUP]")
    logging.getLogger("ros2_installer").info("hello")
    logging.getLogger("ros2_installer").error("broken")
    for handler in restore_root_logger.handlers:
        handler.flush()

    captured = capsys.readouterr()
    assert "[ROS2-SETUP]" in captured.out
    assert "hello" in captured.out
    assert "broken" not in captured.out
    assert "broken" in captured.err

    content = log_file.read_text(encoding="utf-8")
    assert "hello" in content
    assert "broken" in content


def test_setup_logging_appends_to_existing_log(tmp_path, restore_root_logger):
    log_file = tmp_path / "install.log"
    log_file.write_text("previous run\n", encoding="utf-8")

    setup_logging(log_file=log_file, log_to_console=False, log_format_str="%(message)s")
    logging.getLogger("ros2_installer").info("second run")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert log_file.read_text(encoding="utf-8") == "previous run\nsecond run\n"


def test_setup_logging_unwritable_log_file_falls_back_to_console(
    tmp_path, capsys, restore_root_logger
):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")

    setup_logging(log_file=blocker / "install.log")

    assert "Could not create file handler" in capsys.readouterr().err
    assert not any(
        isinstance(h, logging.FileHandler) for h in restore_root_logger.handlers
    )


def test_setup_logging_replaces_previous_handlers(restore_root_logger):
    setup_logging(log_format_str="%(message)s")
    first = list(restore_root_logger.handlers)

    setup_logging(log_format_str="%(message)s")

    assert not any(h in restore_root_logger.handlers for h in first)
    assert len(restore_root_logger.handlers) == 2
