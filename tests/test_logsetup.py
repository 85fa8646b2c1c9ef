import pytest

from nouframe.logsetup import (
    TRACE,
    LoggerSettings,
    dump_stack_trace,
    get_logger,
    init_logging,
    shutdown_logging,
)


@pytest.fixture(autouse=True)
def _clean():
    shutdown_logging()
    yield
    shutdown_logging()


def test_file_output_format(tmp_path):
    path = tmp_path / "app.log"
    logger = init_logging(
        LoggerSettings(output_to_console=False, output_to_file=True, log_file_name=str(path))
    )
    logger.info("hello")
    shutdown_logging()
    assert path.read_text().strip() == "[info] APP: hello"


def test_default_file_name(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    logger = init_logging(LoggerSettings(output_to_console=False, output_to_file=True))
    assert get_logger() is logger
    assert logger.isEnabledFor(TRACE)
    logger.warning("x")
    shutdown_logging()
    assert "[warning] APP: x" in (tmp_path / "logs.txt").read_text()


def test_console_output(capsys):
    init_logging(LoggerSettings())
    get_logger().error("boom")
    assert "[error] APP: boom" in capsys.readouterr().out


def test_trace_enabled_and_init_idempotent():
    first = init_logging(LoggerSettings(output_to_console=False))
    assert first.isEnabledFor(TRACE)
    assert init_logging(LoggerSettings()) is first


def test_get_logger_requires_init():
    with pytest.raises(RuntimeError):
        get_logger()


def test_stack_trace_names_caller():
    text = dump_stack_trace()
    first = text.splitlines()[0]
    assert first.startswith("\ttest_stack_trace_names_caller@")
    assert " line " in first