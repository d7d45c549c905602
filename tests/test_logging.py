import logging

from repoconfig.foundation.logging_utils import LOG_FORMAT, configure_logger


def test_configure_logger_replaces_handlers_and_stops_propagation():
    name = "tests.logging.configure"
    first = configure_logger(name, level=logging.DEBUG)
    second = configure_logger(name, level=logging.INFO)

    assert first is second
    assert second.level == logging.INFO
    assert second.propagate is False
    assert len(second.handlers) == 1
    assert second.handlers[0].formatter._fmt == LOG_FORMAT


def test_configured_logger_writes_pipe_separated_lines(capsys):
    log = configure_logger("tests.logging.output")
    log.info("no %s file found, continuing with defaults", "atlantis.yaml")

    err = capsys.readouterr().err
    assert "| INFO | no atlantis.yaml file found, continuing with defaults" in err
