# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#

"""Unit tests for logging helpers."""

import logging

import pytest

from tdvns.utils.logging_utils import SizeLimitedFormatter, get_logger


def _record(msg, args=None):
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


def test_short_messages_are_untouched():
    formatter = SizeLimitedFormatter("%(message)s", max_msg_sz=20)
    assert formatter.format(_record("hello")) == "hello"


def test_long_messages_are_truncated():
    formatter = SizeLimitedFormatter("%(message)s", max_msg_sz=20)
    record = _record("x" * 50)

    formatted = formatter.format(record)

    assert formatted == "x" * 5 + "... [TRUNCATED]"
    assert record.msg == "x" * 50


def test_truncation_applies_to_interpolated_message():
    formatter = SizeLimitedFormatter("%(message)s", max_msg_sz=20)
    record = _record("value=%s", ("y" * 40,))

    assert formatter.format(record) == "value" + "... [TRUNCATED]"
    assert record.args == ("y" * 40,)


def test_minimum_size():
    with pytest.raises(ValueError):
        SizeLimitedFormatter(max_msg_sz=10)


def test_get_logger_writes_results_file(tmp_path):
    logger = get_logger(run_id=3, results_dir=tmp_path)
    logger.info("new best found")
    for handler in logger.handlers:
        handler.flush()

    assert logger is get_logger(run_id=3, results_dir=tmp_path)
    assert len(logger.handlers) == 2

    content = tmp_path.joinpath("results.log").read_text()
    assert "[run 3]" in content
    assert "new best found" in content


def test_get_logger_updates_level_on_reuse(tmp_path):
    logger = get_logger(results_dir=tmp_path, level=logging.INFO)
    assert not logger.isEnabledFor(logging.DEBUG)

    logger = get_logger(results_dir=tmp_path, level=logging.DEBUG)
    logger.debug("descent step")
    for handler in logger.handlers:
        handler.flush()

    assert logger.isEnabledFor(logging.DEBUG)
    assert "descent step" in tmp_path.joinpath("results.log").read_text()
