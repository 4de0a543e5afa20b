# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements logging for TDVNS.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Optional

import logging
import pathlib


class SizeLimitedFormatter(logging.Formatter):
    """Logging formatter that enforces a maximum message size.

    Messages longer than the limit are cut off and marked with a truncation
    indicator. The limit applies to the message content only, not to the
    timestamp and level added by the format string. Full reports of large
    adjacency matrices are the usual reason a message hits the limit.

    Attributes:
        max_msg_sz: Maximum allowed length for log message content in characters.
    """

    def __init__(
        self, fmt: Optional[str] = None, datefmt: Optional[str] = None, max_msg_sz: int = 4096
    ) -> None:
        """Initialize the size-limited formatter.

        Args:
            fmt: Format string for log messages. If None, uses the default format.
            datefmt: Format string for date/time portion of log messages. If None,
                uses the default date format.
            max_msg_sz: Maximum allowed length for the core message content in
                characters. Messages exceeding this limit will be truncated with
                a "... [TRUNCATED]" suffix.

        Raises:
            ValueError: If max_msg_sz is less than 15 characters.
        """
        if max_msg_sz < 15:
            raise ValueError(
                "max_msg_sz must be at least 15 " "characters to accommodate truncation indicator"
            )

        super().__init__(fmt, datefmt)
        self.max_msg_sz: int = max_msg_sz

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, truncating the message if it exceeds size limits.

        The record is restored after formatting so other handlers see the
        original message.

        Args:
            record: The LogRecord instance to be formatted.

        Returns:
            The formatted log message string.
        """
        message_content: str = record.getMessage()

        if len(message_content) > self.max_msg_sz:
            original_msg = record.msg
            original_args = record.args

            truncate_length: int = self.max_msg_sz - 15
            record.msg = message_content[:truncate_length] + "... [TRUNCATED]"
            record.args = None

            formatted: str = super().format(record)

            record.msg = original_msg
            record.args = original_args
            return formatted

        return super().format(record)


def get_logger(
    run_id: int = 0,
    results_dir: Optional[pathlib.Path] = None,
    append_mode: bool = False,
    max_msg_sz: int = 4096,
    level: int = logging.INFO,
) -> logging.Logger:
    """Creates a logger for a search run with a stream handler and an optional file handler.

    Each log message is prefixed with the run ID. If no results_dir is provided,
    the logger only writes to the terminal.

    Args:
        run_id: Identifier of the run creating the logger.
        results_dir: Directory where the log file will be created.
        append_mode: If True, append to existing log file; if False, overwrite.
        max_msg_sz: Maximum size for log messages in characters.
        level: Logging level of the logger, applied on every call.

    Returns:
        Configured Logger instance for the run.
    """
    if results_dir:
        sanitized_dir: str = str(results_dir).replace("/", "_").replace("\\", "_")
        logger_name: str = f"tdvns_{sanitized_dir}"
    else:
        logger_name: str = f"tdvns_stdout_{run_id}"

    logger: logging.Logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    if not logger.handlers:
        logFormatter = SizeLimitedFormatter(
            f"[run {run_id}] %(asctime)s | %(levelname)s | %(process)d | %(message)s",
            max_msg_sz=max_msg_sz,
        )
        logger.propagate = False

        logStreamHandler: logging.StreamHandler = logging.StreamHandler()
        logStreamHandler.setFormatter(logFormatter)
        logger.addHandler(logStreamHandler)

        if results_dir:
            fh: logging.FileHandler = logging.FileHandler(
                pathlib.Path(results_dir).joinpath("results.log"), mode="a" if append_mode else "w"
            )
            fh.setFormatter(logFormatter)
            logger.addHandler(fh)

    return logger
