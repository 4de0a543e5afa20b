# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the command-line interface of TDVNS.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Any, Dict, List, Optional

import argparse
import dataclasses
import logging
import os
from pathlib import Path
import sys

import yaml

from tdvns.config import (
    DEFAULT_MAX_LOG_MSG_SZ,
    load_config,
    save_config,
    search_config_from_dict,
)
from tdvns.search import SearchConfig, SearchResult, TerminationReason, search_with_restarts
from tdvns.utils.logging_utils import get_logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses command-line arguments for a TDVNS run.

    Args:
        argv: Arguments to parse. If None, sys.argv is used.

    Returns:
        Parsed command-line arguments. Search parameters left unset are None and
        are taken from the config file or the defaults.
    """
    parser = argparse.ArgumentParser(
        description=(
            "Searches for a d-regular graph on n vertices whose vertices have "
            "pairwise distinct triangle degrees."
        )
    )
    parser.add_argument("--n", type=int, help="number of vertices.", required=True)
    parser.add_argument("--d", type=int, help="common vertex degree.", required=True)
    parser.add_argument("--cfg_path", type=str, help="path to .yaml config file.")
    parser.add_argument(
        "--out_dir",
        type=str,
        help="path to directory that will contain the log and the config copy of the run.",
    )
    parser.add_argument(
        "--max_shake", type=int, help="maximum shake strength without improvement (default 100)."
    )
    parser.add_argument(
        "--max_time_ms", type=int, help="maximum runtime of one search in milliseconds."
    )
    parser.add_argument(
        "--max_restarts", type=int, help="maximum number of independent searches (default 1)."
    )
    parser.add_argument("--seed", type=int, help="random seed for reproducible runs.")
    parser.add_argument("--verbose", action="store_true", help="if true, logs every descent step.")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for a TDVNS run.

    Loads the config, applies command-line overrides, runs the search and reports
    the best solution through the logger.

    Returns:
        0 if the search ran, 1 if the config could not be loaded, holds an
        invalid search parameter, or no (n, d)-regular graph exists.
    """
    args: Dict[str, Any] = vars(parse_args(argv))
    args["cfg_path"] = Path(args["cfg_path"]) if args["cfg_path"] else None
    args["out_dir"] = Path(args["out_dir"]) if args["out_dir"] else None

    if args["cfg_path"] is not None and not os.path.exists(args["cfg_path"]):
        print(f"Path {args['cfg_path']} not found.")
        return 1

    try:
        config: Dict[Any, Any] = load_config(args["cfg_path"])
    except (OSError, yaml.YAMLError) as err:
        print(str(err))
        return 1

    overrides: Dict[str, Any] = {
        field: args[field]
        for field in ("max_shake", "max_time_ms", "max_restarts", "seed")
        if args[field] is not None
    }
    try:
        search_config: SearchConfig = dataclasses.replace(
            search_config_from_dict(config), **overrides
        )
    except ValueError as err:
        print(str(err))
        return 1

    if args["out_dir"] is not None:
        os.makedirs(args["out_dir"], exist_ok=True)
        config["SEARCH_CONFIG"] = dataclasses.asdict(search_config)
        save_config(config, args["out_dir"].joinpath("config.yaml"))

    logging_cfg: Dict[str, Any] = config.get("LOGGING", None) or {}
    logger: logging.Logger = get_logger(
        results_dir=args["out_dir"],
        max_msg_sz=logging_cfg.get("max_msg_sz", DEFAULT_MAX_LOG_MSG_SZ),
        level=logging.DEBUG if args["verbose"] else logging.INFO,
    )

    result: SearchResult = search_with_restarts(
        args["n"], args["d"], config=search_config, logger=logger
    )
    if result.reason == TerminationReason.INVALID_INSTANCE:
        return 1

    logger.info(f"Termination reason: {result.reason.value}")
    logger.info(f"Best solution found:\n{result.best.report_full()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
