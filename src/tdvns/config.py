# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements loading of .yaml configuration files.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Any, Dict, Optional

import pathlib

import yaml

from tdvns.search import SearchConfig

DEFAULT_MAX_LOG_MSG_SZ: int = 4096


def load_config(cfg_path: Optional[str | pathlib.Path]) -> Dict[Any, Any]:
    """Loads a .yaml config file, returning an empty config if no path is given."""
    if cfg_path is None:
        return {}
    with open(cfg_path, "r") as f:
        config: Optional[Dict[Any, Any]] = yaml.safe_load(f)
    return config or {}


def save_config(config: Dict[Any, Any], cfg_path: str | pathlib.Path) -> None:
    with open(cfg_path, "w") as f:
        yaml.safe_dump(config, f)


def search_config_from_dict(config: Dict[Any, Any]) -> SearchConfig:
    """Builds a SearchConfig from the SEARCH_CONFIG and SEED entries of a config.

    Missing fields fall back to the SearchConfig defaults. A top-level SEED is
    used when SEARCH_CONFIG does not set its own seed.

    Raises:
        ValueError: If a restart count is not positive or a budget is negative.
    """
    search_cfg_raw: Dict[str, Any] = dict(config.get("SEARCH_CONFIG", None) or {})
    if "seed" not in search_cfg_raw and config.get("SEED", None) is not None:
        search_cfg_raw["seed"] = config["SEED"]

    default_search_cfg: SearchConfig = SearchConfig()
    return SearchConfig(
        **{
            field: search_cfg_raw.get(field, getattr(default_search_cfg, field))
            for field in SearchConfig.__dataclass_fields__
        }
    )
