# rtl_muxtrace/config.py
from dataclasses import dataclass, field
from typing import Any, List, Optional
import yaml

from .errors import ConfigError


DEFAULT_RESET_TOKEN = "rstz"
DEFAULT_MUX_TYPES = ["$mux"]


@dataclass
class Config:
    netlist: Optional[str] = None
    top_module: Optional[str] = None
    select: List[str] = field(default_factory=list)
    reset_token: str = DEFAULT_RESET_TOKEN
    mux_types: List[str] = field(default_factory=lambda: list(DEFAULT_MUX_TYPES))


def load_config(path: str) -> Config:
    """
    配置文件示例：
      netlist:
        path: build/core.yaml
        top: core
      select: ["core", "alu*"]
      trace:
        reset_token: rstz
        mux_types: ["$mux", "$_MUX_"]
    """
    with open(path) as f:
        try:
            cfg_raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: {e}") from e
    if not isinstance(cfg_raw, dict):
        raise ConfigError(f"{path}: config must be a mapping")
    netlist_cfg = _section(path, cfg_raw, "netlist")
    trace_cfg = _section(path, cfg_raw, "trace")
    return Config(
        netlist=netlist_cfg.get("path"),
        top_module=netlist_cfg.get("top"),
        select=_str_list(path, "select", cfg_raw.get("select", [])),
        reset_token=str(trace_cfg.get("reset_token", DEFAULT_RESET_TOKEN)),
        mux_types=_str_list(path, "trace.mux_types",
                            trace_cfg.get("mux_types") or DEFAULT_MUX_TYPES),
    )


def _section(path: str, cfg_raw: dict, key: str) -> dict:
    value = cfg_raw.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"{path}: '{key}' must be a mapping, got {value!r}")
    return value


def _str_list(path: str, key: str, value: Any) -> List[str]:
    # 单个字符串当作只有一项的列表
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"{path}: '{key}' must be a string or a list, got {value!r}")
    return [str(v) for v in value]
