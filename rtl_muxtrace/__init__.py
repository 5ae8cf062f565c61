# rtl_muxtrace/__init__.py

"""
RTL Mux Tracer

- 在层次化网表上，从给定 wire 出发前向搜索最近的受控 mux
- 跳过 select 为复位信号（名字含 rstz）的 mux
- 输出：
    - select wire 名字
    - 所在模块名字
  找不到时输出 NONE / NONE
"""

__all__ = [
    "config",
    "errors",
    "netlist",
    "frontend",
    "trace",
    "finder",
    "cli",
]
