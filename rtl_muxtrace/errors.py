# rtl_muxtrace/errors.py
"""
错误分类：
  - PreconditionError: 前置条件不满足（空选择、递归模块、未展开的 process）
  - AmbiguousInputError: 起点信号无法唯一确定
  - UnknownWireError: 起点信号不存在
  - NetlistFormatError: 网表描述文件格式错误
  - ConfigError: 配置文件格式错误
“找不到 mux” 不是错误，见 MuxResult.not_found()。
"""


class MuxTraceError(RuntimeError):
    """所有致命错误的基类，出现即中止整个查询。"""


class PreconditionError(MuxTraceError):
    pass


class EmptySelectionError(PreconditionError):
    def __init__(self):
        super().__init__("Cannot operate on an empty selection.")


class RecursiveHierarchyError(PreconditionError):
    def __init__(self, modules=None):
        self.modules = list(modules or [])
        msg = "Recursive modules are not supported by find_next_mux."
        if self.modules:
            msg += f" (cycle through: {', '.join(self.modules)})"
        super().__init__(msg)


class UnresolvedProcessError(PreconditionError):
    def __init__(self, module_name: str):
        self.module_name = module_name
        super().__init__(
            f"Unexpected process in module {module_name}. "
            "find_next_mux requires processes to be lowered first (run `proc`)."
        )


class AmbiguousInputError(MuxTraceError):
    pass


class AmbiguousWireError(AmbiguousInputError):
    def __init__(self, wire_name: str, modules):
        self.wire_name = wire_name
        self.modules = list(modules)
        super().__init__(
            f"The wire {wire_name} is present in more than one module "
            f"({', '.join(self.modules)}); use a module filter."
        )


class UnknownModuleError(AmbiguousInputError):
    def __init__(self, module_filter: str):
        self.module_filter = module_filter
        super().__init__(f"The module {module_filter} does not exist.")


class UnknownWireError(MuxTraceError):
    def __init__(self, wire_name: str):
        self.wire_name = wire_name
        super().__init__(
            f"The wire {wire_name} does not exist in any of the selected modules."
        )


class NetlistFormatError(ValueError):
    """网表描述文件无法解析。"""


class ConfigError(ValueError):
    """配置文件无法解析或字段类型不对。"""
