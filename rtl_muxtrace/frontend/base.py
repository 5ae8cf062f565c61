# rtl_muxtrace/frontend/base.py
from abc import ABC, abstractmethod
from ..config import Config
from ..netlist import Design


class FrontendBase(ABC):
    """网表前端抽象接口：负责从宿主导出的文件生成内存中的 Design。"""

    def __init__(self, cfg: Config):
        self.cfg = cfg

    @abstractmethod
    def load(self) -> Design:
        """读取网表，返回 Design。"""
        raise NotImplementedError
