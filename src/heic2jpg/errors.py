"""异常定义"""

from pathlib import Path


class Heic2JpgError(Exception):
    """所有 heic2jpg 异常的基类"""


class AccessError(Heic2JpgError):
    """筛选阶段无法访问输入路径（stat 失败），整个批次中止"""

    def __init__(self, path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"accessing path {path}: {cause}")


class ConfigError(Heic2JpgError):
    """配置文件不存在或格式错误"""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"配置无效：{path} ({reason})")
