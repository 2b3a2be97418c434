"""配置处理模块"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .batch import default_max_workers
from .converter import DEFAULT_OUTPUT_DIR
from .errors import ConfigError

logger = logging.getLogger(__name__)


def validate_max_workers(value) -> Optional[int]:
    """并发数必须是正整数，None 表示使用默认值"""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"max_workers 必须是正整数：{value!r}")
    return value


@dataclass
class ConvertConfig:
    """转换配置"""

    output_dir: str = DEFAULT_OUTPUT_DIR
    quality: int = 100
    verbose: bool = False
    max_workers: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ConvertConfig":
        """
        从字典创建配置

        Raises:
            ValueError: 某个字段的类型或取值不合法
        """
        output_dir = data.get("output_dir")
        if output_dir is None or output_dir == "":
            output_dir = DEFAULT_OUTPUT_DIR
        elif not isinstance(output_dir, str):
            raise ValueError(f"output_dir 必须是字符串：{output_dir!r}")

        quality = data.get("quality", 100)
        if isinstance(quality, bool) or not isinstance(quality, int):
            raise ValueError(f"quality 必须是整数：{quality!r}")

        verbose = data.get("verbose", False)
        if not isinstance(verbose, bool):
            raise ValueError(f"verbose 必须是 true 或 false：{verbose!r}")

        return cls(
            output_dir=output_dir,
            quality=quality,
            verbose=verbose,
            max_workers=validate_max_workers(data.get("max_workers")),
        )

    @classmethod
    def from_file(cls, path: Path) -> "ConvertConfig":
        """从文件加载配置"""
        path = Path(path)
        if not path.exists():
            raise ConfigError(path, "文件不存在")

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(path, str(e)) from e

        if not isinstance(data, dict):
            raise ConfigError(path, "顶层必须是 JSON 对象")
        try:
            return cls.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(path, str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "ConvertConfig":
        """从 JSON 字符串加载配置"""
        return cls.from_dict(json.loads(json_str))

    def resolve_max_workers(self) -> int:
        """解析并发数，未指定时为 CPU 核数的两倍"""
        if self.max_workers is not None:
            return validate_max_workers(self.max_workers)
        return default_max_workers()

    def ensure_output_dir(self) -> None:
        """
        创建输出目录（包括父目录）

        默认输出目录（当前目录）不做任何处理。
        """
        if not self.output_dir or self.output_dir == DEFAULT_OUTPUT_DIR:
            return

        out = Path(self.output_dir)
        if not out.exists():
            logger.debug("Creating output directory: %s", out)
            out.mkdir(parents=True, exist_ok=True)
