"""数据模型"""

import enum
import os
from dataclasses import dataclass, field
from typing import List, Optional, Union


class Stage(enum.Enum):
    """单个转换任务的失败阶段"""

    OPEN = "open"
    DECODE = "decode"
    CREATE = "create"
    ENCODE = "encode"


class Classification(enum.Enum):
    """输入路径的分类（访问失败以 AccessError 抛出）"""

    REGULAR_FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


# 错误信息前缀，与各阶段一一对应
_STAGE_VERBS = {
    Stage.OPEN: "opening file",
    Stage.DECODE: "decoding HEIC image",
    Stage.CREATE: "creating output file",
    Stage.ENCODE: "encoding JPEG image",
}


@dataclass(frozen=True)
class ConversionJob:
    """一个文件的转换任务，创建后不可修改"""

    source_path: Union[str, os.PathLike]
    output_dir: Union[str, os.PathLike] = "."
    quality: int = 100


@dataclass(frozen=True)
class Success:
    source_path: Union[str, os.PathLike]
    output_path: str

    ok = True


@dataclass(frozen=True)
class Failure:
    """
    转换失败

    stage 为 None 表示任务内部出现了意外异常（不属于任何阶段）。
    output_path 只在 CREATE/ENCODE 阶段有值。
    """

    source_path: Union[str, os.PathLike]
    stage: Optional[Stage]
    error: BaseException
    output_path: Optional[str] = None

    ok = False

    @property
    def message(self) -> str:
        """可读的错误信息：<阶段动作> <路径>: <原因>"""
        if self.stage is None:
            return f"converting {self.source_path}: {self.error}"
        path = self.output_path if self.stage in (Stage.CREATE, Stage.ENCODE) else self.source_path
        return f"{_STAGE_VERBS[self.stage]} {path}: {self.error}"

    def __str__(self) -> str:
        return self.message


ConversionOutcome = Union[Success, Failure]


@dataclass
class BatchReport:
    """一次批处理的汇总结果，失败按到达顺序记录"""

    success_count: int = 0
    failures: List[Failure] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count

    @property
    def ok(self) -> bool:
        return not self.failures

    def record(self, outcome: ConversionOutcome) -> None:
        """记录一个结果（只由调用线程消费）"""
        if outcome.ok:
            self.success_count += 1
        else:
            self.failures.append(outcome)
