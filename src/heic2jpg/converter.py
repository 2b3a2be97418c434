"""核心转换功能模块"""

import logging
import os
import stat
from pathlib import Path
from typing import BinaryIO, Callable, Iterable, List, Union

from PIL import Image

from .errors import AccessError
from .models import Classification, ConversionJob, ConversionOutcome, Failure, Stage, Success
from .worker import get_worker

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

Decoder = Callable[[BinaryIO], Image.Image]
Encoder = Callable[[BinaryIO, Image.Image, int], None]

HEIC_EXT = ".heic"
JPG_EXT = ".jpg"

# 默认输出目录：当前工作目录
DEFAULT_OUTPUT_DIR = "."


def normalize_file_name(path: PathLike) -> str:
    """
    根据输入路径生成输出文件名

    只识别 ".HEIC" 与 ".heic" 两种写法，其他大小写组合（如 ".Heic"）
    保留原后缀再追加 ".jpg"。

    Args:
        path: 输入文件路径

    Returns:
        输出文件名（不含目录）
    """
    name = os.path.basename(os.fspath(path))
    if name.endswith(".HEIC"):
        name = name[: -len(".HEIC")]
    elif name.endswith(HEIC_EXT):
        name = name[: -len(HEIC_EXT)]
    return name + JPG_EXT


def resolve_output_path(source_path: PathLike, output_dir: PathLike = DEFAULT_OUTPUT_DIR) -> str:
    """
    计算输出文件路径

    默认输出目录 "." 时返回相对当前目录的文件名，否则拼接到输出目录下。
    """
    name = normalize_file_name(source_path)
    if os.fspath(output_dir) == DEFAULT_OUTPUT_DIR:
        return name
    return os.path.join(os.path.normpath(os.fspath(output_dir)), name)


def classify_path(path: PathLike) -> Classification:
    """
    stat 一次并分类

    Raises:
        AccessError: 路径无法访问
    """
    try:
        mode = os.stat(path).st_mode
    except OSError as e:
        logger.debug("accessing path %s: %s", path, e)
        raise AccessError(path, e) from e

    if stat.S_ISDIR(mode):
        return Classification.DIRECTORY
    if stat.S_ISREG(mode):
        return Classification.REGULAR_FILE
    return Classification.OTHER


def filter_heic_files(paths: Iterable[PathLike]) -> List[PathLike]:
    """
    按输入顺序筛选 HEIC 文件

    目录直接跳过（不递归），扩展名不区分大小写。任何一个路径无法访问时
    立即抛出异常，不返回部分结果。

    Args:
        paths: 候选路径

    Returns:
        选中的路径列表（保持输入顺序）

    Raises:
        AccessError: 某个路径 stat 失败
    """
    selected = []
    for path in paths:
        kind = classify_path(path)
        if kind is Classification.DIRECTORY:
            logger.debug("This is a directory. Skipping: %s", path)
            continue
        if kind is Classification.REGULAR_FILE and os.path.basename(os.fspath(path)).lower().endswith(HEIC_EXT):
            logger.debug("Found .heic file: %s", path)
            selected.append(path)
    return selected


def decode_heic(stream: BinaryIO) -> Image.Image:
    """
    解码 HEIC 数据流为 RGB 图像

    带透明通道的图片合成到白色背景上。
    """
    # 确保 HEIF 插件已注册
    get_worker()

    with Image.open(stream) as img:
        img.load()

        # 处理不同模式
        if img.mode in ("RGBA", "LA", "P"):
            # 带透明通道的图片，转换为白色背景
            background = Image.new("RGB", img.size, (255, 255, 255))
            if img.mode != "RGBA":
                img = img.convert("RGBA")
            background.paste(img, mask=img.split()[-1])
            return background
        if img.mode != "RGB":
            return img.convert("RGB")
        return img.copy()


def encode_jpeg(stream: BinaryIO, image: Image.Image, quality: int) -> None:
    """以 JPEG 格式写出，quality 原样传给编码器"""
    image.save(stream, format="JPEG", quality=quality)


class ConversionTask:
    """
    单个文件的转换：打开 → 解码 → 创建输出 → 编码

    每一步的错误都会被包装为对应阶段的 Failure 返回，不会抛出。
    编码失败时已创建的输出文件保留在磁盘上。
    """

    def __init__(self, decoder: Decoder = decode_heic, encoder: Encoder = encode_jpeg):
        self.decoder = decoder
        self.encoder = encoder

    def __call__(self, job: ConversionJob) -> ConversionOutcome:
        return self.execute(job)

    def execute(self, job: ConversionJob) -> ConversionOutcome:
        src = job.source_path
        logger.debug("Converting file: %s", src)

        try:
            reader = open(src, "rb")
        except (OSError, ValueError) as e:
            return Failure(src, Stage.OPEN, e)

        with reader:
            try:
                image = self.decoder(reader)
            except Exception as e:
                return Failure(src, Stage.DECODE, e)

        out = resolve_output_path(src, job.output_dir)
        try:
            writer = open(out, "wb")
        except (OSError, ValueError) as e:
            return Failure(src, Stage.CREATE, e, output_path=out)

        try:
            logger.debug("Writing to output file: %s with quality %d", out, job.quality)
            self.encoder(writer, image, job.quality)
        except Exception as e:
            return Failure(src, Stage.ENCODE, e, output_path=out)
        finally:
            _close_quietly(writer, out)

        logger.debug("Successfully converted %s to %s", src, out)
        return Success(src, out)


def _close_quietly(writer: BinaryIO, path: str) -> None:
    """关闭输出文件，关闭错误不算作任务失败"""
    try:
        writer.close()
    except OSError as e:
        logger.debug("closing output file %s: %s", path, e)


def convert_file(source_path: PathLike, output_dir: PathLike = DEFAULT_OUTPUT_DIR, quality: int = 100) -> ConversionOutcome:
    """
    HEIC 转 JPG（单个文件）

    Args:
        source_path: 输入文件路径
        output_dir: 输出目录
        quality: JPEG 质量 (1-100)

    Returns:
        Success 或 Failure
    """
    return ConversionTask().execute(ConversionJob(source_path, output_dir, quality))
