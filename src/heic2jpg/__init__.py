"""
HEIC 批量转 JPG - 有界并发的批量转换器

示例用法:
    from heic2jpg import convert_file

    # 单个文件转换
    convert_file("IMG_0001.HEIC", "out", quality=90)

    # 批量转换
    from heic2jpg import BatchScheduler, ConversionJob, filter_heic_files

    files = filter_heic_files(["a.heic", "b.HEIC", "photos"])
    report = BatchScheduler(max_workers=4).run(
        ConversionJob(f, "out", 90) for f in files
    )
    print(report.failure_count)
"""

__version__ = "1.0.0"

from .batch import BatchScheduler, run_batch
from .converter import (
    ConversionTask,
    convert_file,
    decode_heic,
    encode_jpeg,
    filter_heic_files,
    normalize_file_name,
    resolve_output_path,
)
from .errors import AccessError, ConfigError, Heic2JpgError
from .models import BatchReport, ConversionJob, Failure, Stage, Success
from .worker import get_worker, init_worker

__all__ = [
    "__version__",
    "AccessError",
    "BatchReport",
    "BatchScheduler",
    "ConfigError",
    "ConversionJob",
    "ConversionTask",
    "Failure",
    "Heic2JpgError",
    "Stage",
    "Success",
    "convert_file",
    "decode_heic",
    "encode_jpeg",
    "filter_heic_files",
    "get_worker",
    "init_worker",
    "normalize_file_name",
    "resolve_output_path",
    "run_batch",
]
