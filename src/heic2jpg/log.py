"""日志配置"""

import logging
import sys


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    配置日志输出到 stderr

    Args:
        verbose: 为 True 时输出 DEBUG 级别的详细信息

    Returns:
        heic2jpg 包的 logger
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,  # 覆盖已有配置
    )

    logger = logging.getLogger("heic2jpg")
    logger.debug("Logging initialized (verbose=%s)", "ON" if verbose else "OFF")
    return logger
