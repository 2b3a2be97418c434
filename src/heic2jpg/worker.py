"""工作线程初始化 - 注册 HEIF 解码插件"""

import logging
from threading import local

logger = logging.getLogger(__name__)

_thread_data = local()

# 每个线程内 libheif 使用的解码线程数
DECODE_THREADS = 4


def init_worker() -> None:
    """
    每个线程初始化一次 - 注册 HEIF 格式插件

    在线程池中使用时，每个工作线程在首次解码前调用此函数，
    之后 PIL.Image.open 即可识别 HEIC 文件。
    """
    from pillow_heif import options, register_heif_opener

    # 设置 HEIF 解码线程数
    options.DECODE_THREADS = DECODE_THREADS
    register_heif_opener()

    _thread_data.initialized = True
    logger.debug("HEIF opener registered (decode threads: %d)", DECODE_THREADS)


def get_worker():
    """
    获取当前线程的工作器

    如果当前线程尚未初始化，会自动调用 init_worker()。

    Returns:
        线程本地对象
    """
    if not getattr(_thread_data, "initialized", False):
        init_worker()
    return _thread_data
