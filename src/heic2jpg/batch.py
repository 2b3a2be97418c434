"""批量任务调度模块"""

import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Optional, Union

from .converter import DEFAULT_OUTPUT_DIR, ConversionTask
from .models import BatchReport, ConversionJob, ConversionOutcome, Failure

logger = logging.getLogger(__name__)


def default_max_workers() -> int:
    """默认并发数：CPU 核数的两倍"""
    return (os.cpu_count() or 1) * 2


class BatchScheduler:
    """
    有界并发的批量调度器

    每个任务在执行前获取一个并发槽位，结束时（无论成功、失败还是异常）
    释放。单个任务的失败不影响其他任务，run() 阻塞直到所有任务都有结果。
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        task: Optional[Callable[[ConversionJob], ConversionOutcome]] = None,
        on_outcome: Optional[Callable[[ConversionOutcome], None]] = None,
    ):
        """
        Args:
            max_workers: 最大并发数，默认 CPU 核数 x 2
            task: 执行单个 ConversionJob 的可调用对象，默认 ConversionTask()
            on_outcome: 每个结果到达时的回调（在调用线程中执行）
        """
        if max_workers is None:
            max_workers = default_max_workers()
        if max_workers < 1:
            raise ValueError(f"max_workers must be a positive integer, got {max_workers}")

        self.max_workers = max_workers
        self.task = task if task is not None else ConversionTask()
        self.on_outcome = on_outcome
        self._slots = threading.BoundedSemaphore(max_workers)

    @contextmanager
    def _slot(self):
        """占用一个并发槽位"""
        self._slots.acquire()
        try:
            yield
        finally:
            self._slots.release()

    def _execute(self, job: ConversionJob) -> ConversionOutcome:
        with self._slot():
            return self.task(job)

    def run(self, jobs: Iterable[ConversionJob]) -> BatchReport:
        """
        执行所有任务并汇总结果

        Args:
            jobs: 待执行的任务

        Returns:
            本次批处理的 BatchReport（失败按完成顺序排列）
        """
        jobs = list(jobs)
        report = BatchReport()
        if not jobs:
            return report

        logger.debug("Dispatching %d job(s) with %d worker(s)", len(jobs), self.max_workers)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: Dict[Future, ConversionJob] = {
                executor.submit(self._execute, job): job for job in jobs
            }

            for future in as_completed(futures):
                job = futures[future]
                try:
                    outcome = future.result()
                except Exception as e:
                    # 任务内部的意外异常
                    logger.debug("Unexpected error converting %s", job.source_path, exc_info=True)
                    outcome = Failure(job.source_path, None, e)

                report.record(outcome)
                self._notify(outcome)

        return report

    def run_files(
        self,
        paths: Iterable[Union[str, os.PathLike]],
        output_dir: Union[str, os.PathLike] = DEFAULT_OUTPUT_DIR,
        quality: int = 100,
    ) -> BatchReport:
        """为每个文件创建一个 ConversionJob 并执行"""
        return self.run(ConversionJob(p, output_dir, quality) for p in paths)

    def _notify(self, outcome: ConversionOutcome) -> None:
        """调用 on_outcome 回调，回调出错不影响后续结果的收集"""
        if self.on_outcome is None:
            return
        try:
            self.on_outcome(outcome)
        except Exception:
            logger.debug("on_outcome callback failed for %s", outcome.source_path, exc_info=True)


def run_batch(
    jobs: Iterable[ConversionJob],
    max_workers: Optional[int] = None,
    on_outcome: Optional[Callable[[ConversionOutcome], None]] = None,
) -> BatchReport:
    """使用默认 ConversionTask 执行批处理"""
    return BatchScheduler(max_workers, on_outcome=on_outcome).run(jobs)
