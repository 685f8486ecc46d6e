"""처리 시간 측정 유틸리티."""

import time
from contextlib import contextmanager

from loguru import logger


class _Elapsed:
    seconds: float = 0.0

    @property
    def ms(self) -> float:
        return self.seconds * 1000


@contextmanager
def timer(label: str, warn_ms: float | None = None):
    """블록 실행 시간을 DEBUG로 남긴다. warn_ms를 넘기면 WARNING.

    사용법:
        with timer("cost summary (120 records)") as t:
            ...
        t.ms
    """
    t = _Elapsed()
    start = time.perf_counter()
    try:
        yield t
    finally:
        t.seconds = time.perf_counter() - start
        if warn_ms is not None and t.ms > warn_ms:
            logger.warning(f"[{label}] {t.ms:.1f}ms (> {warn_ms:.0f}ms)")
        else:
            logger.debug(f"[{label}] {t.ms:.1f}ms")
