"""
logging.py - 로깅 설정

- Rich 콘솔 로깅 (기본)
- JSON 한 줄 로깅 (수집기 연동용)
- 작업 실행 시간 추적
"""

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone

from rich.console import Console
from rich.logging import RichHandler


class JSONFormatter(logging.Formatter):
    """JSON 형식 로그 포맷터"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        if hasattr(record, "context"):
            log_data["context"] = record.context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logger(
    name: str = "profitability",
    level: int = logging.INFO,
    json_format: bool = False,
) -> logging.Logger:
    """Rich 포맷 로거 설정 (핸들러는 한 번만 추가)"""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        if json_format:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
        else:
            handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True)
            handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger


@contextmanager
def track(logger: logging.Logger, operation: str, **context):
    """
    작업 실행 시간 추적

    사용법:
        with track(logger, "fee_calculation", category="Books"):
            engine.calculate(request, catalog)
    """
    start_time = time.perf_counter()
    try:
        yield
    except Exception as e:
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"failed: {operation} ({elapsed_ms:.2f}ms) - {e}",
            extra={"context": {**context, "duration_ms": elapsed_ms}},
        )
        raise
    else:
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"done: {operation} ({elapsed_ms:.2f}ms)",
            extra={"context": {**context, "duration_ms": elapsed_ms}},
        )
