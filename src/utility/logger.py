import sys

from loguru import logger

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def setup_logger(debug: bool = False, log_file: str | None = None):
    """앱 시작 시 한 번 호출. stderr + (설정 시) 날짜별로 회전하는 파일 sink."""
    level = "DEBUG" if debug else "INFO"
    logger.remove()
    logger.add(sys.stderr, format=_FORMAT, level=level)

    if log_file:
        # 작업장 PC에서 며칠 치 기록을 확인할 수 있도록 파일로도 남긴다
        logger.add(
            log_file,
            format=_FORMAT,
            level=level,
            rotation="00:00",
            retention="14 days",
            encoding="utf-8",
            enqueue=True,
        )
    return logger
