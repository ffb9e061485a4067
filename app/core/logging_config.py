"""
애플리케이션 로깅 설정.

app.main 임포트 시 가장 먼저 한 번 호출됩니다.
uvicorn 로거도 같은 포맷/레벨을 사용하도록 맞춥니다.
"""
import logging
import logging.config

from app.core.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """
    dictConfig 기반 콘솔 로깅 설정.

    Args:
        level: 로그 레벨 (기본: settings.log_level / LOG_LEVEL)
    """
    global _configured
    if _configured:
        return

    log_level = (level or settings.log_level).upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stderr",
                },
            },
            "root": {"handlers": ["console"], "level": log_level},
            "loggers": {
                "uvicorn": {"level": log_level},
                "uvicorn.error": {"level": log_level},
                "uvicorn.access": {"level": log_level},
                # 연결 풀 디버그 로그는 너무 많음
                "pymongo": {"level": "WARNING"},
            },
        }
    )
    _configured = True
    logging.getLogger(__name__).debug(f"Logging configured: level={log_level}")
