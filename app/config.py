"""
CreditLens 설정 관리

모든 설정값은 .env 파일에서 관리합니다.
사용법:
    from app.config import settings
    limit = settings.DEFAULT_PAGE_LIMIT
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # .env에 정의되지 않은 변수 무시
    )

    # === 환경 ===
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # === 목록 조회 ===
    DEFAULT_PAGE_LIMIT: int = 10

    # 허용되지 않은 연산자: True면 예외, False면 통과 처리 (구버전 동작)
    STRICT_OPERATORS: bool = True

    # === 필터 상태 직렬화 ===
    STATE_FORMAT_VERSION: int = 1
    STATE_EXPORT_INDENT: Optional[int] = None


# 싱글톤 인스턴스
settings = Settings()
