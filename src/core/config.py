from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 앱 설정
    APP_NAME: str = "job-tracker"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    # 비어 있으면 stderr에만 로그를 남긴다
    LOG_FILE: str | None = None

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # DB 설정
    DATABASE_URL: str = "sqlite:///./job_tracker.db"

    # JWT 설정
    JWT_SECRET_KEY: str = "dev-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # 허용 목록(allowed_user)에 없어도 접근 가능한 관리자 이메일
    # .env 예시: ADMIN_EMAILS=["admin@example.com"]
    ADMIN_EMAILS: list[str] = []

    # 이미지 인코딩 (업로드 사진 → JPEG data URL)
    IMAGE_MAX_WIDTH: int = 800
    IMAGE_JPEG_QUALITY: int = 60
    IMAGE_MAX_DATA_LENGTH: int = 300_000
    IMAGE_WORKERS: int = 4

    @property
    def admin_emails(self) -> set[str]:
        return {email.strip().lower() for email in self.ADMIN_EMAILS if email.strip()}

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
