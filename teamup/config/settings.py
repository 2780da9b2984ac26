from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Used by the reconciliation job
    store_timeout_seconds: int = 60
    store_page_size: int = 1000  # keep <= PostgREST max-rows

    # AWS (will read from uppercase env vars automatically)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"

    # Notifications
    notification_queue_url: Optional[str] = None
    notification_operator_email: str = "operator@teamup.local"
    notification_workers: int = 4
    notification_queue_size: int = 1000
    notification_publish_attempts: int = 3
    notification_retry_backoff_seconds: float = 0.5
    notification_overflow_policy: str = "drop_oldest"  # drop_oldest | reject

    # Groups
    admin_member_ids: str = ""
    reconcile_interval_seconds: int = 300  # 0 disables orphaned bulletin cleanup

    # Search
    search_default_limit: int = 20
    search_max_limit: int = 100

    # App
    app_name: str = "teamup-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:3001"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_admin_member_ids(self) -> List[str]:
        return [m.strip() for m in self.admin_member_ids.split(",") if m.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
