from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    database_path: str = "data/studio.db"
    scratch_dir: str = "scratch"
    scratch_retention_hours: int = 6

    heygen_api_keys: str = ""
    heygen_key_quota: int = 10
    heygen_base_url: str = "https://api.heygen.com"
    heygen_submit_timeout_sec: int = 300
    heygen_status_timeout_sec: int = 30
    default_voice_id: str = "1bd001e7e50f421d891986aad5158bc8"

    poll_interval_sec: float = 5.0
    poll_max_attempts: int = 60

    download_timeout_sec: int = 300
    ffmpeg_binary: str = ""
    ffmpeg_timeout_sec: int = 600
    watermark_crop_width: int = 150
    watermark_crop_height: int = 80

    public_host_url: str = "https://catbox.moe/user/api.php"
    publish_timeout_sec: int = 120

    credits_per_video: int = 20

    admin_api_token: str = ""
    api_base_url: str = "http://localhost:3001"
    telegram_bot_token: str = ""

    def api_keys(self) -> list[str]:
        return [k.strip() for k in self.heygen_api_keys.split(",") if k.strip()]


settings = Settings()
