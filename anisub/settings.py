from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    catalog_base_url: str = "https://www.animeparadise.moe"
    jimaku_api_base: str = "https://jimaku.app/api"
    jimaku_api_key: Optional[str] = None
    request_timeout: int = 30
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0"

    # Match titles without an AniList mapping by name (substring, no scoring)
    enable_title_fallback: bool = True
    max_aliases: int = 5

    log_level: str = "INFO"
    json_logs: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "ANISUB_"

    @property
    def effective_jimaku_key(self) -> str:
        return self.jimaku_api_key or "AAAAAAAABlkuAS5Gu5CmdaJFx5GDWXpl5TGqDsn00SOfknKmwQMPEko-1w"

settings = Settings()
