from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    google_maps_api_key: str = ""
    geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    distance_matrix_url: str = "https://maps.googleapis.com/maps/api/distancematrix/json"
    geo_timeout_seconds: float = 5.0
    geo_total_timeout_seconds: float = 10.0
    pricing_timezone: str = "Asia/Ho_Chi_Minh"
    app_env: str = "development"
    log_level: str = "INFO"
    new_relic_license_key: str = ""
    new_relic_app_name: str = "HomeMove-Pricing"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()
