from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List

from models.maintenance import AlertThresholds


class Settings(BaseSettings):
    # MongoDB Configuration
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "flightops"
    
    # Application Configuration
    frontend_url: str = "http://localhost:3000"
    environment: str = "development"
    cors_origins: List[str] = ["*"]
    
    # Maintenance due calculation
    maintenance_default_component: str = "Airframe"
    maintenance_alert_days_prior: int = 30
    maintenance_alert_hours_prior: float = 25.0
    maintenance_alert_cycles_prior: int = 50
    # Legacy behaviour: treat a never-completed Interval task as completed today
    maintenance_baseline_fallback_to_today: bool = False
    
    def get_alert_thresholds(self) -> AlertThresholds:
        """Default alert-prior values for tasks that do not set their own"""
        return AlertThresholds(
            days=self.maintenance_alert_days_prior,
            hours=self.maintenance_alert_hours_prior,
            cycles=self.maintenance_alert_cycles_prior,
        )
    
    class Config:
        env_file = ".env"
        case_sensitive = False

@lru_cache()
def get_settings():
    return Settings()
