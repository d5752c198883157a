"""Application Settings - Central Configuration"""
from functools import lru_cache
from typing import Dict, List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Helpdesk backend (field definitions, master data, tickets, current user)
    helpdesk_api_base_url: str = "http://localhost:3001/api"
    helpdesk_api_token: str = ""
    request_timeout_seconds: float = 30.0

    # Logging
    logs_path: str = "./logs"
    log_level: str = "INFO"

    # CORS - set to "*" to allow all origins
    cors_origins: str = "*"

    # SLA policy (hours until due, by priority)
    sla_hours_urgent: int = 4
    sla_hours_high: int = 24
    sla_hours_medium: int = 72
    sla_hours_low: int = 168

    # Ticket draft rules
    title_min_length: int = 5
    description_min_length: int = 10

    # Organizational-unit autofill: field name/label keywords
    autofill_unit_keywords: str = "unit,department,divisi,bagian,organisasi,instansi,unit kerja,satuan kerja,cabang,capem,branch"

    # Roles whose tickets start in pending-approval
    approval_required_roles: str = "user,requester"

    # Classifier rule table: "default" or "banking"
    classifier_rule_set: str = "default"

    # Environment
    environment: str = "development"
    debug: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string to list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def autofill_unit_keywords_list(self) -> List[str]:
        """Parse autofill keywords string to list"""
        return [kw.strip().lower() for kw in self.autofill_unit_keywords.split(",") if kw.strip()]

    @property
    def approval_required_roles_list(self) -> List[str]:
        """Parse approval roles string to list"""
        return [r.strip().lower() for r in self.approval_required_roles.split(",") if r.strip()]

    @property
    def sla_hours_by_priority(self) -> Dict[str, int]:
        """SLA hours keyed by priority value"""
        return {
            "urgent": self.sla_hours_urgent,
            "high": self.sla_hours_high,
            "medium": self.sla_hours_medium,
            "low": self.sla_hours_low,
        }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
