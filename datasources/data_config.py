"""
Connection settings for the table store and the narrative summarizer

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings
from config import (
    STORE_BACKEND_POSTGREST,
    SUMMARIZER_BACKEND_AZURE_OPENAI,
    FUNNELWATCH_STORE_BACKEND,
    FUNNELWATCH_STORE_URL,
    FUNNELWATCH_STORE_API_KEY,
    FUNNELWATCH_STORE_TIMEOUT,
    FUNNELWATCH_SUMMARIZER_BACKEND,
    FUNNELWATCH_AZURE_OPENAI_BASE,
    FUNNELWATCH_AZURE_OPENAI_KEY,
    FUNNELWATCH_AZURE_OPENAI_DEPLOYMENT,
    FUNNELWATCH_AZURE_OPENAI_API_VERSION,
    FUNNELWATCH_SUMMARIZER_TIMEOUT,
    FUNNELWATCH_STARTUP_TIMEOUT,
)

class DataSourceSettings(BaseSettings):
    store_backend: str = FUNNELWATCH_STORE_BACKEND
    store_url: str = FUNNELWATCH_STORE_URL
    store_api_key: str = FUNNELWATCH_STORE_API_KEY
    store_timeout: int = FUNNELWATCH_STORE_TIMEOUT
    summarizer_backend: str = FUNNELWATCH_SUMMARIZER_BACKEND
    azure_openai_base: Optional[str] = FUNNELWATCH_AZURE_OPENAI_BASE or None
    azure_openai_key: str = FUNNELWATCH_AZURE_OPENAI_KEY
    azure_openai_deployment: str = FUNNELWATCH_AZURE_OPENAI_DEPLOYMENT
    azure_openai_api_version: str = FUNNELWATCH_AZURE_OPENAI_API_VERSION
    summarizer_timeout: int = FUNNELWATCH_SUMMARIZER_TIMEOUT
    startup_timeout: int = FUNNELWATCH_STARTUP_TIMEOUT
    @field_validator("store_url", "azure_openai_base", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return str(v).rstrip("/") if v is not None else v

    @field_validator("store_backend", mode="before")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        value = str(v or "").strip().lower()
        if value not in {STORE_BACKEND_POSTGREST}:
            raise ValueError(f"Unsupported store backend: {value!r}")
        return value

    @field_validator("summarizer_backend", mode="before")
    @classmethod
    def validate_summarizer_backend(cls, v: str) -> str:
        value = str(v or "").strip().lower()
        if value not in {SUMMARIZER_BACKEND_AZURE_OPENAI}:
            raise ValueError(f"Unsupported summarizer backend: {value!r}")
        return value

    model_config = {"env_prefix": "FUNNELWATCH_", "extra": "ignore"}
