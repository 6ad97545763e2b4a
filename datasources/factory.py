"""
Factory for creating data source connectors based on configuration.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from connectors.azure_openai import AzureOpenAIConnector
from connectors.postgrest import PostgRESTConnector


class DataSourceFactory:

    @staticmethod
    def create_store(config):
        from config import STORE_BACKEND_POSTGREST
        if config.store_backend == STORE_BACKEND_POSTGREST:
            return PostgRESTConnector(config.store_url, api_key=config.store_api_key, timeout=config.store_timeout)
        raise ValueError("Unsupported store backend")

    @staticmethod
    def create_summarizer(config):
        from config import SUMMARIZER_BACKEND_AZURE_OPENAI, settings
        if config.summarizer_backend == SUMMARIZER_BACKEND_AZURE_OPENAI:
            return AzureOpenAIConnector(
                config.azure_openai_base or "",
                api_key=config.azure_openai_key,
                deployment=config.azure_openai_deployment,
                api_version=config.azure_openai_api_version,
                timeout=config.summarizer_timeout,
                temperature=settings.summarizer_temperature,
                max_completion_tokens=settings.summarizer_max_completion_tokens,
            )
        raise ValueError("Unsupported summarizer backend")
