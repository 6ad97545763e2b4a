from typing import Any, Dict, List, Optional

from datasources.base import SummarizerConnector
from datasources.exceptions import DataSourceError
from datasources.helpers import post_json
from engine.exceptions import SummarizerError, SummarizerNotConfigured, SummarizerUnavailable

HEALTH_PATH = "/openai/deployments"


class AzureOpenAIConnector(SummarizerConnector):
    health_path = HEALTH_PATH

    def __init__(
        self,
        base_url: str,
        api_key: str,
        deployment: str,
        api_version: str,
        timeout: int = 60,
        temperature: float = 1.0,
        max_completion_tokens: int = 10000,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(base_url, timeout=timeout, headers=headers)
        self.api_key = api_key
        self.deployment = deployment
        self.api_version = api_version
        self.temperature = temperature
        self.max_completion_tokens = max_completion_tokens

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_key and self.deployment)

    def _headers(self) -> Dict[str, str]:
        return {**self.headers, "Content-Type": "application/json", "api-key": self.api_key}

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        if not self.configured:
            raise SummarizerNotConfigured(
                "Summarizer configuration missing: set FUNNELWATCH_AZURE_OPENAI_BASE, "
                "FUNNELWATCH_AZURE_OPENAI_KEY and FUNNELWATCH_AZURE_OPENAI_DEPLOYMENT"
            )
        url = f"{self.base_url}/openai/deployments/{self.deployment}/chat/completions"
        payload: Dict[str, Any] = {
            "messages": messages,
            "temperature": self.temperature,
            "max_completion_tokens": self.max_completion_tokens,
        }
        try:
            data = await post_json(
                url,
                payload,
                params={"api-version": self.api_version},
                headers=self._headers(),
                timeout=self.timeout,
                invalid_msg="Summarizer request failed",
                timeout_msg="Summarizer request timed out",
                unavailable_msg="Cannot reach summarizer at",
            )
        except DataSourceError as e:
            raise SummarizerUnavailable(str(e)) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise SummarizerError("Summarizer returned no choices") from e
        if not content:
            raise SummarizerError("Summarizer returned an empty response")
        return str(content)
