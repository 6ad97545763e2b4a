from typing import Any, Dict, List, Optional

from datasources.base import TableStoreConnector
from datasources.exceptions import InvalidQuery
from datasources.helpers import fetch_json
from datasources.query import QueryParams

HEALTH_PATH = "/rest/v1/"


class PostgRESTConnector(TableStoreConnector):
    health_path = HEALTH_PATH

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: int = 30,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(base_url, timeout=timeout, headers=headers)
        self.api_key = api_key

    def _headers(self) -> Dict[str, str]:
        headers = {
            **self.headers,
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def select(self, table: str, query: QueryParams) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/rest/v1/{table}"
        rows = await fetch_json(
            url,
            params=query.to_params(),
            headers=self._headers(),
            timeout=self.timeout,
            invalid_msg=f"Store query on {table} failed",
            timeout_msg=f"Store query on {table} timed out",
            unavailable_msg="Cannot reach store at",
        )
        if not isinstance(rows, list):
            raise InvalidQuery(f"Store query on {table} returned {type(rows).__name__}, expected list")
        return rows
