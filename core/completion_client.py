import requests

from .errors import ServiceCallError

ANTHROPIC_VERSION = "2023-06-01"
WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search", "max_uses": 5}


class AnthropicClient:
    def __init__(self, api_key: str, base_url: str = "https://api.anthropic.com/v1", timeout: int = 300):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def create_message(
        self,
        model: str,
        max_tokens: int,
        messages: list,
        system: str = None,
        web_search: bool = False,
    ) -> dict:
        """
        Send one Messages API request and return the decoded response body.

        The body carries an ordered `content` list of typed segments
        (text, server_tool_use, web_search_tool_result, ...).
        """
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json"
        }
        payload = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": messages
        }
        if system:
            payload["system"] = system
        if web_search:
            payload["tools"] = [WEB_SEARCH_TOOL]

        try:
            response = requests.post(
                f"{self.base_url}/messages",
                json=payload,
                headers=headers,
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.Timeout as e:
            raise ServiceCallError(f"Completion request timed out after {self.timeout}s") from e
        except requests.HTTPError as e:
            raise ServiceCallError(
                f"Completion request failed: {e.response.status_code} - {e.response.text[:300]}"
            ) from e
        except (requests.RequestException, ValueError) as e:
            raise ServiceCallError(f"Completion request failed: {e}") from e
