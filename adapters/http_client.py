import requests
from typing import Optional, Tuple, Dict, Any
from requests.exceptions import RequestException
from infrastructure.telemetry import get_tracer
from requests import Session


class HTTPClientAdapter:
    """Adapter for making HTTP requests with telemetry and error handling."""

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = "UbiflowClient/1.0",
        verify_ssl: bool = True,
        session: Optional[Session] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.verify_ssl = verify_ssl
        self.session = session if session is not None else requests.Session()
        self.headers = {"User-Agent": user_agent, "Accept": "application/json"}

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[int, str]:
        """
        Perform an HTTP request and return its raw outcome.

        Status codes are not checked here; callers decide what an error is.

        Returns:
            Tuple of (status_code, body_text)
        """
        with get_tracer().start_as_current_span(f"http.{method.lower()}") as span:
            span.set_attribute("url", url)

            try:
                response = self.session.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    timeout=self.timeout,
                    headers={**self.headers, **(headers or {})},
                    verify=self.verify_ssl,
                )
            except RequestException as e:
                span.set_attribute("error", str(e))
                raise

            content = response.text
            span.set_attributes(
                {
                    "status_code": response.status_code,
                    "content_length": len(content),
                }
            )
            return (response.status_code, content)
