"""
HTTP client for the cycle template endpoint.
"""
import os
from typing import Any, Dict, List, Optional, Union

import requests
from aws_lambda_powertools import Logger

from src.services.exceptions import TemplateLoadError
from src.utils.logging import error_context

logger = Logger()

TEMPLATES_PATH = "/api/cycles/templates"

class TemplatesClient:
    """Client for fetching cycle templates from the backend API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retries: Optional[int] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: API base URL, defaults to ``TEMPLATES_API_URL``
            timeout: Request timeout in seconds, defaults to ``TEMPLATES_FETCH_TIMEOUT`` or 10
            retries: Extra attempts after a failed request, defaults to
                ``TEMPLATES_FETCH_RETRIES`` or 2

        Raises:
            EnvironmentError: If no base URL is given and TEMPLATES_API_URL is not set
        """
        if base_url is None:
            try:
                base_url = os.environ["TEMPLATES_API_URL"]
            except KeyError:
                raise EnvironmentError(
                    "TEMPLATES_API_URL environment variable not set. "
                    "This variable must be set to the backend API base URL."
                )
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else float(
            os.environ.get("TEMPLATES_FETCH_TIMEOUT", "10")
        )
        self.retries = retries if retries is not None else int(
            os.environ.get("TEMPLATES_FETCH_RETRIES", "2")
        )

    def fetch_templates(self) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Fetch the raw cycle template map.

        Connection errors and server errors are retried up to ``retries``
        times. Client errors are not retried.

        Returns:
            Template map keyed by cycle type, or a list of stage template rows

        Raises:
            TemplateLoadError: If the templates cannot be fetched
        """
        url = f"{self.base_url}{TEMPLATES_PATH}"
        last_error: Optional[Exception] = None

        for attempt in range(1, self.retries + 2):
            try:
                response = requests.get(
                    url,
                    headers={"Cache-Control": "no-store"},
                    timeout=self.timeout
                )
                response.raise_for_status()
                return response.json()
            except requests.exceptions.HTTPError as e:
                last_error = e
                if e.response is not None and e.response.status_code < 500:
                    break
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                last_error = e
            except ValueError as e:
                last_error = e
                break

            logger.warning("Template fetch attempt failed", extra=error_context(
                last_error, url=url, attempt=attempt
            ))

        raise TemplateLoadError(f"Failed to fetch cycle templates: {last_error}")
