"""
Variable Source Module

This module handles:
1. Downloading the variable list from the HTTP endpoint
2. Validating the JSON payload
3. Building an immutable VariableTable for the formula engine
"""

import logging
from typing import Any, List, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from formula_tag_engine.config import get_settings
from formula_tag_engine.exceptions import VariableSourceError
from formula_tag_engine.models.variable_models import VariableRecord, VariableTable

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(List[VariableRecord])


def parse_variable_payload(payload: Any) -> VariableTable:
    """
    Build a VariableTable from the decoded JSON payload.

    Args:
        payload: Decoded JSON, expected to be a list of {id, name, value}

    Returns:
        VariableTable: Variables in payload order; only name and value are kept

    Raises:
        VariableSourceError: If the payload is not a list of valid records,
            or two records share a name
    """
    try:
        records = _records_adapter.validate_python(payload)
        return VariableTable(variables=[record.to_variable() for record in records])
    except ValidationError as e:
        raise VariableSourceError(f"Invalid variable payload: {e}") from e


class VariableSource:
    """Fetches the list of known variables from an HTTP endpoint."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        self.url = url or settings.variable_source_url
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.session = session or requests.Session()

    def fetch(self) -> VariableTable:
        """
        Download and validate the variable list.

        Returns:
            VariableTable: A complete table; partial tables are never returned

        Raises:
            VariableSourceError: If the request fails, the response is not JSON,
                or the payload does not validate
        """
        headers = {"Accept": "application/json"}

        try:
            logger.info(f"Fetching variables from {self.url}")
            response = self.session.get(self.url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.JSONDecodeError as e:
            logger.error(f"Variable source returned invalid JSON: {e}")
            raise VariableSourceError(f"Invalid JSON from {self.url}: {e}") from e
        except requests.exceptions.RequestException as e:
            error_msg = f"Failed to fetch variables from {self.url}: {e}"
            if getattr(e, "response", None) is not None:
                error_msg += f" (status {e.response.status_code})"
            logger.error(error_msg)
            raise VariableSourceError(error_msg) from e

        try:
            table = parse_variable_payload(payload)
        except VariableSourceError:
            logger.error(f"Variable source at {self.url} returned an invalid payload")
            raise

        logger.info(f"Loaded {len(table)} variables")
        return table


def fetch_variables(url: Optional[str] = None) -> VariableTable:
    """Fetch the variable table with default settings."""
    return VariableSource(url=url).fetch()
