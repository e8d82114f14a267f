"""
unstructured_client/client.py
-----------------------------
Async client for the Unstructured partition endpoint.

Uploads one local file with its partitioning options as a multipart form
and decodes the returned elements. No retries: every failure is raised
straight to the caller as a ClientError subclass.
"""

import asyncio
import mimetypes
from pathlib import Path
from typing import Optional, Union

import httpx

from .logger import get_logger

from .config import API_KEY_HEADER, DEFAULT_BASE_URL, DEFAULT_TIMEOUT, PARTITION_PATH, USER_AGENT
from .exceptions import (
    APIError,
    DecodeError,
    FileAccessError,
    InvalidBaseURLError,
    RequestTimeoutError,
    TransportError,
)
from .models import ElementList, OutputFormat, PartitionParameters, parse_csv_elements, parse_elements

logger = get_logger("unstructured_client")


class UnstructuredClient:
    """
    Handle on one Unstructured API deployment.

    Create it once and reuse it; calls don't mutate it, so several tasks may
    share it. Close it with ``aclose()`` or use it as an async context manager.
    """

    def __init__(
        self,
        base_url: Union[str, httpx.URL] = DEFAULT_BASE_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        try:
            url = httpx.URL(str(base_url))
        except httpx.InvalidURL as e:
            raise InvalidBaseURLError(f"Invalid base URL {base_url!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidBaseURLError(f"Invalid base URL {base_url!r}: expected http(s)://host[:port]")

        self.base_url = url
        self.partition_url = url.join(PARTITION_PATH)

        headers = {"accept": "application/json", "user-agent": USER_AGENT}
        if api_key:
            headers[API_KEY_HEADER] = api_key
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport)

    async def __aenter__(self) -> "UnstructuredClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def partition_file(
        self, file_path: Union[str, Path], params: Optional[PartitionParameters] = None
    ) -> ElementList:
        """
        Partition a local file and return its elements.

        Raises FileAccessError before any network activity when the file
        can't be read, TransportError when no response arrives, APIError on a
        non-2xx status and DecodeError when the body isn't an element list.
        """
        if params is None:
            params = PartitionParameters()
        path = Path(file_path)

        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            logger.debug(f"Cannot read {path}: {e}")
            raise FileAccessError(path, e.strerror or str(e)) from e

        mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        files = {"files": (path.name, content, mime)}
        data = params.to_form_fields()

        logger.info(f"POST {self.partition_url} → {path.name} ({len(content)} bytes, options={sorted(data)})")
        try:
            r = await self._client.post(self.partition_url, files=files, data=data)
        except httpx.TimeoutException as e:
            logger.debug(f"Request to {self.partition_url} timed out: {e!r}")
            raise RequestTimeoutError(f"Request to {self.partition_url} timed out") from e
        except httpx.HTTPError as e:
            logger.debug(f"Request to {self.partition_url} failed: {e!r}")
            raise TransportError(f"Request to {self.partition_url} failed: {e}") from e

        logger.debug(f"RESPONSE → {r.status_code} {r.headers.get('content-type', '')}")
        if not r.is_success:
            logger.debug(f"HTTP {r.status_code}: {r.text[:200]}")
            raise _api_error(r)

        elements = _decode_elements(r)
        logger.info(f"Partitioned {path.name} → {len(elements)} elements")
        return elements


def _api_error(r: httpx.Response) -> APIError:
    detail = None
    try:
        payload = r.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        detail = payload.get("detail")
    return APIError(r.status_code, r.text, detail)


def _decode_elements(r: httpx.Response) -> ElementList:
    content_type = r.headers.get("content-type", "")
    if content_type.startswith(OutputFormat.TEXT_CSV.value):
        return parse_csv_elements(r.text)

    try:
        payload = r.json()
    except ValueError as e:
        logger.debug(f"Response is not valid JSON: {r.text[:200]}")
        raise DecodeError(f"Response is not valid JSON: {e}") from e
    return parse_elements(payload)
