import asyncio
from pathlib import Path

import httpx
import pytest

from unstructured_client import UnstructuredClient

from .helpers import PDF_BYTES


@pytest.fixture
def sample_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "sample.pdf"
    path.write_bytes(PDF_BYTES)
    return path


@pytest.fixture
def run_partition():
    """Run one partition_file call against a MockTransport handler."""

    def _run(handler, path, params=None, base_url="http://testserver", **kwargs):
        async def go():
            transport = httpx.MockTransport(handler)
            async with UnstructuredClient(base_url, transport=transport, **kwargs) as client:
                return await client.partition_file(path, params)

        return asyncio.run(go())

    return _run
