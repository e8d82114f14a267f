"""
unstructured_client/cli.py
--------------------------
Partition one file through the Unstructured API and print its elements as JSON.

Every PartitionParameters field is exposed as a flag; flags left out are not
sent, so the service default applies.
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from .logger import configure_logger, get_logger

from .client import UnstructuredClient
from .config import DEFAULT_BASE_URL
from .exceptions import ClientError
from .models import ChunkingStrategy, ElementList, OutputFormat, PartitionParameters, Strategy

logger = get_logger("unstructured_cli")

PARAMETER_FIELDS = tuple(PartitionParameters.model_fields)


def _bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def _flag(group, name: str, help: str):
    group.add_argument(f"--{name}", type=_bool, nargs="?", const=True, metavar="BOOL", help=help)


def _many(group, name: str, help: str):
    group.add_argument(f"--{name}", nargs="+", action="extend", metavar="VALUE", help=help)


def _choice(group, name: str, enum, help: str):
    group.add_argument(f"--{name}", choices=[member.value for member in enum], help=help)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="unstructured-client",
        description="Partition a document with the Unstructured API and print the elements as JSON.",
    )
    ap.add_argument("--file-path", required=True, help="Path to the file to be parsed")
    ap.add_argument("--base-url", default=DEFAULT_BASE_URL, help=f"Base URL of the Unstructured API (default: {DEFAULT_BASE_URL})")

    g = ap.add_argument_group("partitioning")
    _flag(g, "coordinates", "Return coordinates for each element extracted via OCR. Server default: false")
    g.add_argument("--encoding", help="Encoding used to decode the text input. Server default: utf-8")
    _many(g, "extract-image-block-types", "Element types to extract as base64 image blocks in metadata, e.g. Image Table")
    g.add_argument("--gz-uncompressed-content-type", help="Content type of a gzipped file once uncompressed")
    g.add_argument("--hi-res-model-name", help="Inference model used when strategy is hi_res")
    _flag(g, "include-page-breaks", "Include page breaks if the filetype supports it. Server default: false")
    _many(g, "languages", "Languages present in the document, for partitioning and OCR (Tesseract codes)")
    _choice(g, "output-format", OutputFormat, "Format of the response. Server default: application/json")
    _many(g, "skip-infer-table-types", "Document types to skip table extraction for")
    g.add_argument("--starting-page-number", type=int, help="First page number when a PDF was split before upload")
    _choice(g, "strategy", Strategy, "Partitioning strategy for PDFs and images. Server default: auto")
    _flag(g, "unique-element-ids", "Assign UUIDs instead of SHA-256 text hashes as element ids. Server default: false")
    _flag(g, "xml-keep-tags", "Retain XML tags in the output of XML documents. Server default: false")

    g = ap.add_argument_group("chunking")
    _choice(g, "chunking-strategy", ChunkingStrategy, "Chunk the elements after partitioning. Without it the other chunking options are ignored")
    g.add_argument("--combine-under-n-chars", type=int, help="Combine elements until a section reaches n chars. Server default: 500")
    _flag(g, "include-orig-elements", "Attach the consolidated elements to each chunk. Server default: true")
    g.add_argument("--max-characters", type=int, help="Hard max chunk size. Server default: 500")
    _flag(g, "multipage-sections", "Let sections span page boundaries. Server default: true")
    g.add_argument("--new-after-n-chars", type=int, help="Soft max chunk size. Server default: 1500")
    g.add_argument("--overlap", type=int, help="Length of the tail prefixed to the next chunk. Server default: 0")
    _flag(g, "overlap-all", "Apply overlap between whole-element chunks too. Server default: false")
    g.add_argument("--similarity-threshold", type=float, help="Minimum similarity (0.0-1.0) of two elements sharing a chunk, for by_similarity")
    return ap


def params_from_args(args: argparse.Namespace) -> PartitionParameters:
    """Build PartitionParameters from the flags that were actually given."""
    values = {name: getattr(args, name) for name in PARAMETER_FIELDS}
    return PartitionParameters(**{k: v for k, v in values.items() if v is not None})


async def _partition(base_url: str, file_path: str, params: PartitionParameters) -> ElementList:
    async with UnstructuredClient(base_url) as client:
        return await client.partition_file(file_path, params)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    for name in ("unstructured_client", "unstructured_cli"):
        configure_logger(name)

    ap = build_parser()
    args = ap.parse_args(argv)

    try:
        params = params_from_args(args)
    except ValidationError as e:
        ap.error(str(e))

    try:
        elements = asyncio.run(_partition(args.base_url, args.file_path, params))
    except ClientError as e:
        logger.debug(f"Partitioning {args.file_path} failed: {e!r}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps([el.to_dict() for el in elements], indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
