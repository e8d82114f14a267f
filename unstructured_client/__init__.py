"""Client library and CLI for the Unstructured document-partitioning API."""

__version__ = "0.1.0"

from .client import UnstructuredClient
from .exceptions import (
    APIError,
    ClientError,
    DecodeError,
    FileAccessError,
    InvalidBaseURLError,
    RequestTimeoutError,
    TransportError,
)
from .models import (
    ChunkingStrategy,
    CompositeElement,
    Element,
    ElementList,
    ElementMetadata,
    ElementType,
    FileKind,
    Image,
    OutputFormat,
    PartitionParameters,
    Strategy,
    Table,
    TableChunk,
    parse_csv_elements,
    parse_elements,
)

__all__ = [
    "UnstructuredClient",
    "PartitionParameters",
    "Strategy",
    "ChunkingStrategy",
    "OutputFormat",
    "Element",
    "ElementList",
    "ElementMetadata",
    "ElementType",
    "FileKind",
    "Table",
    "TableChunk",
    "Image",
    "CompositeElement",
    "parse_elements",
    "parse_csv_elements",
    "ClientError",
    "InvalidBaseURLError",
    "FileAccessError",
    "TransportError",
    "RequestTimeoutError",
    "APIError",
    "DecodeError",
]
