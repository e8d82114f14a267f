import ast
import base64
import csv
import io
import json
import zlib
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import DecodeError


class Strategy(str, Enum):
    """The strategy to use for partitioning PDF/image."""

    FAST = "fast"
    HI_RES = "hi_res"
    AUTO = "auto"
    OCR_ONLY = "ocr_only"


class ChunkingStrategy(str, Enum):
    """How the service chunks the returned elements after partitioning."""

    BASIC = "basic"
    BY_PAGE = "by_page"
    BY_SIMILARITY = "by_similarity"
    BY_TITLE = "by_title"


class OutputFormat(str, Enum):
    APPLICATION_JSON = "application/json"
    TEXT_CSV = "text/csv"


class ElementType(str, Enum):
    FORMULA = "Formula"
    FIGURE_CAPTION = "FigureCaption"
    NARRATIVE_TEXT = "NarrativeText"
    LIST_ITEM = "ListItem"
    TITLE = "Title"
    ADDRESS = "Address"
    EMAIL_ADDRESS = "EmailAddress"
    IMAGE = "Image"
    PAGE_BREAK = "PageBreak"
    TABLE = "Table"
    HEADER = "Header"
    FOOTER = "Footer"
    CODE_SNIPPET = "CodeSnippet"
    PAGE_NUMBER = "PageNumber"
    UNCATEGORIZED_TEXT = "UncategorizedText"
    COMPOSITE_ELEMENT = "CompositeElement"
    TABLE_CHUNK = "TableChunk"


class FileKind(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    PPTX = "pptx"
    XLSX = "xlsx"
    EML = "eml"
    MSG = "msg"
    DOC = "doc"
    HTML = "html"
    EPUB = "epub"
    UNKNOWN = "unknown"


FILETYPE_KINDS = {
    "application/pdf": FileKind.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": FileKind.DOCX,
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": FileKind.PPTX,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": FileKind.XLSX,
    "sheet": FileKind.XLSX,
    "excel": FileKind.XLSX,
    "message/rfc822": FileKind.EML,
    "application/vnd.ms-outlook": FileKind.MSG,
    "application/msword": FileKind.DOC,
    "text/html": FileKind.HTML,
    "application/epub+zip": FileKind.EPUB,
}


# ------------------------------------------------------------
# REQUEST PARAMETERS
# ------------------------------------------------------------
class PartitionParameters(BaseModel):
    """
    Options forwarded to the partition endpoint.

    Every field defaults to None, meaning "not sent": the service then applies
    its own default (noted per field below). Only types are checked locally.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Return coordinates for each element extracted via OCR. Server default: false
    coordinates: Optional[bool] = None
    # Encoding used to decode the text input. Server default: utf-8
    encoding: Optional[str] = None
    # Element types to extract as base64 image blocks in metadata. Server default: []
    extract_image_block_types: Optional[Tuple[str, ...]] = None
    # Content type of a gzipped file once uncompressed
    gz_uncompressed_content_type: Optional[str] = None
    # Inference model used when strategy is hi_res
    hi_res_model_name: Optional[str] = None
    # Include page breaks if the filetype supports it. Server default: false
    include_page_breaks: Optional[bool] = None
    # Document languages, used for partitioning and OCR. Server default: []
    languages: Optional[Tuple[str, ...]] = None
    # Server default: application/json
    output_format: Optional[OutputFormat] = None
    # Document types to skip table extraction for. Server default: []
    skip_infer_table_types: Optional[Tuple[str, ...]] = None
    # First page number when a PDF was split before upload
    starting_page_number: Optional[int] = None
    # Server default: auto
    strategy: Optional[Strategy] = None
    # UUIDs instead of SHA-256 text hashes for element ids. Server default: false
    unique_element_ids: Optional[bool] = None
    # Keep XML tags in the output of XML documents. Server default: false
    xml_keep_tags: Optional[bool] = None

    # When unset, no chunking is performed and the chunking options below are ignored
    chunking_strategy: Optional[ChunkingStrategy] = None
    # Server default: 500
    combine_under_n_chars: Optional[int] = None
    # Attach consolidated elements as metadata.orig_elements. Server default: true
    include_orig_elements: Optional[bool] = None
    # Hard max chunk size. Server default: 500
    max_characters: Optional[int] = None
    # Server default: true
    multipage_sections: Optional[bool] = None
    # Soft max chunk size. Server default: 1500
    new_after_n_chars: Optional[int] = None
    # Length of the tail prefixed to the next chunk. Server default: 0
    overlap: Optional[int] = None
    # Apply overlap between whole-element chunks too. Server default: false
    overlap_all: Optional[bool] = None
    # Minimum similarity of two elements sharing a chunk (by_similarity only)
    similarity_threshold: Optional[float] = Field(None, ge=0.0, le=1.0)

    def to_form_fields(self) -> Dict[str, str]:
        """Serialize the fields that are set into multipart form values."""
        return {
            name: _form_value(value)
            for name, value in self.model_dump(mode="json", exclude_none=True).items()
        }


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


# ------------------------------------------------------------
# RESPONSE ELEMENTS
# ------------------------------------------------------------
class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    points: Optional[Tuple[Tuple[float, ...], ...]] = None
    system: Optional[str] = None
    layout_width: Optional[float] = None
    layout_height: Optional[float] = None


class ElementMetadata(BaseModel):
    """
    Metadata bag attached to an element.

    Fields the service documents are typed; anything else it sends is kept
    as an extra attribute (see ``extra_fields``).
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    filename: Optional[str] = None
    file_directory: Optional[str] = None
    last_modified: Optional[str] = None
    filetype: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    parent_id: Optional[str] = None
    category_depth: Optional[int] = None
    text_as_html: Optional[str] = None
    languages: Optional[Tuple[str, ...]] = None
    emphasized_text_contents: Optional[Union[Tuple[str, ...], str]] = None
    emphasized_text_tags: Optional[Union[Tuple[str, ...], str]] = None
    is_continuation: Optional[bool] = None
    detection_class_prob: Optional[Union[float, Tuple[float, ...]]] = None
    page_number: Optional[int] = None

    # spreadsheets
    page_name: Optional[str] = None
    # email
    sent_from: Optional[Union[Tuple[str, ...], str]] = None
    sent_to: Optional[Union[Tuple[str, ...], str]] = None
    subject: Optional[str] = None
    # outlook
    attached_to_filename: Optional[str] = None
    # word
    header_footer_type: Optional[str] = None
    # html
    link_urls: Optional[Tuple[str, ...]] = None
    link_texts: Optional[Tuple[Optional[str], ...]] = None
    # epub
    section: Optional[str] = None

    image_base64: Optional[str] = None
    image_mime_type: Optional[str] = None
    orig_elements: Optional[str] = None

    @property
    def kind(self) -> FileKind:
        return FILETYPE_KINDS.get(self.filetype or "", FileKind.UNKNOWN)

    @property
    def extra_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class Element(BaseModel):
    """One unit of a partitioned document."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str
    element_id: Optional[str] = None
    text: str = ""
    metadata: ElementMetadata = Field(default_factory=ElementMetadata)

    @field_validator("metadata", mode="before")
    @classmethod
    def _empty_metadata(cls, value):
        return {} if value is None else value

    @field_validator("text", mode="before")
    @classmethod
    def _empty_text(cls, value):
        return "" if value is None else value

    @property
    def category(self) -> Optional[ElementType]:
        """The known element type, or None for a tag this client doesn't know."""
        try:
            return ElementType(self.type)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable representation of the element."""
        return self.model_dump(mode="json", exclude_none=True)


class Table(Element):
    @property
    def html(self) -> Optional[str]:
        return self.metadata.text_as_html


class TableChunk(Table):
    pass


class Image(Element):
    @property
    def image_base64(self) -> Optional[str]:
        return self.metadata.image_base64

    @property
    def image_mime_type(self) -> Optional[str]:
        return self.metadata.image_mime_type


class CompositeElement(Element):
    def original_elements(self) -> List[Element]:
        """
        Decode ``metadata.orig_elements``, the elements this chunk was built from.
        The service sends them as base64-encoded, zlib-compressed JSON.
        Returns an empty list when the chunk carries none.
        """
        encoded = self.metadata.orig_elements
        if not encoded:
            return []
        try:
            payload = json.loads(zlib.decompress(base64.b64decode(encoded)))
        except (ValueError, zlib.error) as e:
            raise DecodeError(f"Could not decode orig_elements of {self.element_id}: {e}") from e
        return parse_elements(payload)


ElementList = List[Element]

ELEMENT_CLASSES = {
    ElementType.TABLE.value: Table,
    ElementType.TABLE_CHUNK.value: TableChunk,
    ElementType.IMAGE.value: Image,
    ElementType.COMPOSITE_ELEMENT.value: CompositeElement,
}


def parse_elements(payload: Any) -> ElementList:
    """Decode a JSON element list, picking the element class by type tag."""
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a JSON array of elements, got {type(payload).__name__}")

    elements = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict) or not isinstance(item.get("type"), str):
            raise DecodeError(f"Element #{index} is not an object with a string 'type'")
        element_cls = ELEMENT_CLASSES.get(item["type"], Element)
        try:
            elements.append(element_cls.model_validate(item))
        except ValidationError as e:
            raise DecodeError(f"Element #{index} ({item['type']}) is malformed: {e}") from e
    return elements


def _csv_value(key: str, raw: str) -> Any:
    # Non-text columns are written as Python literals ("1", "['eng']", "True")
    field = ElementMetadata.model_fields.get(key)
    accepted = set(get_args(field.annotation)) if field is not None else None
    if accepted is not None and accepted <= {str, type(None)}:
        return raw
    try:
        value = ast.literal_eval(raw)
    except (ValueError, TypeError, SyntaxError, RecursionError):
        return raw
    if accepted is not None and str not in accepted:
        return value
    # Columns that may hold text only take a literal that reads back the same
    if isinstance(value, (list, tuple, dict)):
        return value
    if isinstance(value, (bool, int, float)) and str(value) == raw:
        return value
    return raw


def parse_csv_elements(text: str) -> ElementList:
    """
    Decode a text/csv partition response.

    type, element_id and text columns map onto the element; every other
    non-empty column becomes a metadata entry.
    """
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None:
        return []
    if "type" not in reader.fieldnames:
        raise DecodeError(f"CSV response has no 'type' column: {reader.fieldnames}")

    elements = []
    for index, row in enumerate(reader):
        element_type = row.pop("type")
        if not element_type:
            raise DecodeError(f"CSV row #{index} has an empty 'type'")
        item = {
            "type": element_type,
            "element_id": row.pop("element_id", None) or None,
            "text": row.pop("text", None) or "",
            "metadata": {
                key: _csv_value(key, value)
                for key, value in row.items()
                if key and value not in (None, "")
            },
        }
        element_cls = ELEMENT_CLASSES.get(element_type, Element)
        try:
            elements.append(element_cls.model_validate(item))
        except ValidationError as e:
            raise DecodeError(f"CSV row #{index} ({element_type}) is malformed: {e}") from e
    return elements
