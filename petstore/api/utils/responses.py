"""Response helpers: orjson rendering, XML rendering and content negotiation.

Pet endpoints produce either ``application/json`` or ``application/xml``
depending on the request's ``Accept`` header. The choice is made by the
``negotiated_media_type`` dependency before the handler runs, so a request
that accepts neither type is rejected with 406 without touching the store.

XML layout:
- a model renders under its class name, e.g. ``<Pet>...</Pet>``
- a list renders as ``<List><item>...</item></List>``
- anything else renders as ``<response>value</response>``
- list-valued fields repeat their own name inside a wrapper element and
  null fields are omitted
"""

from typing import Annotated, Any, Final
from xml.etree.ElementTree import Element, SubElement, tostring

import orjson
from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from petstore.api.constants import (
    ACCEPT_HEADER,
    JSON_MEDIA_TYPE,
    XML_MEDIA_TYPES,
)
from petstore.core.types import JsonValue

XML_LIST_ROOT: Final[str] = "List"
XML_LIST_ITEM: Final[str] = "item"
XML_SCALAR_ROOT: Final[str] = "response"


def to_plain(content: Any) -> JsonValue:  # noqa: ANN401 - models, lists or plain values
    """Convert pydantic models (also inside lists) to JSON-compatible values."""
    if isinstance(content, BaseModel):
        return content.model_dump(mode="json", by_alias=True)
    if isinstance(content, (list, tuple)):
        return [to_plain(item) for item in content]
    return content


class ORJSONResponse(JSONResponse):
    """JSON response rendered with orjson, keys sorted."""

    media_type = JSON_MEDIA_TYPE

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - any JSON-serializable content
        return orjson.dumps(to_plain(content), option=orjson.OPT_SORT_KEYS)


def _build_element(tag: str, value: JsonValue) -> Element:
    element = Element(tag)
    if isinstance(value, dict):
        for key, child in value.items():
            if child is None:
                continue
            if isinstance(child, list):
                wrapper = SubElement(element, key)
                for item in child:
                    wrapper.append(_build_element(key, item))
            else:
                element.append(_build_element(key, child))
    elif isinstance(value, list):
        for item in value:
            element.append(_build_element(XML_LIST_ITEM, item))
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif value is not None:
        element.text = str(value)
    return element


def root_tag_for(content: Any) -> str:  # noqa: ANN401 - models, lists or plain values
    """Name of the root XML element used for ``content``."""
    if isinstance(content, BaseModel):
        return type(content).__name__
    if isinstance(content, (list, tuple)):
        return XML_LIST_ROOT
    return XML_SCALAR_ROOT


def render_xml(content: Any) -> bytes:  # noqa: ANN401 - models, lists or plain values
    """Serialize ``content`` to a UTF-8 XML document."""
    element = _build_element(root_tag_for(content), to_plain(content))
    return tostring(element, encoding="utf-8", xml_declaration=True)


class XMLResponse(Response):
    """XML response built by ``render_xml``."""

    media_type = XML_MEDIA_TYPES[0]

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - models, lists or plain values
        return render_xml(content)


def _parse_accept(header: str) -> list[tuple[str, float]]:
    """Split an Accept header into ``(media_range, quality)`` pairs."""
    ranges = []
    for part in header.split(","):
        media_range, *params = (piece.strip() for piece in part.split(";"))
        if not media_range:
            continue

        quality = 1.0
        for param in params:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
                # NaN fails the comparison too
                if not 0.0 <= quality <= 1.0:
                    quality = 0.0
        ranges.append((media_range.lower(), quality))
    return ranges


def _quality(ranges: list[tuple[str, float]], media_type: str) -> float:
    """Quality of ``media_type`` under the most specific matching range."""
    main_type = media_type.split("/", 1)[0]
    best_quality, best_specificity = 0.0, -1

    for media_range, quality in ranges:
        if media_range == media_type:
            specificity = 2
        elif media_range == f"{main_type}/*":
            specificity = 1
        elif media_range in ("*/*", "*"):
            specificity = 0
        else:
            continue

        if specificity > best_specificity:
            best_quality, best_specificity = quality, specificity

    return best_quality


def negotiate_media_type(accept: str | None) -> str | None:
    """Choose the response media type for an ``Accept`` header value.

    JSON is returned for a missing header and wins ties; None means the
    header admits no type the API can produce.
    """
    if not accept or not accept.strip():
        return JSON_MEDIA_TYPE

    ranges = _parse_accept(accept)
    candidates = [(JSON_MEDIA_TYPE, _quality(ranges, JSON_MEDIA_TYPE))]
    candidates.extend((xml, _quality(ranges, xml)) for xml in XML_MEDIA_TYPES)

    media_type, quality = max(candidates, key=lambda candidate: candidate[1])
    if quality <= 0:
        return None
    return media_type


def negotiated_media_type(request: Request) -> str:
    """Dependency resolving the response media type, 406 when none fits.

    Raises:
        HTTPException: 406 when the Accept header excludes JSON and XML.
    """
    media_type = negotiate_media_type(request.headers.get(ACCEPT_HEADER))
    if media_type is None:
        supported = ", ".join((JSON_MEDIA_TYPE, *XML_MEDIA_TYPES))
        raise HTTPException(
            status_code=status.HTTP_406_NOT_ACCEPTABLE,
            detail=f"Not Acceptable. Supported media types: {supported}",
        )
    return media_type


MediaType = Annotated[str, Depends(negotiated_media_type)]


def ok(media_type: str, content: Any) -> Response:  # noqa: ANN401 - models, lists or plain values
    """Build a 200 response for ``content`` in the negotiated media type."""
    headers = {"Vary": ACCEPT_HEADER}
    if media_type == JSON_MEDIA_TYPE:
        return ORJSONResponse(content=content, headers=headers)
    return XMLResponse(content=content, headers=headers, media_type=media_type)
