"""
Notification Shapes

A shape lists the predicates a notification must carry. Shapes are JSON or
YAML documents, read from a local file or a URL:

    name: friend-request
    fields:
      - predicate: https://www.w3.org/ns/activitystreams#summary
      - predicate: https://schema.org/sender
        label: Sender
      - predicate: https://schema.org/about
        required: false
"""

import logging
from pathlib import Path
from typing import Iterable

import yaml
from pydantic import ValidationError

from podinbox.core.errors import SchemaMismatch
from podinbox.core.models import NotificationShape
from podinbox.graph.client import PodClient
from podinbox.graph.vocab import is_absolute_iri

logger = logging.getLogger(__name__)


def parse_shape(text: str) -> NotificationShape:
    """
    Parse a shape document.

    Accepts a mapping with a "fields" list or a bare list of fields.

    Raises:
        SchemaMismatch: the document is not a valid shape
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaMismatch(f"Shape is not valid JSON or YAML: {e}") from e

    if isinstance(data, list):
        data = {"fields": data}
    if not isinstance(data, dict):
        raise SchemaMismatch("Shape must be a mapping or a list of fields")

    try:
        shape = NotificationShape.model_validate(data)
    except ValidationError as e:
        raise SchemaMismatch(f"Shape is not valid: {e}") from e

    for field in shape.fields:
        if not is_absolute_iri(field.predicate):
            raise SchemaMismatch(f"Shape predicate must be a full IRI: {field.predicate!r}")

    return shape


async def load_shape(source: str, pod: PodClient | None = None) -> NotificationShape:
    """
    Load a shape from a file path or an http(s) URL.

    Args:
        source: Path or URL of the shape document
        pod: Client used for URLs (a short-lived one is opened if omitted)
    """
    if source.startswith(("http://", "https://")):
        if pod is not None:
            response = await pod.get(source)
        else:
            async with PodClient() as client:
                response = await client.get(source)
        text = response.text
    else:
        text = Path(source).expanduser().read_text(encoding="utf-8")

    shape = parse_shape(text)
    logger.debug(f"Loaded shape {shape.name} with {len(shape.fields)} fields from {source}")
    return shape


def check_shape(shape: NotificationShape, predicates: Iterable[str]) -> None:
    """
    Verify that every required predicate of the shape is supplied.

    Raises:
        SchemaMismatch: naming the missing predicates
    """
    supplied = {str(p) for p in predicates}
    missing = [p for p in shape.required_predicates if p not in supplied]
    if missing:
        raise SchemaMismatch(
            f"Notification does not match shape {shape.name}: missing {', '.join(missing)}"
        )
