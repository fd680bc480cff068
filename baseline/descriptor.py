"""Baseline Resolver - Extension descriptor loading."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from baseline.errors import DescriptorError
from baseline.schemas import ExtensionDescriptor
from baseline.utils.paths import descriptor_path

logger = logging.getLogger(__name__)


def read_extension_descriptor(folder: str | Path) -> ExtensionDescriptor:
    """Read name, publisher and version from <folder>/app.json.

    A missing or empty publisher falls back to the default publisher.

    Raises:
        DescriptorError: If app.json is missing, malformed, or has no name.
    """
    folder = Path(folder)
    path = descriptor_path(folder)
    if not path.is_file():
        raise DescriptorError(f"Extension descriptor not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DescriptorError(f"Extension descriptor {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DescriptorError(f"Extension descriptor {path} must contain a JSON object")

    fields = {"name": data.get("name"), "folder": folder, "version": data.get("version")}
    if data.get("publisher"):
        fields["publisher"] = data["publisher"]

    try:
        descriptor = ExtensionDescriptor.model_validate(fields)
    except ValidationError as e:
        raise DescriptorError(f"Extension descriptor {path} is invalid: {e}") from e

    logger.debug("Read descriptor %s (%s) from %s", descriptor.name, descriptor.publisher, path)
    return descriptor
