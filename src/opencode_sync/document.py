from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from opencode_sync.models import ConfigDocument

logger = logging.getLogger(__name__)


class ReadError(RuntimeError):
    pass


class WriteError(RuntimeError):
    pass


def load_document(path: Path) -> ConfigDocument | None:
    """Load the config at ``path``; ``None`` if the file does not exist."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No config at %s", path)
        return None
    except UnicodeDecodeError as exc:
        raise ReadError(f"Config {path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise ReadError(f"Cannot read config {path}: {exc}") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ReadError(
            f"Invalid JSON in config {path} (comments are not supported, use strict JSON): {exc}"
        ) from exc

    try:
        return ConfigDocument.model_validate(data)
    except ValidationError as exc:
        raise ReadError(f"Config validation failed for {path}: {exc}") from exc


def dump_document(document: ConfigDocument) -> str:
    return document.model_dump_json(indent=2, by_alias=True, exclude_unset=True) + "\n"


def write_document(path: Path, document: ConfigDocument) -> None:
    payload = dump_document(document)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Cannot write config {path}: {exc}") from exc
    logger.debug("Wrote %d bytes to %s", len(payload), path)
