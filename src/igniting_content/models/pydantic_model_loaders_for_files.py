"""models/pydantic_model_loaders_for_files.py"""

from __future__ import annotations

from pathlib import Path
import json
import logging
from typing import Type, TypeVar, Union

from pydantic import BaseModel

from igniting_content.config.project_config import FALLBACK_CONTENT_FILE
from igniting_content.models.wp_content_models import FallbackContentFile

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _load_raw_json(file_path: Union[str, Path]) -> object:
    """
    Internal helper: read a JSON file and return the raw Python object.

    Raises:
        OSError, json.JSONDecodeError
    """
    path = Path(file_path)
    text = path.read_text(encoding="utf-8")
    return json.loads(text)


def load_model_from_json(
    file_path: Union[str, Path],
    model_cls: Type[T],
) -> T:
    """
    Generic helper to load & validate a Pydantic model from a JSON file.

    Args:
        file_path: Path to the JSON file.
        model_cls: Pydantic BaseModel subclass to validate against.

    Returns:
        An instance of `model_cls`.

    Raises:
        OSError, json.JSONDecodeError, ValidationError
    """
    raw = _load_raw_json(file_path)
    return model_cls.model_validate(raw)


def load_fallback_content_model(
    file_path: Path | str = FALLBACK_CONTENT_FILE,
) -> FallbackContentFile | None:
    """
    Load and validate the bundled fallback content file.

    Returns None (and logs) when the file is missing or malformed so callers
    can degrade to an empty collection.
    """
    try:
        model = load_model_from_json(file_path, FallbackContentFile)
        logger.info(
            "✅ Loaded fallback content from %s (%d portfolio, %d services)",
            file_path,
            len(model.portfolio),
            len(model.services),
        )
        return model
    except Exception:
        logger.exception("❌ Failed to load fallback content from %s", file_path)
        return None
