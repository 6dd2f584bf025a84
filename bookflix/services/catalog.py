import json
import math
from typing import Any

from loguru import logger

from bookflix.core.errors import ImageDataDegraded, LoadError
from bookflix.models.catalog import Catalog

_BLANK_IMAGE_VALUES = {"nan", "null"}


def _parse_array(text: str, source: str) -> list[Any]:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise LoadError(f"Failed to parse {source}: {e}") from e
    if not isinstance(data, list):
        raise LoadError(f"Expected a JSON array for {source}, got {type(data).__name__}")
    return data


def normalize_image(value: Any) -> str:
    """Map null/NaN image entries to the empty string, everything else to str."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    text = str(value)
    if text.strip().lower() in _BLANK_IMAGE_VALUES:
        return ""
    return text


def parse_images(text: str, expected_length: int) -> list[str]:
    """
    Parse the cover image array.

    Image data never fails a load: an unusable payload degrades to blank
    covers and a mismatched length is padded or truncated to the title count.
    """
    text = text or ""
    try:
        # json accepts bare NaN tokens and returns them as float nan
        data = json.loads(text)
        if not isinstance(data, list):
            raise ImageDataDegraded(f"expected a JSON array, got {type(data).__name__}")
    except (json.JSONDecodeError, ImageDataDegraded) as e:
        logger.warning(f"Image data degraded, using blank covers: {e}. First chars: {text[:100]!r}")
        return [""] * expected_length

    images = [normalize_image(img) for img in data]
    if len(images) != expected_length:
        logger.warning(f"Image count {len(images)} does not match title count {expected_length}; adjusting")
        images = images[:expected_length] + [""] * max(0, expected_length - len(images))
    return images


class CatalogStore:
    """Builds the immutable Catalog from the raw JSON sources."""

    @staticmethod
    def load(titles_source: str, images_source: str, vocab_source: str) -> Catalog:
        titles = ["" if title is None else str(title) for title in _parse_array(titles_source, "titles")]
        vocab = [str(user_id) for user_id in _parse_array(vocab_source, "user vocabulary")]
        images = parse_images(images_source, len(titles))

        if not titles:
            logger.error("No book titles loaded!")
        if not any(images):
            logger.warning("No book images loaded (will use placeholders)")

        catalog = Catalog(titles=tuple(titles), images=tuple(images), user_vocab=tuple(vocab))
        logger.info(
            f"Loaded catalog: {catalog.item_count} titles, {len(images)} images, {len(vocab)} users "
            f"(sample title: {titles[0] if titles else None!r})"
        )
        return catalog
