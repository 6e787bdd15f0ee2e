"""Path manipulation utilities."""
from pathlib import Path
from typing import Optional


def safe_image_stem(image_path: Optional[str]) -> str:
    """Extract safe filename stem from image path.

    Args:
        image_path: Path to image file (None for in-memory images)

    Returns:
        Filename stem or "image" if extraction fails

    Examples:
        >>> safe_image_stem("/path/to/photo.jpg")
        'photo'
        >>> safe_image_stem(None)
        'image'
    """
    if not image_path:
        return "image"
    return Path(image_path).stem or "image"
