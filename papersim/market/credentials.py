"""API secret loading."""

import logging
from pathlib import Path
from typing import Union

from ..errors import CredentialsError

logger = logging.getLogger(__name__)


def read_secret(path: Union[str, Path]) -> str:
    """Read an API secret from a file, stripping surrounding whitespace."""
    path = Path(path)
    try:
        secret = path.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise CredentialsError(f"Error reading api secret from {path}: {e}") from e

    if not secret:
        raise CredentialsError(f"API secret file {path} is empty")

    logger.debug(f"Loaded API secret from {path}")
    return secret
