# deployer/resolver.py
from pathlib import Path
from typing import Iterable, Optional, Union

from loguru import logger

from .errors import NoManifestFound


def resolve_compose_file(
    candidates: Iterable[str], base_dir: Optional[Union[str, Path]] = None
) -> Path:
    """Return the first candidate that exists, in the order given.

    Relative candidates are looked up under ``base_dir`` (the current
    directory when omitted); absolute ones are used as they are.
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    names = list(candidates)
    for name in names:
        path = Path(name)
        if not path.is_absolute():
            path = base / path
        if path.is_file():
            logger.info(f"Using compose file: {path}")
            return path
    raise NoManifestFound(names, str(base))
