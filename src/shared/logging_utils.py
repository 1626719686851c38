import logging
from typing import Any, Dict, Optional


_LOGGER = logging.getLogger("blogrender")


def log(level: int, post_id: Optional[str], message: str, exc_info: bool = False, **dimensions: Any) -> None:
    dims: Dict[str, Any] = {"postId": post_id} if post_id else {}
    dims.update(dimensions)
    _LOGGER.log(level, message, exc_info=exc_info, extra={"custom_dimensions": dims})


def info(post_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.INFO, post_id, message, **dimensions)


def warning(post_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.WARNING, post_id, message, **dimensions)


def error(post_id: Optional[str], message: str, exc_info: bool = False, **dimensions: Any) -> None:
    log(logging.ERROR, post_id, message, exc_info=exc_info, **dimensions)
