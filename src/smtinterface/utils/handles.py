import logging

l = logging.getLogger(__name__)


def close_quietly(msg: str, handle) -> bool:
    """
    Close ``handle``, logging instead of raising if closing fails.  Returns
    whether the handle closed cleanly.
    """
    try:
        handle.close()
        return True
    except (OSError, ValueError) as e:
        l.warning(f"OOPS, close breaks: {msg} {e}")
        return False
