"""Root logging configuration for scripts using the SDK."""
import logging

NOISY_LOGGERS = ("web3", "urllib3")


def configure_logging(level: str = "INFO") -> None:
    """
    Configures root logger with a timestamped format.

    Args:
        level: logging level name. Unknown names fall back to INFO.
    """

    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    logging.getLogger().setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
