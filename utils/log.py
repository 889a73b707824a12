import logging

from config.settings import LOG_FORMAT, LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging once for the CLI and the Streamlit app."""
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
