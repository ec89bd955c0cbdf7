import logging

from evalhub.shared.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def setup_logging(level: str | None = None) -> None:
    """Configure root logging once; later calls only adjust the level."""
    lvl = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=lvl, format=LOG_FORMAT)
    root.setLevel(lvl)
    # keep third-party clients quiet unless we are debugging
    for noisy in ("httpx", "httpcore", "stripe", "google_genai", "openai"):
        logging.getLogger(noisy).setLevel(max(lvl, logging.WARNING))
