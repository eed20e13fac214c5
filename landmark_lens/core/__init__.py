from landmark_lens.core.config import get_config
from landmark_lens.core.logging import setup_logging

__all__ = ["get_config", "setup_logging"]
