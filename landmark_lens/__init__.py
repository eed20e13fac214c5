"""landmark-lens: recognize cultural landmarks from photos and narrate them."""

__version__ = "0.1.0"
