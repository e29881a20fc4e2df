"""Treasury dashboard: wallet positions from Zerion and Zapper, rendered as HTML."""

__version__ = "0.1.0"
