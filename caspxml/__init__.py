from .constants import VERSION

__version__ = VERSION
