"""riko - a small terminal text editor."""

import logging

from .editor import Editor, SaveCanceled
from .position import Position
from .row import Row
from .version import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Editor',
    'SaveCanceled',
    'Position',
    'Row',
    '__version__',
]
