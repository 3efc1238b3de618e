"""Binary IO utilities for resource and database parsing."""

from citrii.io.reader import Reader
from citrii.io.writer import Writer

__all__ = ['Reader', 'Writer']
