"""Mii database model classes."""

from citrii.model.database import Database, DatabaseFile
from citrii.model.edits import Delta, Page
from citrii.model.profile import Profile, ProfileFull

__all__ = ['Database', 'DatabaseFile', 'Delta', 'Page', 'Profile', 'ProfileFull']
