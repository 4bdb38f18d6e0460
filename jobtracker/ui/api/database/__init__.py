"""Record store for users and applications"""

from .tracker_database import TrackerDatabase, get_tracker_database

__all__ = ["TrackerDatabase", "get_tracker_database"]
