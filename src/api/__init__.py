from .config import AppSettings, build_membership, build_store, build_suggester
from .app import create_app

__all__ = ["AppSettings", "build_membership", "build_store", "build_suggester", "create_app"]
