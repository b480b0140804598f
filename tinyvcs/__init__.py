"""
tinyvcs - a tiny local version-control system

Content-addressed snapshots of the plain files in one working directory,
with branches, a staging area, three-way merges and conflict markers.
"""

__version__ = "0.1.0"

# Configuration is available at top level for convenience
from tinyvcs.config import config

__all__ = ["config", "__version__"]
