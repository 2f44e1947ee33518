"""PathHound: concurrent file enumeration for search indexes."""

from .services.loading_coordinator import LoadingCoordinator, load_paths, stream_paths
from .version import __version__

__all__ = ["LoadingCoordinator", "load_paths", "stream_paths", "__version__"]
