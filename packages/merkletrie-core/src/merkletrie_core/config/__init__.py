from .loader import find_project_config, load_config
from .models import BuilderConfig, MerkletrieConfig

__all__ = [
    "BuilderConfig",
    "MerkletrieConfig",
    "find_project_config",
    "load_config",
]
