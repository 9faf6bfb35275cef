from .cluster import ClusterConfig
from .network import NetworkConfig
