from .gke import StandardCluster, create_cluster
from .networking import StandardVPC, create_network
from .security import StandardIdentity, StandardSecrets
