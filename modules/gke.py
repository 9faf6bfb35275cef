from typing import Dict, Optional

import pulumi
import pulumi_gcp as gcp
import pulumi_kubernetes as k8s

from models import ClusterConfig


class StandardCluster(pulumi.ComponentResource):
    """
    StandardCluster define o cluster GKE de um ambiente.

    ARQUITETURA:
    - Cluster privado (nodes sem IP público) e VPC-native (alias IPs)
    - Workload Identity habilitado ({project_id}.svc.id.goog)
    - Node pool gerenciado com autoscaling
    - Provider Kubernetes a partir do kubeconfig do cluster

    NOTA:
    - O node pool padrão é removido; o node pool gerenciado usa os limites
      já validados pelo ClusterConfig
    - deletion_protection só é ligado em prod
    """

    def __init__(
        self,
        name: str,
        config: ClusterConfig,
        network_id: pulumi.Input[str],
        subnet_id: pulumi.Input[str],
        labels: Optional[Dict[str, str]] = None,
        opts=None,
    ):
        super().__init__("custom:compute:StandardCluster", name, None, opts)
        pulumi.log.info(
            f"☸️  Criando cluster {config.cluster_name} ({config.machine_type}, "
            f"{config.min_nodes}-{config.max_nodes} nodes)"
        )

        self.config = config
        self.labels = {
            "environment": config.env,
            "managed-by": "pulumi",
            **(labels or {}),
        }

        # Cluster GKE
        self.cluster = gcp.container.Cluster(
            f"{name}-cluster",
            name=config.cluster_name,
            project=config.project_id,
            location=config.effective_zone,
            network=network_id,
            subnetwork=subnet_id,
            remove_default_node_pool=True,
            initial_node_count=1,
            deletion_protection=config.env == "prod",
            resource_labels=self.labels,
            # VPC-native: ranges secundários da subnet
            ip_allocation_policy=gcp.container.ClusterIpAllocationPolicyArgs(
                cluster_secondary_range_name=config.pod_range_name,
                services_secondary_range_name=config.service_range_name,
            ),
            private_cluster_config=gcp.container.ClusterPrivateClusterConfigArgs(
                enable_private_nodes=True,
                enable_private_endpoint=False,
                master_ipv4_cidr_block=config.master_cidr,
            ),
            workload_identity_config=gcp.container.ClusterWorkloadIdentityConfigArgs(
                workload_pool=config.workload_identity_pool,
            ),
            opts=pulumi.ResourceOptions(parent=self),
        )

        # Node Pool
        self.node_pool = gcp.container.NodePool(
            f"{name}-pool",
            name=config.node_pool_name,
            project=config.project_id,
            location=config.effective_zone,
            cluster=self.cluster.name,
            initial_node_count=config.initial_node_count,
            autoscaling=gcp.container.NodePoolAutoscalingArgs(
                min_node_count=config.min_nodes,
                max_node_count=config.max_nodes,
                location_policy="ANY",
            ),
            node_config=gcp.container.NodePoolNodeConfigArgs(
                machine_type=config.machine_type,
                disk_size_gb=config.disk_size_gb,
                disk_type="pd-standard",
                spot=config.use_spot_instances,
                labels=self.labels,
                tags=["gke-node", f"{config.cluster_name}-gke"],
                oauth_scopes=["https://www.googleapis.com/auth/cloud-platform"],
                workload_metadata_config=gcp.container.NodePoolNodeConfigWorkloadMetadataConfigArgs(
                    mode="GKE_METADATA",
                ),
            ),
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.cluster]),
        )

        # Kubeconfig (autenticação via gke-gcloud-auth-plugin)
        context = f"gke_{config.project_id}_{config.effective_zone}_{config.cluster_name}"
        self.kubeconfig = pulumi.Output.all(
            self.cluster.endpoint,
            self.cluster.master_auth.cluster_ca_certificate,
        ).apply(
            lambda args: f"""apiVersion: v1
clusters:
- cluster:
    server: https://{args[0]}
    certificate-authority-data: {args[1]}
  name: {context}
contexts:
- context:
    cluster: {context}
    user: {context}
  name: {context}
current-context: {context}
kind: Config
users:
- name: {context}
  user:
    exec:
      apiVersion: client.authentication.k8s.io/v1beta1
      command: gke-gcloud-auth-plugin
      provideClusterInfo: true
"""
        )

        # Provider Kubernetes
        self.provider = k8s.Provider(
            f"{name}-k8s-provider",
            kubeconfig=self.kubeconfig,
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.node_pool]),
        )

        self.register_outputs(
            {
                "cluster_name": self.cluster.name,
                "cluster_endpoint": self.cluster.endpoint,
                "node_pool_name": self.node_pool.name,
                "kubeconfig": pulumi.Output.secret(self.kubeconfig),
            }
        )

    @property
    def cluster_name(self) -> pulumi.Output[str]:
        return self.cluster.name

    @property
    def cluster_endpoint(self) -> pulumi.Output[str]:
        return self.cluster.endpoint


def create_cluster(
    name: str,
    config: ClusterConfig,
    network_id: pulumi.Input[str],
    subnet_id: pulumi.Input[str],
    labels: Optional[Dict[str, str]] = None,
    opts=None,
):
    """
    Cria o cluster GKE na VPC informada.
    """
    return StandardCluster(name, config, network_id, subnet_id, labels=labels, opts=opts)
