from typing import Dict, List, Optional

import pulumi
import pulumi_gcp as gcp
import pulumi_kubernetes as k8s

from policy import SecretNotFound, validate_identity, validate_secret_ids


class StandardSecrets(pulumi.ComponentResource):
    """
    StandardSecrets cria os containers de secret no Secret Manager.

    NOTA:
    - Cria apenas os secrets, não as versões (valores). Os valores são
      adicionados manualmente ou via CI/CD.
    - Replicação automática
    """

    def __init__(self, name: str, secret_ids: List[str], opts=None):
        secret_ids = validate_secret_ids(secret_ids).unwrap()
        super().__init__("custom:security:StandardSecrets", name, None, opts)
        pulumi.log.info(f"🔐 Criando {len(secret_ids)} secret(s) no Secret Manager")

        self.secret_ids = secret_ids
        self._secrets: Dict[str, gcp.secretmanager.Secret] = {}

        for secret_id in self.secret_ids:
            self._secrets[secret_id] = gcp.secretmanager.Secret(
                f"{name}-{secret_id}",
                secret_id=secret_id,
                replication=gcp.secretmanager.SecretReplicationArgs(
                    auto=gcp.secretmanager.SecretReplicationAutoArgs(),
                ),
                opts=pulumi.ResourceOptions(parent=self),
            )

        self.register_outputs({"secret_ids": self.secret_ids})

    def get_secret(self, secret_id: str) -> gcp.secretmanager.Secret:
        try:
            return self._secrets[secret_id]
        except KeyError:
            raise SecretNotFound(secret_id, self._secrets.keys()) from None


class StandardIdentity(pulumi.ComponentResource):
    """
    StandardIdentity configura Workload Identity (Kubernetes -> GCP).

    CRIA:
    1. Google Service Account (GSA)
    2. IAM bindings dos roles para a GSA
    3. Binding Workload Identity (K8s SA -> GSA)
    4. Opcional: a ServiceAccount no Kubernetes, anotada com a GSA
       (somente quando um provider Kubernetes é informado)
    """

    def __init__(
        self,
        name: str,
        project_id: str,
        sa_id: str,
        k8s_namespace: str,
        k8s_sa_name: str,
        roles: Optional[List[str]] = None,
        k8s_provider: Optional[k8s.Provider] = None,
        opts=None,
    ):
        validate_identity(project_id, sa_id, k8s_namespace, k8s_sa_name).unwrap()
        super().__init__("custom:security:StandardIdentity", name, None, opts)
        pulumi.log.info(f"🪪 Configurando Workload Identity {k8s_namespace}/{k8s_sa_name} -> {sa_id}")

        # 1. Google Service Account
        self.gsa = gcp.serviceaccount.Account(
            f"{name}-sa",
            project=project_id,
            account_id=sa_id,
            display_name=f"Workload Identity SA for {sa_id}",
            opts=pulumi.ResourceOptions(parent=self),
        )

        # 2. Roles da GSA
        self.role_bindings = [
            gcp.projects.IAMMember(
                f"{name}-role-{index}",
                project=project_id,
                role=role,
                member=self.gsa.email.apply(lambda email: f"serviceAccount:{email}"),
                opts=pulumi.ResourceOptions(parent=self),
            )
            for index, role in enumerate(roles or [])
        ]

        # 3. K8s SA -> GSA
        self.member = f"serviceAccount:{project_id}.svc.id.goog[{k8s_namespace}/{k8s_sa_name}]"
        self.workload_identity_binding = gcp.serviceaccount.IAMBinding(
            f"{name}-wi-binding",
            service_account_id=self.gsa.name,
            role="roles/iam.workloadIdentityUser",
            members=[self.member],
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.k8s_service_account = None
        if k8s_provider is not None:
            self.k8s_service_account = k8s.core.v1.ServiceAccount(
                f"{name}-k8s-sa",
                metadata=k8s.meta.v1.ObjectMetaArgs(
                    name=k8s_sa_name,
                    namespace=k8s_namespace,
                    annotations={"iam.gke.io/gcp-service-account": self.gsa.email},
                    labels={"managed-by": "pulumi"},
                ),
                opts=pulumi.ResourceOptions(
                    provider=k8s_provider,
                    parent=self,
                    depends_on=[self.workload_identity_binding],
                ),
            )

        self.register_outputs({"email": self.gsa.email})

    @property
    def email(self) -> pulumi.Output[str]:
        return self.gsa.email
