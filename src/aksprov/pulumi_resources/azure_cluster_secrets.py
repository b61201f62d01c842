import pulumi
import pulumi_random
import pulumi_tls as tls

ADMIN_PASSWORD_LENGTH = 20
SSH_KEY_ALGORITHM = "RSA"
SSH_KEY_RSA_BITS = 4096


class AzureClusterSecrets(pulumi.ComponentResource):
    """
    Generates the node admin password and SSH key pair for a managed cluster.

    Both are stateful random resources, so their values stay fixed for the
    lifetime of the stack and only change if the resources are replaced.
    """

    admin_password: pulumi_random.RandomPassword
    ssh_key: tls.PrivateKey

    def __init__(self, name: str, *args, **kwargs):
        super().__init__(
            f"aksprov:{self.__class__.__name__}",
            name,
            *args,
            **kwargs,
        )

        self.admin_password = pulumi_random.RandomPassword(
            "password",
            length=ADMIN_PASSWORD_LENGTH,
            special=True,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.ssh_key = tls.PrivateKey(
            "ssh-key",
            algorithm=SSH_KEY_ALGORITHM,
            rsa_bits=SSH_KEY_RSA_BITS,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.register_outputs({})

    @property
    def public_key_openssh(self) -> pulumi.Output[str]:
        return self.ssh_key.public_key_openssh
