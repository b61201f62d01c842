import typing

import pulumi
import pulumi_azure_native as pulumi_az
import pulumi_kubernetes as kubernetes

import aksprov
import aksprov.junkdrawer


def first_kubeconfig(kubeconfigs: typing.Sequence[typing.Any] | None) -> str:
    """Decode the first credential returned by listClusterUserCredential into kubeconfig text."""
    if not kubeconfigs:
        msg = "managed cluster returned no user credentials"
        raise ValueError(msg)

    return aksprov.junkdrawer.decode_base64_text(kubeconfigs[0].value)


def cluster_kubeconfig(
    cluster_name: pulumi.Input[str],
    resource_group_name: pulumi.Input[str],
) -> pulumi.Output[str]:
    """Fetch the user kubeconfig for a managed cluster.

    The credentials are listed only once both the cluster name and resource
    group name have resolved. Listing failures are not retried here.
    """
    creds = pulumi_az.containerservice.list_managed_cluster_user_credentials_output(
        resource_group_name=resource_group_name,
        resource_name=cluster_name,
    )

    return pulumi.Output.secret(creds.kubeconfigs.apply(first_kubeconfig))


def kube_provider(
    kubeconfig: pulumi.Input[str],
    name: str = aksprov.KUBE_PROVIDER_NAME,
    opts: pulumi.ResourceOptions | None = None,
) -> kubernetes.Provider:
    return kubernetes.Provider(
        name,
        kubeconfig=kubeconfig,
        suppress_deprecation_warnings=True,
        opts=opts,
    )
