import aksprov.pulumi_resources.azure_cluster_stack

aksprov.pulumi_resources.azure_cluster_stack.AzureClusterStack.autoload()
