# Built-in Azure role definition ids.
# https://learn.microsoft.com/en-us/azure/role-based-access-control/built-in-roles
ACR_PULL_ROLE_DEFINITION_ID = "7f951dda-4ed3-4680-a7ca-43fe172d538d"
ACR_PUSH_ROLE_DEFINITION_ID = "8311e382-0749-4cb8-b61a-304f252e45ec"
NETWORK_CONTRIBUTOR_ROLE_DEFINITION_ID = "4d97b98b-1d4f-4787-a291-c67834d212e7"
READER_ROLE_DEFINITION_ID = "acdd72a7-3385-48ef-bd42-f606fba81ae7"

ROLE_DEFINITION_IDS = {
    "AcrPull": ACR_PULL_ROLE_DEFINITION_ID,
    "AcrPush": ACR_PUSH_ROLE_DEFINITION_ID,
    "Network Contributor": NETWORK_CONTRIBUTOR_ROLE_DEFINITION_ID,
    "Reader": READER_ROLE_DEFINITION_ID,
}


def role_definition_id(role_definition_name: str) -> str:
    if role_definition_name not in ROLE_DEFINITION_IDS:
        msg = f"unknown role definition name {role_definition_name!r}"
        raise ValueError(msg)

    return ROLE_DEFINITION_IDS[role_definition_name]
