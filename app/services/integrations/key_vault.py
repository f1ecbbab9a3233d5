"""
Azure Key Vault secret loading.

Secret names use "--" as the section separator because Key Vault does not allow
":" in names; "AzureAd--ClientSecret" becomes the configuration key "AzureAd:ClientSecret".
"""

from typing import Dict, List

from app.logger import get_logger
from app.services.integrations.graph_client import (
    ClientCredentialsTokenProvider,
    GraphClient,
    GraphRequestError,
)

logger = get_logger("inventory.services.integrations.key_vault")

KEY_VAULT_SCOPE = "https://vault.azure.net/.default"
KEY_VAULT_API_VERSION = "7.4"


def secret_name_to_config_key(secret_name: str) -> str:
    return secret_name.replace("--", ":")


class KeyVaultSecretLoader:
    def __init__(self, vault_uri: str, tenant_id: str, client_id: str, client_secret: str):
        token_provider = ClientCredentialsTokenProvider(tenant_id, client_id, client_secret, scope=KEY_VAULT_SCOPE)
        self.client = GraphClient(token_provider, base_url=vault_uri)

    def list_secret_names(self) -> List[str]:
        names = []
        path = "/secrets"
        params = {"api-version": KEY_VAULT_API_VERSION}
        while path:
            page = self.client.get(path, params=params)
            for item in page.get("value", []):
                if not item.get("attributes", {}).get("enabled", True):
                    continue
                names.append(item["id"].rstrip("/").rsplit("/", 1)[-1])
            next_link = page.get("nextLink")
            if next_link and next_link.startswith(self.client.base_url):
                path, params = next_link[len(self.client.base_url):], None
            else:
                path = None
        return names

    def get_secret(self, name: str) -> str:
        return self.client.get(f"/secrets/{name}", params={"api-version": KEY_VAULT_API_VERSION}).get("value")

    def load(self) -> Dict[str, str]:
        """
        Read every enabled secret.

        Returns:
            Mapping of configuration key (":"-separated) to secret value
        """
        secrets = {}
        for name in self.list_secret_names():
            try:
                secrets[secret_name_to_config_key(name)] = self.get_secret(name)
            except GraphRequestError as e:
                logger.error(f"Could not read Key Vault secret {name}: {e}")
                raise
        logger.info(f"Loaded {len(secrets)} secret(s) from Key Vault")
        return secrets
