"""
Graph User Service
Looks up Entra ID users through Microsoft Graph for owner pickers.
"""

from typing import Dict, List, Optional
from urllib.parse import quote

from app.buisness.core.exceptions import ExternalServiceError, ValidationError
from app.services.integrations.graph_client import GraphClient, GraphRequestError
from app.utils.input_validator import InputValidator
from app.logger import get_logger

logger = get_logger("inventory.services.integrations.graph_user_service")

USER_SELECT_FIELDS = [
    "id",
    "displayName",
    "userPrincipalName",
    "mail",
    "department",
    "officeLocation",
    "jobTitle",
    "mobilePhone",
    "businessPhones",
    "companyName",
]
MIN_QUERY_LENGTH = 2
MAX_QUERY_LENGTH = 100
MAX_TOP = 50


def user_to_dict(user: Dict) -> Dict:
    return {
        'id': user.get('id') or '',
        'display_name': user.get('displayName') or '',
        'user_principal_name': user.get('userPrincipalName') or '',
        'mail': user.get('mail'),
        'department': user.get('department'),
        'office_location': user.get('officeLocation'),
        'job_title': user.get('jobTitle'),
        'mobile_phone': user.get('mobilePhone'),
        'business_phones': user.get('businessPhones'),
        'company_name': user.get('companyName'),
    }


class GraphUserService:

    def __init__(self, client: GraphClient):
        self.client = client

    def search_users(self, query: str, top: int = 10) -> List[Dict]:
        """
        Search users by display name, mail or UPN.

        Raises:
            ValidationError: query too short, unsafe, or top outside 1-50
            ExternalServiceError: Graph call failed
        """
        if not query or not query.strip():
            raise ValidationError("Search query cannot be empty")
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            raise ValidationError(f"Search query must be at least {MIN_QUERY_LENGTH} characters")
        is_valid, error = InputValidator.validate_search_term(query, MAX_QUERY_LENGTH)
        if not is_valid:
            raise ValidationError(error)
        if top < 1 or top > MAX_TOP:
            raise ValidationError(f"Top parameter must be between 1 and {MAX_TOP}")

        term = query.replace('"', '')
        params = {
            "$search": f'"displayName:{term}" OR "mail:{term}" OR "userPrincipalName:{term}"',
            "$select": ",".join(USER_SELECT_FIELDS),
            "$top": str(top),
            "$count": "true",
        }
        logger.info(f"Searching users with query: {query}")
        try:
            payload = self.client.get("/users", params=params, headers={"ConsistencyLevel": "eventual"})
        except GraphRequestError as e:
            logger.error(f"Failed to search users with query {query}: {e}")
            raise ExternalServiceError(f"Failed to search users: {e.message}")
        users = payload.get("value", [])
        logger.info(f"Found {len(users)} users matching query: {query}")
        return users

    def _get_user(self, path: str, description: str) -> Optional[Dict]:
        try:
            return self.client.get(path, params={"$select": ",".join(USER_SELECT_FIELDS)})
        except GraphRequestError as e:
            if e.status_code == 404:
                logger.warning(f"{description} not found")
                return None
            logger.error(f"Failed to retrieve {description}: {e}")
            raise ExternalServiceError(f"Failed to retrieve user: {e.message}")

    def get_user_by_id(self, user_id: str) -> Optional[Dict]:
        if not user_id or not user_id.strip():
            raise ValidationError("User ID cannot be empty")
        return self._get_user(f"/users/{quote(user_id.strip(), safe='')}", f"User {user_id}")

    def get_user_by_upn(self, upn: str) -> Optional[Dict]:
        if not upn or not upn.strip():
            raise ValidationError("User Principal Name cannot be empty")
        return self._get_user(f"/users/{quote(upn.strip(), safe='@')}", f"User {upn}")

    def get_user_manager(self, user_id: str) -> Optional[Dict]:
        if not user_id or not user_id.strip():
            raise ValidationError("User ID cannot be empty")
        return self._get_user(f"/users/{quote(user_id.strip(), safe='')}/manager", f"Manager of user {user_id}")
