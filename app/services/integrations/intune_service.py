"""
Intune Service
Read-only access to Intune managed devices through Microsoft Graph.

All filter values pass through the OData sanitizer before they are placed in a
$filter expression.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional
from urllib.parse import quote

from app.buisness.core.exceptions import ExternalServiceError, ValidationError
from app.services.integrations.graph_client import GraphClient, GraphRequestError
from app.utils.input_validator import InputValidator
from app.utils.odata_sanitizer import create_equality_filter, create_starts_with_filter, is_valid_filter_value
from app.logger import get_logger

logger = get_logger("inventory.services.integrations.intune_service")

DEVICES_PATH = "/deviceManagement/managedDevices"
DEVICE_SELECT_FIELDS = [
    "id",
    "deviceName",
    "serialNumber",
    "manufacturer",
    "model",
    "operatingSystem",
    "osVersion",
    "complianceState",
    "lastSyncDateTime",
    "enrolledDateTime",
    "userPrincipalName",
    "managementAgent",
]
DEVICE_DETAIL_FIELDS = DEVICE_SELECT_FIELDS + ["totalStorageSpaceInBytes", "freeStorageSpaceInBytes"]
MAX_DEVICES = 999
LAST_SYNCED_COUNT = 10


class IntuneService:

    def __init__(self, client: GraphClient):
        self.client = client

    def _list(self, description: str, params: Dict) -> List[Dict]:
        params.setdefault("$select", ",".join(DEVICE_SELECT_FIELDS))
        try:
            payload = self.client.get(DEVICES_PATH, params=params)
        except GraphRequestError as e:
            logger.error(f"Failed to retrieve {description}: {e}")
            raise ExternalServiceError(f"Failed to retrieve {description}: {e.message}")
        devices = payload.get("value", [])
        logger.info(f"Retrieved {len(devices)} {description}")
        return devices

    @staticmethod
    def _check_filter_value(value: str, field: str):
        if not value or not value.strip():
            raise ValidationError(f"{field} cannot be empty")
        if not is_valid_filter_value(value):
            logger.warning(f"Rejected {field} filter value: {value}")
            raise ValidationError(f"{field} contains invalid characters")

    def get_managed_devices(self) -> List[Dict]:
        return self._list("managed devices", {"$top": str(MAX_DEVICES)})

    def get_device_by_id(self, device_id: str) -> Optional[Dict]:
        is_valid, error = InputValidator.validate_device_id(device_id)
        if not is_valid:
            raise ValidationError(error)
        try:
            return self.client.get(f"{DEVICES_PATH}/{quote(device_id.strip(), safe='')}",
                                   params={"$select": ",".join(DEVICE_DETAIL_FIELDS)})
        except GraphRequestError as e:
            if e.status_code == 404:
                logger.warning(f"Device {device_id} not found")
                return None
            logger.error(f"Failed to retrieve device {device_id}: {e}")
            raise ExternalServiceError(f"Failed to retrieve device: {e.message}")

    def get_device_by_serial(self, serial_number: str) -> Optional[Dict]:
        self._check_filter_value(serial_number, "Serial number")
        devices = self._list("devices by serial number",
                             {"$filter": create_equality_filter("serialNumber", serial_number.strip())})
        return devices[0] if devices else None

    def search_devices_by_name(self, device_name: str) -> List[Dict]:
        self._check_filter_value(device_name, "Search name")
        return self._list("devices by name",
                          {"$filter": create_starts_with_filter("deviceName", device_name.strip())})

    def get_devices_by_os(self, operating_system: str) -> List[Dict]:
        self._check_filter_value(operating_system, "Operating system")
        return self._list("devices by operating system",
                          {"$filter": create_equality_filter("operatingSystem", operating_system.strip())})

    def is_device_compliant(self, device_id: str) -> Dict:
        """Unknown devices count as not compliant"""
        is_valid, error = InputValidator.validate_device_id(device_id)
        if not is_valid:
            raise ValidationError(error)
        try:
            device = self.client.get(f"{DEVICES_PATH}/{quote(device_id.strip(), safe='')}",
                                     params={"$select": "id,complianceState"})
        except GraphRequestError as e:
            if e.status_code != 404:
                logger.error(f"Failed to check compliance for device {device_id}: {e}")
                raise ExternalServiceError(f"Failed to check device compliance: {e.message}")
            logger.warning(f"Device {device_id} not found while checking compliance")
            device = None

        compliance_state = (device or {}).get("complianceState")
        logger.info(f"Device {device_id} compliance state: {compliance_state}")
        return {
            'device_id': device_id,
            'is_compliant': str(compliance_state or '').lower() == 'compliant',
            'checked_at': datetime.now(timezone.utc).isoformat(),
        }

    def get_statistics(self) -> Dict:
        devices = self.get_managed_devices()

        by_os = Counter(d.get("operatingSystem") or "Unknown" for d in devices)
        by_compliance = Counter(d.get("complianceState") or "Unknown" for d in devices)
        synced = sorted((d for d in devices if d.get("lastSyncDateTime")),
                        key=lambda d: d["lastSyncDateTime"], reverse=True)

        return {
            'total_devices': len(devices),
            'by_operating_system': [{'operating_system': name, 'count': count}
                                    for name, count in by_os.most_common()],
            'by_compliance_state': [{'compliance_state': name, 'count': count}
                                    for name, count in by_compliance.items()],
            'last_synced_devices': [{'device_id': d.get("id"),
                                     'device_name': d.get("deviceName"),
                                     'last_sync_date_time': d.get("lastSyncDateTime")}
                                    for d in synced[:LAST_SYNCED_COUNT]],
            'generated_at': datetime.now(timezone.utc).isoformat(),
        }
