# data_center.py
import logging
from typing import Dict, Optional

import requests

from models import AmazonInfo

logger = logging.getLogger(__name__)

AWS_METADATA_URL = "http://169.254.169.254/latest/meta-data/"

# Schlüssel im AmazonInfo -> Pfad unterhalb von AWS_METADATA_URL
METADATA_PATHS: Dict[str, str] = {
    "instance-id": "instance-id",
    "ami-id": "ami-id",
    "instance-type": "instance-type",
    "local-ipv4": "local-ipv4",
    "local-hostname": "local-hostname",
    "public-hostname": "public-hostname",
    "public-ipv4": "public-ipv4",
    "availability-zone": "placement/availability-zone",
    "mac": "mac",
}


def fetch_amazon_info(base_url: str = AWS_METADATA_URL, timeout: float = 2.0,
                      session: Optional[requests.Session] = None) -> AmazonInfo:
    """
    Fragt den EC2-Metadaten-Dienst ab und baut daraus ein AmazonInfo.
    Fehler werden nur geloggt; zurück kommt, was bis dahin gesammelt wurde.
    """
    http = session if session is not None else requests
    metadata = {}

    for key, path in METADATA_PATHS.items():
        url = f"{base_url}{path}"
        try:
            response = http.get(url, timeout=timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Metadaten-Dienst unter {base_url} nicht erreichbar: {e}")
            break

        if response.status_code == 200:
            metadata[key] = response.text.strip()
        else:
            logger.warning(f"Metadatum '{key}' nicht verfügbar ({response.status_code}): {response.text}")

    logger.info(f"{len(metadata)} von {len(METADATA_PATHS)} EC2-Metadaten gelesen.")
    return AmazonInfo(metadata=metadata)
