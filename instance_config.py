# instance_config.py
import logging
import socket
from typing import Callable, Dict, Optional, Tuple, Union

from dynamic_config import DynamicConfigSource, join_namespace
from models import AmazonInfo, DefaultDataCenterInfo, InstanceInfo, LeaseInfo

logger = logging.getLogger(__name__)

LEASE_EXPIRATION_DURATION_SECONDS = 90
LEASE_RENEWAL_INTERVAL_SECONDS = 30
SECURE_PORT_ENABLED = False
NON_SECURE_PORT_ENABLED = True
NON_SECURE_PORT = 80
SECURE_PORT = 443
INSTANCE_ENABLED_ON_INIT = False

DEFAULT_CONFIG_NAMESPACE = "eureka"

HostInfo = Tuple[str, str]


class HostResolutionError(Exception):
    pass


def resolve_host_info() -> HostInfo:
    """
    Ermittelt (IP-Adresse, Hostname) des lokalen Rechners.

    Achtung: bei mehreren Netzwerkkarten oder virtuellen Interfaces kann hier
    die falsche Adresse herauskommen. Dann Hostname und /etc/hosts sauber
    pflegen oder die Werte über PropertiesInstanceConfig ("hostname",
    "ipAddress") fest vorgeben.
    """
    try:
        host_name = socket.gethostname()
        ip_address = socket.gethostbyname(host_name)
    except (OSError, UnicodeError) as e:
        # UnicodeError: idna lehnt Labels > 63 Zeichen ab
        raise HostResolutionError(f"Lokaler Host konnte nicht aufgelöst werden: {e}") from e
    return ip_address, host_name


class InstanceConfig:
    """
    Beschreibung der lokalen Instanz mit sinnvollen Defaults, damit man sich
    schnell bei Eureka anmelden kann. Unterklassen überschreiben nur die
    Methoden, die sie wirklich anders brauchen.

    Die Host-Informationen werden genau einmal im Konstruktor ermittelt.
    """

    def __init__(self, data_center_info: Union[DefaultDataCenterInfo, AmazonInfo, None] = None,
                 host_info_resolver: Callable[[], HostInfo] = resolve_host_info):
        self._data_center_info = data_center_info if data_center_info is not None else DefaultDataCenterInfo()
        self._host_info = self._load_host_info(host_info_resolver)

    @staticmethod
    def _load_host_info(host_info_resolver: Callable[[], HostInfo]) -> HostInfo:
        try:
            ip_address, host_name = host_info_resolver()
        except HostResolutionError as e:
            logger.exception(f"Host-Informationen konnten nicht ermittelt werden: {e}")
            return "", ""
        logger.debug(f"Lokaler Host: {host_name} ({ip_address})")
        return ip_address, host_name

    def instance_enabled_on_init(self) -> bool:
        return INSTANCE_ENABLED_ON_INIT

    def non_secure_port(self) -> int:
        return NON_SECURE_PORT

    def secure_port(self) -> int:
        return SECURE_PORT

    def non_secure_port_enabled(self) -> bool:
        return NON_SECURE_PORT_ENABLED

    def secure_port_enabled(self) -> bool:
        return SECURE_PORT_ENABLED

    def lease_renewal_interval_seconds(self) -> int:
        return LEASE_RENEWAL_INTERVAL_SECONDS

    def lease_expiration_duration_seconds(self) -> int:
        return LEASE_EXPIRATION_DURATION_SECONDS

    def virtual_host_name(self) -> str:
        return f"{self.host_name(False)}:{self.non_secure_port()}"

    def secure_virtual_host_name(self) -> str:
        return f"{self.host_name(False)}:{self.secure_port()}"

    def auto_scaling_group_name(self) -> Optional[str]:
        return None

    def host_name(self, refresh: bool = False) -> str:
        # refresh ist ein Hook für Unterklassen, hier immer der gecachte Wert
        return self._host_info[1]

    def metadata(self) -> Optional[Dict[str, str]]:
        return None

    def data_center_info(self) -> Union[DefaultDataCenterInfo, AmazonInfo]:
        return self._data_center_info

    def ip_address(self) -> str:
        return self._host_info[0]

    def to_instance_info(self) -> InstanceInfo:
        """
        Momentaufnahme aller Werte als validiertes Modell. Wirft
        pydantic.ValidationError, wenn eine Unterklasse die Regeln verletzt
        (Ports 1-65535, mind. ein Port aktiv, durationInSecs >= renewalIntervalInSecs).
        """
        return InstanceInfo(
            hostName=self.host_name(False),
            ipAddr=self.ip_address(),
            port=self.non_secure_port(),
            portEnabled=self.non_secure_port_enabled(),
            securePort=self.secure_port(),
            securePortEnabled=self.secure_port_enabled(),
            vipAddress=self.virtual_host_name(),
            secureVipAddress=self.secure_virtual_host_name(),
            instanceEnabledOnInit=self.instance_enabled_on_init(),
            leaseInfo=LeaseInfo(
                renewalIntervalInSecs=self.lease_renewal_interval_seconds(),
                durationInSecs=self.lease_expiration_duration_seconds(),
            ),
            dataCenterInfo=self.data_center_info(),
            metadata=self.metadata(),
            asgName=self.auto_scaling_group_name(),
        )


class PropertiesInstanceConfig(InstanceConfig):
    """
    Liest die Instanz-Werte live aus einer DynamicConfigSource unter
    "<namespace>." (Default "eureka."). Fehlende Schlüssel fallen auf die
    Defaults von InstanceConfig zurück.
    """

    def __init__(self, source: DynamicConfigSource, namespace: str = DEFAULT_CONFIG_NAMESPACE,
                 data_center_info: Union[DefaultDataCenterInfo, AmazonInfo, None] = None,
                 host_info_resolver: Callable[[], HostInfo] = resolve_host_info):
        super().__init__(data_center_info=data_center_info, host_info_resolver=host_info_resolver)
        self._source = source
        self._namespace = join_namespace(None, namespace)

    @property
    def namespace(self) -> str:
        return self._namespace

    def _key(self, short_key: str) -> str:
        return self._namespace + short_key

    def host_name(self, refresh: bool = False) -> str:
        return self._source.get_string_property(self._key("hostname"), super().host_name(refresh)).get()

    def ip_address(self) -> str:
        return self._source.get_string_property(self._key("ipAddress"), super().ip_address()).get()

    def non_secure_port(self) -> int:
        return self._source.get_int_property(self._key("port"), super().non_secure_port()).get()

    def secure_port(self) -> int:
        return self._source.get_int_property(self._key("securePort"), super().secure_port()).get()

    def non_secure_port_enabled(self) -> bool:
        return self._source.get_boolean_property(self._key("port.enabled"), super().non_secure_port_enabled()).get()

    def secure_port_enabled(self) -> bool:
        return self._source.get_boolean_property(self._key("securePort.enabled"), super().secure_port_enabled()).get()

    def lease_renewal_interval_seconds(self) -> int:
        return self._source.get_int_property(
            self._key("lease.renewalInterval"), super().lease_renewal_interval_seconds()).get()

    def lease_expiration_duration_seconds(self) -> int:
        return self._source.get_int_property(
            self._key("lease.duration"), super().lease_expiration_duration_seconds()).get()

    def instance_enabled_on_init(self) -> bool:
        return self._source.get_boolean_property(
            self._key("traffic.enabledOnInit"), super().instance_enabled_on_init()).get()

    def auto_scaling_group_name(self) -> Optional[str]:
        return self._source.get_string_property(self._key("asgName"), super().auto_scaling_group_name()).get()

    def metadata(self) -> Optional[Dict[str, str]]:
        prefix = self._key("metadata.")
        keys = self._source.keys(prefix)
        if not keys:
            return super().metadata()
        return {key[len(prefix):]: self._source.get_string_property(key, "").get() for key in keys}
