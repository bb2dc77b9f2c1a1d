# transport_config.py
import logging
from typing import Any, Dict, Optional

from dynamic_config import DynamicConfigSource, join_namespace

logger = logging.getLogger(__name__)

TRANSPORT_CONFIG_SUB_NAMESPACE = "transport"

SESSION_RECONNECT_INTERVAL_KEY = "sessionReconnectIntervalSeconds"
QUARANTINE_REFRESH_PERCENTAGE_KEY = "quarantineRefreshPercentage"
DATA_STALENESS_THRESHOLD_KEY = "applicationsResolverDataStalenessThresholdSeconds"
APPLICATION_RESOLVER_USE_IP_KEY = "applicationsResolverUseIp"
ASYNC_RESOLVER_REFRESH_INTERVAL_KEY = "asyncResolverRefreshIntervalMs"
ASYNC_RESOLVER_WARMUP_TIMEOUT_KEY = "asyncResolverWarmupTimeoutMs"
ASYNC_EXECUTOR_THREADPOOL_SIZE_KEY = "asyncExecutorThreadPoolSize"
WRITE_CLUSTER_VIP_KEY = "writeClusterVip"
READ_CLUSTER_VIP_KEY = "readClusterVip"
BOOTSTRAP_RESOLVER_STRATEGY_KEY = "bootstrapResolverStrategy"
USE_BOOTSTRAP_RESOLVER_FOR_QUERY = "useBootstrapResolverForQuery"

# Defaults
SESSION_RECONNECT_INTERVAL = 20 * 60
QUARANTINE_REFRESH_PERCENTAGE = 0.66
DATA_STALENESS_THRESHOLD = 5 * 60
ASYNC_RESOLVER_REFRESH_INTERVAL = 5 * 60 * 1000
ASYNC_RESOLVER_WARMUP_TIMEOUT = 5000
ASYNC_EXECUTOR_THREADPOOL_SIZE = 5


class TransportConfig:
    """
    Transport-Einstellungen des Eureka-Clients. Jeder Zugriff liest den
    aktuellen Wert aus der Quelle, es wird nichts zwischengespeichert.
    """

    def __init__(self, parent_namespace: Optional[str], source: DynamicConfigSource):
        self._namespace = join_namespace(parent_namespace, TRANSPORT_CONFIG_SUB_NAMESPACE)
        self._source = source

    @property
    def namespace(self) -> str:
        return self._namespace

    def sessioned_client_reconnect_interval_seconds(self) -> int:
        """Periodischer Reconnect der HTTP-Session, in Sekunden."""
        return self._source.get_int_property(
            self._namespace + SESSION_RECONNECT_INTERVAL_KEY, SESSION_RECONNECT_INTERVAL).get()

    def retryable_client_quarantine_refresh_percentage(self) -> float:
        """
        Anteil der Server in Quarantäne (bezogen auf alle bekannten Server),
        ab dem die Quarantäne-Liste geleert wird.
        """
        return self._source.get_float_property(
            self._namespace + QUARANTINE_REFRESH_PERCENTAGE_KEY, QUARANTINE_REFRESH_PERCENTAGE).get()

    def applications_resolver_data_staleness_threshold_seconds(self) -> int:
        return self._source.get_int_property(
            self._namespace + DATA_STALENESS_THRESHOLD_KEY, DATA_STALENESS_THRESHOLD).get()

    def applications_resolver_use_ip(self) -> bool:
        return self._source.get_boolean_property(
            self._namespace + APPLICATION_RESOLVER_USE_IP_KEY, False).get()

    def async_resolver_refresh_interval_ms(self) -> int:
        """Wie oft der Endpoint-Cluster asynchron neu aufgelöst wird (ms)."""
        return self._source.get_int_property(
            self._namespace + ASYNC_RESOLVER_REFRESH_INTERVAL_KEY, ASYNC_RESOLVER_REFRESH_INTERVAL).get()

    def async_resolver_warm_up_timeout_ms(self) -> int:
        return self._source.get_int_property(
            self._namespace + ASYNC_RESOLVER_WARMUP_TIMEOUT_KEY, ASYNC_RESOLVER_WARMUP_TIMEOUT).get()

    def async_executor_thread_pool_size(self) -> int:
        return self._source.get_int_property(
            self._namespace + ASYNC_EXECUTOR_THREADPOOL_SIZE_KEY, ASYNC_EXECUTOR_THREADPOOL_SIZE).get()

    def write_cluster_vip(self) -> Optional[str]:
        return self._source.get_string_property(self._namespace + WRITE_CLUSTER_VIP_KEY, None).get()

    def read_cluster_vip(self) -> Optional[str]:
        return self._source.get_string_property(self._namespace + READ_CLUSTER_VIP_KEY, None).get()

    def bootstrap_resolver_strategy(self) -> Optional[str]:
        return self._source.get_string_property(self._namespace + BOOTSTRAP_RESOLVER_STRATEGY_KEY, None).get()

    def use_bootstrap_resolver_for_query(self) -> bool:
        return self._source.get_boolean_property(
            self._namespace + USE_BOOTSTRAP_RESOLVER_FOR_QUERY, True).get()

    def snapshot(self) -> Dict[str, Any]:
        """Aktuelle Werte unter ihren kurzen Schlüsseln, z.B. für ein Start-Log."""
        values = {
            SESSION_RECONNECT_INTERVAL_KEY: self.sessioned_client_reconnect_interval_seconds(),
            QUARANTINE_REFRESH_PERCENTAGE_KEY: self.retryable_client_quarantine_refresh_percentage(),
            DATA_STALENESS_THRESHOLD_KEY: self.applications_resolver_data_staleness_threshold_seconds(),
            APPLICATION_RESOLVER_USE_IP_KEY: self.applications_resolver_use_ip(),
            ASYNC_RESOLVER_REFRESH_INTERVAL_KEY: self.async_resolver_refresh_interval_ms(),
            ASYNC_RESOLVER_WARMUP_TIMEOUT_KEY: self.async_resolver_warm_up_timeout_ms(),
            ASYNC_EXECUTOR_THREADPOOL_SIZE_KEY: self.async_executor_thread_pool_size(),
            WRITE_CLUSTER_VIP_KEY: self.write_cluster_vip(),
            READ_CLUSTER_VIP_KEY: self.read_cluster_vip(),
            BOOTSTRAP_RESOLVER_STRATEGY_KEY: self.bootstrap_resolver_strategy(),
            USE_BOOTSTRAP_RESOLVER_FOR_QUERY: self.use_bootstrap_resolver_for_query(),
        }
        logger.debug(f"Transport-Konfiguration ({self._namespace}): {values}")
        return values
