# dynamic_config.py
import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"1", "true", "yes", "y", "on"}
_FALSE_STRINGS = {"0", "false", "no", "n", "off"}


def join_namespace(parent: Optional[str], sub_namespace: str) -> str:
    """
    Setzt den Präfix für alle Lookups zusammen, z.B. ("eureka", "transport")
    -> "eureka.transport.". Der Punkt wird nie verdoppelt.
    """
    sub = sub_namespace if sub_namespace.endswith(".") else sub_namespace + "."
    if parent is None:
        return sub
    if parent.endswith("."):
        return parent + sub
    return parent + "." + sub


def _to_int(raw: Any) -> int:
    if isinstance(raw, bool):
        raise TypeError("bool ist kein int")
    if isinstance(raw, str):
        return int(raw.strip())
    if isinstance(raw, float) and not raw.is_integer():
        raise ValueError(f"{raw} ist keine Ganzzahl")
    return int(raw)


def _to_float(raw: Any) -> float:
    if isinstance(raw, bool):
        raise TypeError("bool ist kein float")
    if isinstance(raw, str):
        return float(raw.strip())
    return float(raw)


def _to_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"'{raw}' ist kein Wahrheitswert")


def _to_str(raw: Any) -> str:
    return raw if isinstance(raw, str) else str(raw)


class DynamicProperty:
    """Handle auf einen Schlüssel; get() liest jedes Mal den aktuellen Wert."""

    def __init__(self, source: "DynamicConfigSource", key: str, default: Any,
                 converter: Callable[[Any], Any]):
        self._source = source
        self._key = key
        self._default = default
        self._converter = converter

    @property
    def key(self) -> str:
        return self._key

    @property
    def default(self) -> Any:
        return self._default

    def get(self) -> Any:
        raw = self._source.get_raw(self._key)
        if raw is None:
            return self._default
        try:
            return self._converter(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ungültiger Wert für '{self._key}': {raw!r} ({e}). Verwende Default {self._default!r}.")
            return self._default

    def __repr__(self):
        return f"DynamicProperty({self._key!r}, default={self._default!r})"


class DynamicConfigSource(ABC):
    """
    Quelle für Konfigurationswerte, die bei jedem Zugriff neu gelesen werden.
    Unterklassen liefern nur Rohwerte; die Typumwandlung passiert im Handle.
    """

    @abstractmethod
    def get_raw(self, key: str) -> Any:
        """Rohwert oder None, wenn der Schlüssel nicht existiert."""

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """Alle Schlüssel, die mit prefix beginnen."""

    def get_int_property(self, key: str, default: Optional[int]) -> DynamicProperty:
        return DynamicProperty(self, key, default, _to_int)

    def get_float_property(self, key: str, default: Optional[float]) -> DynamicProperty:
        return DynamicProperty(self, key, default, _to_float)

    get_double_property = get_float_property

    def get_boolean_property(self, key: str, default: Optional[bool]) -> DynamicProperty:
        return DynamicProperty(self, key, default, _to_bool)

    def get_string_property(self, key: str, default: Optional[str]) -> DynamicProperty:
        return DynamicProperty(self, key, default, _to_str)


def _flatten(data: Dict[str, Any], prefix: str = "", flat: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    flat = {} if flat is None else flat
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            _flatten(value, full_key + ".", flat)
            continue
        if full_key in flat:
            logger.warning(f"Schlüssel '{full_key}' ist doppelt definiert, {flat[full_key]!r} wird durch {value!r} ersetzt.")
        flat[full_key] = value
    return flat


class MapConfigSource(DynamicConfigSource):
    """In-Memory-Quelle; Lesen und Schreiben sind über ein Lock abgesichert."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._lock = threading.Lock()
        self._properties = dict(initial or {})

    @classmethod
    def from_json_file(cls, path: str) -> "MapConfigSource":
        """
        Lädt eine JSON-Datei. Verschachtelte Objekte werden zu Punkt-Schlüsseln,
        {"eureka": {"transport": {"readClusterVip": "x"}}} -> "eureka.transport.readClusterVip".

        Ein Schlüssel kann verschachtelt nicht gleichzeitig Wert und Objekt sein.
        Für Paare wie "port" und "port.enabled" die Punkt-Schreibweise verwenden:
        {"eureka": {"port": 8080, "port.enabled": true}}. Doppelt definierte
        Schlüssel werden mit einer Warnung überschrieben (der spätere gewinnt).
        """
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.error(f"Konfigurationsdatei '{path}' nicht gefunden.")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Ungültiges JSON in der Konfigurationsdatei '{path}': {e}")
            raise
        if not isinstance(data, dict):
            raise ValueError(f"Konfigurationsdatei '{path}' muss ein JSON-Objekt enthalten")
        properties = _flatten(data)
        logger.info(f"{len(properties)} Properties aus {path} geladen.")
        return cls(properties)

    def get_raw(self, key: str) -> Any:
        with self._lock:
            return self._properties.get(key)

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return [key for key in self._properties if key.startswith(prefix)]

    def set_property(self, key: str, value: Any) -> None:
        with self._lock:
            self._properties[key] = value

    def clear_property(self, key: str) -> None:
        with self._lock:
            self._properties.pop(key, None)

    def update(self, properties: Dict[str, Any]) -> None:
        with self._lock:
            self._properties.update(properties)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._properties

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
