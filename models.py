# models.py
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Union

from pydantic import (BaseModel, ConfigDict, Field, TypeAdapter, field_serializer, field_validator,
                      model_validator)


class DataCenterName(str, Enum):
    MY_OWN = "MyOwn"
    AMAZON = "Amazon"
    NETFLIX = "Netflix"


class DefaultDataCenterInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Literal["MyOwn", "Netflix"] = DataCenterName.MY_OWN.value


class AmazonInfo(BaseModel):
    """Rechenzentrums-Beschreibung für EC2, inkl. der Metadaten der Instanz."""

    model_config = ConfigDict(frozen=True)

    name: Literal["Amazon"] = DataCenterName.AMAZON.value
    # nach der Validierung nur noch als read-only Mapping gespeichert
    metadata: Dict[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, metadata: Dict[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(metadata))

    @field_serializer("metadata")
    def _dump_metadata(self, metadata: Mapping[str, str]) -> Dict[str, str]:
        return dict(metadata)

    def get(self, key: str) -> Optional[str]:
        return self.metadata.get(key)


DataCenterInfo = Annotated[
    Union[DefaultDataCenterInfo, AmazonInfo],
    Field(discriminator="name"),
]

_data_center_adapter = TypeAdapter(DataCenterInfo)


def parse_data_center_info(data: Any) -> Union[DefaultDataCenterInfo, AmazonInfo]:
    """Wählt anhand von 'name' die passende Variante aus (z.B. aus services.json)."""
    return _data_center_adapter.validate_python(data)


class LeaseInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    renewalIntervalInSecs: int = Field(default=30, ge=1)
    durationInSecs: int = Field(default=90, ge=1)

    @model_validator(mode="after")
    def _duration_covers_renewal(self):
        # Ablauf darf nie vor der nächsten Erneuerung liegen
        if self.durationInSecs < self.renewalIntervalInSecs:
            raise ValueError(
                f"durationInSecs ({self.durationInSecs}) muss >= "
                f"renewalIntervalInSecs ({self.renewalIntervalInSecs}) sein"
            )
        return self


class InstanceInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    hostName: str
    ipAddr: str
    port: int = Field(ge=1, le=65535)
    portEnabled: bool
    securePort: int = Field(ge=1, le=65535)
    securePortEnabled: bool
    vipAddress: str
    secureVipAddress: str
    instanceEnabledOnInit: bool
    leaseInfo: LeaseInfo = LeaseInfo()
    dataCenterInfo: DataCenterInfo = DefaultDataCenterInfo()
    metadata: Optional[Dict[str, str]] = None
    asgName: Optional[str] = None

    @model_validator(mode="after")
    def _reachable(self):
        if not (self.portEnabled or self.securePortEnabled):
            raise ValueError("Mindestens einer von port/securePort muss aktiviert sein")
        return self
