"""Pydantic schema for the Event Grid event envelope and the payloads we act on."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SUBSCRIPTION_VALIDATION_EVENT_TYPE = "Microsoft.EventGrid.SubscriptionValidationEvent"
SECRET_NEW_VERSION_CREATED_EVENT_TYPE = "Microsoft.KeyVault.SecretNewVersionCreated"


class EventGridEvent(BaseModel):
    """Pydantic model for a single event in the Event Grid schema."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    event_type: str = Field(alias="eventType")
    subject: str | None = None
    event_time: str | None = Field(default=None, alias="eventTime")
    data_version: str | None = Field(default=None, alias="dataVersion")
    data: dict[str, Any] = Field(default_factory=dict)


class SubscriptionValidationData(BaseModel):
    """Pydantic model for the data of a subscription validation event."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    validation_code: str | None = Field(default=None, alias="validationCode")
    validation_url: str | None = Field(default=None, alias="validationUrl")


class SecretNewVersionCreatedData(BaseModel):
    """Pydantic model for the data of a Key Vault secret new version event."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    vault_name: str | None = Field(default=None, alias="VaultName")
    object_name: str | None = Field(default=None, alias="ObjectName")
    object_type: str | None = Field(default=None, alias="ObjectType")
    version: str | None = Field(default=None, alias="Version")
