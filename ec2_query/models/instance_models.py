from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


def _flatten(items):
    flat = []
    for item in items:
        if isinstance(item, (list, tuple)):
            flat.extend(_flatten(item))
        else:
            flat.append(item)
    return flat


class ShutdownBehavior(str, Enum):
    """What an instance does when it shuts itself down."""
    STOP = "stop"
    TERMINATE = "terminate"


# A single block device to attach at launch. Only the fields a caller sets
# are encoded, so every field is optional.
class BlockDeviceMapping(BaseModel):
    model_config = ConfigDict(extra="ignore")

    device_name: Optional[str] = None
    virtual_name: Optional[str] = None
    ebs_snapshot_id: Optional[str] = None
    ebs_volume_size: Optional[Union[int, str]] = None
    ebs_delete_on_termination: Optional[Union[bool, str]] = None


# Options for RunInstances. Defaults mirror the EC2 documentation; fields the
# operation does not know about are dropped.
class RunInstancesOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    image_id: str = ""
    min_count: int = 1
    max_count: int = 1
    key_name: Optional[str] = None
    security_group: Optional[Union[str, list[str]]] = None
    additional_info: Optional[str] = None
    user_data: Optional[Union[str, bytes]] = None
    instance_type: Optional[str] = None
    availability_zone: Optional[str] = None
    kernel_id: Optional[str] = None
    ramdisk_id: Optional[str] = None
    block_device_mapping: Optional[list[BlockDeviceMapping]] = None
    monitoring_enabled: Optional[StrictBool] = None
    subnet_id: Optional[str] = None
    disable_api_termination: Optional[StrictBool] = None
    instance_initiated_shutdown_behavior: Optional[ShutdownBehavior] = None
    base64_encoded: StrictBool = False

    @field_validator("block_device_mapping", mode="before")
    @classmethod
    def flatten_mappings(cls, value: Any) -> Any:
        # Accept one mapping on its own and arbitrarily nested lists of them.
        if value is None:
            return value
        if not isinstance(value, (list, tuple)):
            return [value]
        return _flatten(value)


# Options shared by the operations that act on a list of instance ids.
class InstanceIdOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    instance_id: Union[str, list[str]] = Field(default_factory=list)


class StopInstancesOptions(InstanceIdOptions):
    force: Optional[StrictBool] = None


class DescribeInstancesOptions(InstanceIdOptions):
    pass


# What the query transport hands back. The body is the raw XML text.
class QueryResponse(BaseModel):
    action: str
    status_code: int
    body: str


# The flattened parameters for an operation, without dispatching them.
class ParameterPreview(BaseModel):
    action: str
    parameters: dict[str, str]
