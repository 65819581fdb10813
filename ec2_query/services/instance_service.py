from typing import Any

from ec2_query.models.instance_models import (
    DescribeInstancesOptions,
    InstanceIdOptions,
    RunInstancesOptions,
    StopInstancesOptions,
)
from .params import ParameterMap, encode_user_data, pathhashlist, pathlist, scalar_params
from .transport import Transport
from .validation import (
    INSTANCE_ID_RULES,
    RUN_INSTANCES_RULES,
    STOP_INSTANCES_RULES,
    resolve_options,
    to_count,
)

# Logical block device fields and the dotted suffix each one is sent under.
BLOCK_DEVICE_MAPPING_SUFFIXES = {
    "device_name": "DeviceName",
    "virtual_name": "VirtualName",
    "ebs_snapshot_id": "Ebs.SnapshotId",
    "ebs_volume_size": "Ebs.VolumeSize",
    "ebs_delete_on_termination": "Ebs.DeleteOnTermination",
}


def build_run_instances_params(options: RunInstancesOptions) -> ParameterMap:
    params = {}

    if options.security_group is not None:
        params.update(pathlist("SecurityGroup", options.security_group))

    if options.block_device_mapping is not None:
        params.update(pathhashlist("BlockDeviceMapping", options.block_device_mapping,
                                   BLOCK_DEVICE_MAPPING_SUFFIXES))

    params.update(scalar_params([
        ("ImageId", options.image_id),
        ("MinCount", options.min_count),
        ("MaxCount", options.max_count),
        ("KeyName", options.key_name),
        ("AdditionalInfo", options.additional_info),
        ("UserData", encode_user_data(options.user_data, options.base64_encoded)),
        ("InstanceType", options.instance_type),
        ("Placement.AvailabilityZone", options.availability_zone),
        ("KernelId", options.kernel_id),
        ("RamdiskId", options.ramdisk_id),
        ("Monitoring.Enabled", options.monitoring_enabled),
        ("SubnetId", options.subnet_id),
        ("DisableApiTermination", options.disable_api_termination),
        ("InstanceInitiatedShutdownBehavior", options.instance_initiated_shutdown_behavior),
    ]))
    return params


def run_instances(transport: Transport, /, **options: Any):
    """
    Launch between min_count and max_count instances of an image.

    :param transport: Callable that sends (action, parameters) to EC2.
    :param image_id: ID of the machine image. Required.
    :param min_count: Minimum number of instances to launch (default 1).
    :param max_count: Maximum number of instances to launch (default 1); must be >= min_count.
    :param key_name: Name of the key pair.
    :param security_group: Name, or list of names, of security groups.
    :param additional_info: Extra information made available to the instances.
    :param user_data: User data for the instances.
    :param instance_type: One of the configured instance types.
    :param availability_zone: Availability Zone to launch into.
    :param kernel_id: ID of the kernel to launch with.
    :param ramdisk_id: ID of the RAM disk to launch with.
    :param block_device_mapping: List of block device mappings (dicts or BlockDeviceMapping).
    :param monitoring_enabled: Enable detailed monitoring (True or False).
    :param subnet_id: VPC subnet to launch into.
    :param disable_api_termination: Lock the instance against API termination (True or False).
    :param instance_initiated_shutdown_behavior: 'stop' or 'terminate'.
    :param base64_encoded: Base64 encode user_data before sending (default False).
    :return: Whatever the transport returns.
    :raises InvalidArgumentError: If the options break one of the RunInstances rules.
    """
    resolved = resolve_options(
        RunInstancesOptions,
        options,
        RUN_INSTANCES_RULES,
        coercions={"min_count": to_count, "max_count": to_count},
    )
    return transport("RunInstances", build_run_instances_params(resolved))


def describe_instances(transport: Transport, /, **options: Any):
    """
    Describe instances owned by the caller, or only those listed in instance_id.
    """
    resolved = resolve_options(DescribeInstancesOptions, options)
    return transport("DescribeInstances", pathlist("InstanceId", resolved.instance_id))


def _instance_id_action(transport: Transport, action: str, options: dict[str, Any]):
    resolved = resolve_options(InstanceIdOptions, options, INSTANCE_ID_RULES)
    return transport(action, pathlist("InstanceId", resolved.instance_id))


def start_instances(transport: Transport, /, **options: Any):
    """Start stopped EBS-backed instances."""
    return _instance_id_action(transport, "StartInstances", options)


def stop_instances(transport: Transport, /, **options: Any):
    """
    Stop EBS-backed instances.

    :param instance_id: Instance ID, or list of IDs, to stop.
    :param force: Stop without letting the instance flush its caches (True or False).
    """
    resolved = resolve_options(StopInstancesOptions, options, STOP_INSTANCES_RULES)
    params = pathlist("InstanceId", resolved.instance_id)
    params.update(scalar_params([("Force", resolved.force)]))
    return transport("StopInstances", params)


def reboot_instances(transport: Transport, /, **options: Any):
    """Queue a reboot of the listed instances. Terminated instances are ignored by EC2."""
    return _instance_id_action(transport, "RebootInstances", options)


def terminate_instances(transport: Transport, /, **options: Any):
    """Shut down the listed instances. Terminating an already terminated instance succeeds."""
    return _instance_id_action(transport, "TerminateInstances", options)


def monitor_instances(transport: Transport, /, **options: Any):
    """Start CloudWatch monitoring of the listed instances."""
    return _instance_id_action(transport, "MonitorInstances", options)


def unmonitor_instances(transport: Transport, /, **options: Any):
    """Stop CloudWatch monitoring of the listed instances."""
    return _instance_id_action(transport, "UnmonitorInstances", options)


def describe_instance_attribute(transport: Transport, /, **options: Any):
    raise NotImplementedError("describe_instance_attribute is not implemented")


def modify_instance_attribute(transport: Transport, /, **options: Any):
    raise NotImplementedError("modify_instance_attribute is not implemented")


def reset_instance_attribute(transport: Transport, /, **options: Any):
    raise NotImplementedError("reset_instance_attribute is not implemented")


def describe_reserved_instances(transport: Transport, /, **options: Any):
    raise NotImplementedError("describe_reserved_instances is not implemented")


def describe_reserved_instances_offerings(transport: Transport, /, **options: Any):
    raise NotImplementedError("describe_reserved_instances_offerings is not implemented")


def purchase_reserved_instances_offering(transport: Transport, /, **options: Any):
    raise NotImplementedError("purchase_reserved_instances_offering is not implemented")


# Operations by the name they are exposed under over HTTP.
OPERATIONS = {
    "run-instances": run_instances,
    "describe-instances": describe_instances,
    "describe-instance-attribute": describe_instance_attribute,
    "modify-instance-attribute": modify_instance_attribute,
    "reset-instance-attribute": reset_instance_attribute,
    "start-instances": start_instances,
    "stop-instances": stop_instances,
    "reboot-instances": reboot_instances,
    "terminate-instances": terminate_instances,
    "monitor-instances": monitor_instances,
    "unmonitor-instances": unmonitor_instances,
    "describe-reserved-instances": describe_reserved_instances,
    "describe-reserved-instances-offerings": describe_reserved_instances_offerings,
    "purchase-reserved-instances-offering": purchase_reserved_instances_offering,
}
