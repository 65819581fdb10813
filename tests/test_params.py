"""Unit tests for the query parameter encoders."""

import base64

from ec2_query.models.instance_models import BlockDeviceMapping, ShutdownBehavior
from ec2_query.services.params import (
    encode_user_data,
    pathhashlist,
    pathlist,
    scalar_params,
    stringify,
)

SUFFIXES = {
    "device_name": "DeviceName",
    "virtual_name": "VirtualName",
    "ebs_volume_size": "Ebs.VolumeSize",
    "ebs_delete_on_termination": "Ebs.DeleteOnTermination",
}


class TestStringify:
    """Scalar rendering."""

    def test_booleans_are_lowercase_words(self):
        assert stringify(True) == "true"
        assert stringify(False) == "false"

    def test_integers_are_decimal(self):
        assert stringify(10) == "10"

    def test_enum_uses_its_value(self):
        assert stringify(ShutdownBehavior.TERMINATE) == "terminate"

    def test_scalar_params_skip_none(self):
        params = scalar_params([("KeyName", None), ("ImageId", "ami-1"), ("Force", False)])

        assert params == {"ImageId": "ami-1", "Force": "false"}


class TestPathlist:
    """Indexed list encoding."""

    def test_numbers_from_one_in_order(self):
        assert pathlist("SecurityGroup", ["sg-a", "sg-b"]) == {
            "SecurityGroup.1": "sg-a",
            "SecurityGroup.2": "sg-b",
        }

    def test_single_string_is_one_element(self):
        assert pathlist("InstanceId", "i-1") == {"InstanceId.1": "i-1"}

    def test_empty_elements_keep_their_index(self):
        params = pathlist("InstanceId", ["i-1", "", "i-3"])

        assert list(params.items()) == [
            ("InstanceId.1", "i-1"),
            ("InstanceId.2", ""),
            ("InstanceId.3", "i-3"),
        ]

    def test_empty_list_gives_nothing(self):
        assert pathlist("InstanceId", []) == {}


class TestPathhashlist:
    """Indexed record encoding."""

    def test_only_present_fields_are_written(self):
        records = [BlockDeviceMapping(device_name="/dev/sdh", ebs_volume_size="10")]

        params = pathhashlist("BlockDeviceMapping", records, SUFFIXES)

        assert params == {
            "BlockDeviceMapping.1.DeviceName": "/dev/sdh",
            "BlockDeviceMapping.1.Ebs.VolumeSize": "10",
        }
        assert "BlockDeviceMapping.1.VirtualName" not in params

    def test_records_can_differ_in_shape(self):
        records = [
            {"device_name": "/dev/sdh"},
            {"virtual_name": "ephemeral0", "ebs_delete_on_termination": True},
        ]

        params = pathhashlist("BlockDeviceMapping", records, SUFFIXES)

        assert params == {
            "BlockDeviceMapping.1.DeviceName": "/dev/sdh",
            "BlockDeviceMapping.2.VirtualName": "ephemeral0",
            "BlockDeviceMapping.2.Ebs.DeleteOnTermination": "true",
        }

    def test_empty_string_counts_as_present(self):
        params = pathhashlist("BlockDeviceMapping", [{"virtual_name": ""}], SUFFIXES)

        assert params == {"BlockDeviceMapping.1.VirtualName": ""}

    def test_unknown_fields_are_skipped(self):
        params = pathhashlist("BlockDeviceMapping", [{"device_name": "/dev/sdh", "colour": "red"}], SUFFIXES)

        assert params == {"BlockDeviceMapping.1.DeviceName": "/dev/sdh"}


class TestEncodeUserData:
    """User data transformation."""

    def test_absent_user_data(self):
        assert encode_user_data(None, True) is None

    def test_passthrough_when_not_encoding(self):
        assert encode_user_data("#!/bin/sh\necho hi\n", False) == "#!/bin/sh\necho hi\n"

    def test_base64_encodes(self):
        assert encode_user_data("hello", True) == base64.b64encode(b"hello").decode()

    def test_long_input_stays_on_one_line(self):
        encoded = encode_user_data("x" * 500 + "\n" + "y" * 500, True)

        assert "\n" not in encoded
        assert base64.b64decode(encoded) == ("x" * 500 + "\n" + "y" * 500).encode()

    def test_bytes_are_accepted(self):
        assert encode_user_data(b"\x00\x01", True) == "AAE="
