import os

# EC2 query API version sent with every request.
API_VERSION = os.getenv("EC2_API_VERSION", "2009-11-30")

# Credentials and endpoint selection.
DEFAULT_PROFILE = os.getenv("AWS_PROFILE", "default")
DEFAULT_REGION = os.getenv("AWS_DEFAULT_REGION", "us-east-1")
ENDPOINT_URL = os.getenv("EC2_ENDPOINT_URL")

# Logging.
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "app.log")

# Instance types accepted by RunInstances. Extra types can be added with a
# comma separated EC2_EXTRA_INSTANCE_TYPES without touching validation.
_BASE_INSTANCE_TYPES = (
    "m1.small",
    "m1.large",
    "m1.xlarge",
    "c1.medium",
    "c1.xlarge",
    "m2.2xlarge",
    "m2.4xlarge",
)
_EXTRA_INSTANCE_TYPES = tuple(
    name.strip()
    for name in os.getenv("EC2_EXTRA_INSTANCE_TYPES", "").split(",")
    if name.strip()
)
INSTANCE_TYPES = frozenset(_BASE_INSTANCE_TYPES + _EXTRA_INSTANCE_TYPES)
