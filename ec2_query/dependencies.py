# ec2_query/dependencies.py
from botocore.exceptions import NoCredentialsError
from fastapi import Header, HTTPException, status

from ec2_query.config.config import DEFAULT_PROFILE, DEFAULT_REGION
from ec2_query.services.transport import QueryTransport


# Dependency yielding a signed query transport for the requested profile and region.
# The transport's HTTP session is closed once the request is done with it.
def get_transport(
    profile: str | None = Header(default=DEFAULT_PROFILE, description="AWS profile to use."),
    region: str | None = Header(default=DEFAULT_REGION, description="AWS region to use.")
):
    try:
        transport = QueryTransport.from_profile(profile=profile, region=region)
    except NoCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="AWS credentials error"
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Could not create EC2 transport: {e}"
        )
    with transport:
        yield transport
