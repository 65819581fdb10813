import logging
from typing import Any, Optional, Protocol
from urllib.parse import urlencode

import botocore.session
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.exceptions import ClientError, NoCredentialsError
from botocore.httpsession import URLLib3Session

from ec2_query.config import config
from ec2_query.models.instance_models import QueryResponse
from ec2_query.services.params import ParameterMap


class Transport(Protocol):
    """Anything that can send an EC2 action with its flattened parameters."""

    def __call__(self, action: str, params: ParameterMap) -> Any:
        ...


class QueryTransport:
    """Send actions to the EC2 query endpoint as signed form POSTs.

    :param credentials: botocore credentials used to sign each request.
    :param region: AWS region; also selects the default endpoint.
    :param endpoint_url: Override for the endpoint, e.g. a local emulator.
    :param api_version: Value of the ``Version`` parameter.
    :param http_session: Object with a botocore-style ``send(prepared_request)``.
    """

    def __init__(
        self,
        credentials,
        region: str = config.DEFAULT_REGION,
        endpoint_url: Optional[str] = config.ENDPOINT_URL,
        api_version: str = config.API_VERSION,
        http_session=None,
    ):
        if credentials is None:
            raise NoCredentialsError()
        self.credentials = credentials
        self.region = region
        self.endpoint_url = endpoint_url or f"https://ec2.{region}.amazonaws.com/"
        self.api_version = api_version
        self.http_session = http_session or URLLib3Session()

    @classmethod
    def from_profile(cls, profile: Optional[str] = config.DEFAULT_PROFILE,
                     region: Optional[str] = config.DEFAULT_REGION, **kwargs) -> "QueryTransport":
        """Build a transport from a named profile in the shared AWS config."""
        session = botocore.session.Session(profile=profile)
        return cls(session.get_credentials(), region=region or config.DEFAULT_REGION, **kwargs)

    def close(self):
        """Release the pooled connections of the HTTP session."""
        self.http_session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def build_request(self, action: str, params: ParameterMap) -> AWSRequest:
        form = {"Action": action, "Version": self.api_version}
        form.update(params)
        request = AWSRequest(
            method="POST",
            url=self.endpoint_url,
            data=urlencode(form),
            headers={"Content-Type": "application/x-www-form-urlencoded; charset=utf-8"},
        )
        SigV4Auth(self.credentials, "ec2", self.region).add_auth(request)
        return request

    def __call__(self, action: str, params: ParameterMap) -> QueryResponse:
        request = self.build_request(action, params)
        logging.info(f"Sending {action} to {self.endpoint_url} with {len(params)} parameters")
        response = self.http_session.send(request.prepare())

        # 4xx and 5xx both surface as ClientError; HTTPStatusCode tells them apart.
        if response.status_code >= 400:
            logging.error(f"{action} failed with HTTP {response.status_code}")
            raise ClientError(
                {
                    "Error": {"Code": str(response.status_code), "Message": response.text},
                    "ResponseMetadata": {"HTTPStatusCode": response.status_code},
                },
                action,
            )
        return QueryResponse(action=action, status_code=response.status_code, body=response.text)
