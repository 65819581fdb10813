import pytest

from ec2_query.models.instance_models import QueryResponse


class RecordingTransport:
    """Transport double that records every (action, params) it is handed."""

    def __init__(self):
        self.calls = []

    def __call__(self, action, params):
        self.calls.append((action, dict(params)))
        return QueryResponse(action=action, status_code=200, body="<ok/>")


@pytest.fixture
def transport():
    return RecordingTransport()
