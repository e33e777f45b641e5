import requests
import structlog
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .models import Sample

logger = structlog.get_logger(__name__)


class PublishError(Exception):
    """A sample was not delivered, or its response could not be read.

    ``stage`` is one of "encode", "send" or "read".
    """

    def __init__(self, message: str, stage: str):
        super().__init__(message)
        self.stage = stage


def make_session():
    # one attempt per sample: a failed POST is dropped, not retried
    s = requests.Session()
    retry = Retry(total=0, read=False)
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    return s


class Publisher:
    def __init__(self, session=None):
        self.session = session or make_session()

    def publish(self, sample: Sample, endpoint_url: str) -> str:
        """
        POST the sample as JSON and return the response body.
        Raises PublishError on encode, transport or read failure.
        """
        try:
            body = sample.to_json()
        except ValueError as e:
            raise PublishError(f"error encoding metrics as JSON: {e}", "encode") from e

        try:
            resp = self.session.post(
                endpoint_url,
                data=body.encode("utf-8"),
                headers={"Content-Type": "application/json"},
                stream=True,
            )
        except Exception as e:
            raise PublishError(f"error sending POST request: {e}", "send") from e

        try:
            with resp:
                resp.content  # drain the body
        except Exception as e:
            raise PublishError(f"error reading server response: {e}", "read") from e

        text = resp.text
        logger.info("Server response", status=resp.status_code, body=text)
        return text
