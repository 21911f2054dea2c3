"""Cloud storage bucket discovery (AWS S3 and Google Cloud Storage)."""

import json
import re
from typing import Any

from enumbuster.errors import SetupError
from enumbuster.modules.engine.models import Candidate, OutcomeKind, ProbeOutcome, ProbeRequest
from enumbuster.tools.http import HTTPResponse

from .base import HTTPProbe

_BUCKET_CHARS = re.compile(r"^[a-z0-9][a-z0-9.\-]*[a-z0-9]$")
_IP_LIKE = re.compile(r"^\d+\.\d+\.\d+\.\d+$")
_S3_KEY = re.compile(r"<Key>(.*?)</Key>", re.DOTALL)


def valid_bucket_name(name: str, max_length: int = 63) -> bool:
    """Shared S3/GCS naming rules: lowercase, digits, dots and dashes."""
    if not 3 <= len(name) <= max_length:
        return False
    if not _BUCKET_CHARS.match(name):
        return False
    if ".." in name or _IP_LIKE.match(name):
        return False
    return True


def valid_gcs_name(name: str) -> bool:
    # Dotted names may be up to 222 characters, each dot-separated part up to 63.
    if "." in name:
        return valid_bucket_name(name, max_length=222) and all(
            0 < len(part) <= 63 for part in name.split(".")
        )
    return valid_bucket_name(name)


class BucketProbe(HTTPProbe):
    """Common classification for bucket listings."""

    aggregate = True

    def validate(self) -> None:
        if self.config.max_files < 0:
            raise SetupError("--max-files must not be negative")

    def normalize(self, word: str) -> str:
        return word.strip().lower()

    def bucket_outcome(
        self, request: ProbeRequest, response: HTTPResponse, state: str | None, files: list[str]
    ) -> ProbeOutcome:
        return self.outcome(
            OutcomeKind.FOUND if state else OutcomeKind.NOT_FOUND,
            request,
            status_code=response.status_code,
            size=response.size,
            redirect=response.location,
            bucket_state=state,
            files=files,
        )


class S3Probe(BucketProbe):
    mode = "s3"

    def build(self, candidate: Candidate) -> list[ProbeRequest]:
        bucket = self.normalize(candidate.word)
        if not valid_bucket_name(bucket):
            return []
        urls = (
            f"https://{bucket}.s3.amazonaws.com",
            f"https://s3.amazonaws.com/{bucket}",
        )
        return [
            ProbeRequest(candidate=candidate, target=url, url=url, label=bucket) for url in urls
        ]

    def list_keys(self, body: str) -> list[str]:
        keys = [key.strip() for key in _S3_KEY.findall(body)]
        return keys[: self.config.max_files]

    def classify(self, request: ProbeRequest, raw: Any) -> ProbeOutcome:
        response: HTTPResponse = raw
        match response.status_code:
            case 200:
                return self.bucket_outcome(request, response, "public", self.list_keys(response.body))
            case 403:
                return self.bucket_outcome(request, response, "private", [])
            case 301 | 307:
                return self.bucket_outcome(request, response, "redirect", [])
            case _:
                return self.bucket_outcome(request, response, None, [])


class GcsProbe(BucketProbe):
    mode = "gcs"

    def build(self, candidate: Candidate) -> list[ProbeRequest]:
        bucket = self.normalize(candidate.word)
        if not valid_gcs_name(bucket):
            return []
        url = f"https://storage.googleapis.com/storage/v1/b/{bucket}/o?maxResults={self.config.max_files}"
        return [ProbeRequest(candidate=candidate, target=url, url=url, label=bucket)]

    def list_objects(self, body: str) -> list[str]:
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return []
        items = payload.get("items") if isinstance(payload, dict) else None
        names = [item["name"] for item in items or [] if isinstance(item, dict) and "name" in item]
        return names[: self.config.max_files]

    def classify(self, request: ProbeRequest, raw: Any) -> ProbeOutcome:
        response: HTTPResponse = raw
        match response.status_code:
            case 200:
                return self.bucket_outcome(
                    request, response, "public", self.list_objects(response.body)
                )
            case 401 | 403:
                return self.bucket_outcome(request, response, "private", [])
            case _:
                return self.bucket_outcome(request, response, None, [])
