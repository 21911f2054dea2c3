"""Generic HTTP fuzzing: the FUZZ marker is replaced by each word."""

from typing import Any

from enumbuster.errors import SetupError
from enumbuster.modules.engine.models import Candidate, OutcomeKind, ProbeOutcome, ProbeRequest
from enumbuster.tools.http import HTTPResponse

from .base import HTTPProbe
from .dir import status_allowed

MARKER = "FUZZ"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class FuzzProbe(HTTPProbe):
    mode = "fuzz"

    def validate(self) -> None:
        config = self.config
        if not config.target.startswith(("http://", "https://")):
            raise SetupError(f"Target URL must start with http:// or https://: {config.target}")
        places = [config.target, config.data or "", config.http.cookies or ""]
        places.extend(value for _, value in config.http.headers)
        if not any(MARKER in place for place in places):
            raise SetupError(
                f"The {MARKER} keyword was not found in the URL, data, headers or cookies"
            )

    def build(self, candidate: Candidate) -> list[ProbeRequest]:
        word = candidate.word
        config = self.config
        method = config.http.method.upper()

        headers = [(name, value.replace(MARKER, word)) for name, value in config.http.headers]
        if config.http.cookies and MARKER in config.http.cookies:
            headers.append(("Cookie", config.http.cookies.replace(MARKER, word)))

        content = config.data.replace(MARKER, word) if config.data is not None else None
        if (
            content is not None
            and method == "POST"
            and not any(name.lower() == "content-type" for name, _ in headers)
        ):
            headers.append(("Content-Type", FORM_CONTENT_TYPE))

        url = config.target.replace(MARKER, word)
        return [
            ProbeRequest(
                candidate=candidate,
                target=url,
                url=url,
                method=method,
                headers=tuple(headers),
                content=content,
                label=word,
            )
        ]

    def is_match(self, response: HTTPResponse) -> bool:
        config = self.config
        if not status_allowed(response.status_code, config.status_codes, config.exclude_status):
            return False
        if response.size in config.exclude_lengths:
            return False
        if config.filter_string and config.filter_string in response.body:
            return False
        return True

    def classify(self, request: ProbeRequest, raw: Any) -> ProbeOutcome:
        response: HTTPResponse = raw
        body = response.body
        return self.outcome(
            OutcomeKind.FOUND if self.is_match(response) else OutcomeKind.NOT_FOUND,
            request,
            status_code=response.status_code,
            size=response.size,
            redirect=response.location,
            words=len(body.split()),
            lines=len(body.splitlines()),
        )
