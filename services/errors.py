from __future__ import annotations


class GenerationPipelineError(RuntimeError):
    """Base class for failures surfaced to the caller of the generation pipeline."""

    status_code = 500


class GenerationValidationError(GenerationPipelineError):
    """Raised when a request is missing required fields or fails domain checks."""

    status_code = 400


class NoCategoriesMatchedError(GenerationValidationError):
    """Raised when none of the requested categories exist in the CMS."""

    def __init__(self, requested: list[str]) -> None:
        super().__init__(
            "None of the requested categories exist in the CMS: " + ", ".join(requested)
        )
        self.requested = requested


class UpstreamGenerationError(GenerationPipelineError):
    """Raised when the LLM call itself fails."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class MalformedResponseError(GenerationPipelineError):
    """Raised when the LLM reply cannot be normalized into article content."""

    status_code = 502

    def __init__(self, head: str, tail: str, length: int, errors: list[str]) -> None:
        super().__init__(
            f"Unable to parse LLM response after {len(errors)} attempts: "
            + (errors[-1] if errors else "empty response")
        )
        self.head = head
        self.tail = tail
        self.length = length
        self.errors = errors


class CategoryDirectoryError(GenerationPipelineError):
    """Raised when the CMS category listing cannot be fetched."""

    status_code = 502


class CmsWriteError(GenerationPipelineError):
    """Raised when the generated article cannot be written to the CMS."""

    status_code = 502

    def __init__(
        self,
        message: str,
        cms_status: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.cms_status = cms_status
        self.response_body = response_body


class ServiceNotConfiguredError(GenerationPipelineError):
    """Raised when credentials or endpoints for a collaborator are missing."""

    status_code = 500
