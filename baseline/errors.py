"""Baseline Resolver - Error taxonomy.

Every failure raised by the baseline operations derives from BaselineError
and carries a stable error code. Errors are fatal to the operation that
raised them; the CLI reports the code and message and exits non-zero.
"""


class BaselineErrorCode:
    """Error codes for baseline operations."""

    RESOLUTION_FAILED = "RESOLUTION_FAILED"
    ARTIFACT_NOT_FOUND = "ARTIFACT_NOT_FOUND"
    ARTIFACT_AMBIGUOUS = "ARTIFACT_AMBIGUOUS"
    FETCH_FAILED = "FETCH_FAILED"
    INVALID_VERSION_FORMAT = "INVALID_VERSION_FORMAT"
    MANIFEST_PARSE_FAILED = "MANIFEST_PARSE_FAILED"
    MANIFEST_WRITE_FAILED = "MANIFEST_WRITE_FAILED"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    DESCRIPTOR_ERROR = "DESCRIPTOR_ERROR"


class BaselineError(Exception):
    """Base class for all baseline operation failures."""

    code = "BASELINE_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ResolutionError(BaselineError):
    """No baseline version could be determined."""

    code = BaselineErrorCode.RESOLUTION_FAILED


class ArtifactNotFoundError(BaselineError):
    """Download URL or matching artifact file is absent."""

    code = BaselineErrorCode.ARTIFACT_NOT_FOUND


class AmbiguousArtifactError(BaselineError):
    """More than one artifact file matched the search pattern."""

    code = BaselineErrorCode.ARTIFACT_AMBIGUOUS


class FetchError(BaselineError):
    """Network or extraction failure while fetching a baseline."""

    code = BaselineErrorCode.FETCH_FAILED


class InvalidVersionFormatError(BaselineError):
    """Version string fails normalization or validation."""

    code = BaselineErrorCode.INVALID_VERSION_FORMAT


class ManifestParseError(BaselineError):
    """Existing manifest is not a valid JSON object."""

    code = BaselineErrorCode.MANIFEST_PARSE_FAILED


class ManifestWriteError(BaselineError):
    """Manifest file is missing after it was written."""

    code = BaselineErrorCode.MANIFEST_WRITE_FAILED


class ConfigurationError(BaselineError):
    """Build configuration is missing or malformed."""

    code = BaselineErrorCode.CONFIGURATION_ERROR


class DescriptorError(BaselineError):
    """Extension descriptor (app.json) is missing or malformed."""

    code = BaselineErrorCode.DESCRIPTOR_ERROR
