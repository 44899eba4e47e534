class LeafDoctorError(Exception):
    """Base class for every failure raised by this package."""


class ConfigurationError(LeafDoctorError):
    """Unsupported language selector or other bad setting."""


class NetworkError(LeafDoctorError):
    """The external service was unreachable, timed out or answered with an error status."""


class DecodeError(LeafDoctorError):
    """A response arrived but was not parseable or did not match the diagnosis schema."""


class AudioDecodeError(LeafDoctorError):
    """Missing or malformed audio payload."""


class ScanInProgressError(LeafDoctorError):
    """A capture was attempted while another diagnosis is still loading."""
