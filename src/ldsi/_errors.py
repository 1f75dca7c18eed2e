"""LDSI error types."""


class LdsiError(Exception):
    """Base error for all ldsi failures."""


class LdsiInputError(LdsiError, TypeError):
    """Input is not text: None, a non-string object, or invalid UTF-8."""


class LdsiCompressionError(LdsiError):
    """The compressor rejected its input."""


class LdsiConfigError(LdsiError, ValueError):
    """Coefficients, thresholds or a config document are malformed."""


class LdsiVersionError(LdsiError):
    """Config or audit schema version mismatch."""


class LdsiChecksumError(LdsiError):
    """Audit entry digest verification failed."""
