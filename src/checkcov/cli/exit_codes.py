# mirror <sysexits.h>
EXIT_OK = 0  # Normal success
EXIT_GENERIC = 1  # Generic failure (fallback)
EXIT_THRESHOLD = 2  # A package is below its minimum coverage
EXIT_DATAERR = 65  # Input data was invalid (malformed profile or Go source)
EXIT_NOINPUT = 66  # Input not found (profile, source directory, config file)
EXIT_CONFIG = 78  # Invalid configuration (malformed .checkcov.yml)

__all__ = ["EXIT_CONFIG", "EXIT_DATAERR", "EXIT_GENERIC", "EXIT_NOINPUT", "EXIT_OK", "EXIT_THRESHOLD"]
