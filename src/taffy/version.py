from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version

DISTRIBUTION = "Taffy"

try:
    version = distribution_version(DISTRIBUTION)
except PackageNotFoundError:
    # Imported from a source tree that was never installed.
    version = "0.0.0"
