"""step-binder - bind BDD step text to typed step-definition arguments."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("step-binder")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"
