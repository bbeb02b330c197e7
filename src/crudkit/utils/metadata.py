from importlib import metadata as importlib_metadata

PROJECT_NAME = "crudkit"


def get_project_name() -> str:
    return PROJECT_NAME


def get_project_version(default: str = "unknown") -> str:
    """
    Version of the installed distribution, or `default` when running from a
    source tree that was never installed.
    """
    try:
        return importlib_metadata.version(PROJECT_NAME)
    except importlib_metadata.PackageNotFoundError:
        return default


__all__ = ["PROJECT_NAME", "get_project_name", "get_project_version"]
