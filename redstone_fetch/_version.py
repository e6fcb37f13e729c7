from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import tomllib

DISTRIBUTION_NAME = "redstone-fetch"


def _get_version() -> str:
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        pass

    # Running from a source checkout without an install
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"

    try:
        with open(pyproject_path, "rb") as f:
            pyproject_data = tomllib.load(f)
        return str(pyproject_data["project"]["version"])
    except (FileNotFoundError, KeyError) as e:
        raise ValueError("Failed to read version from pyproject.toml") from e


SDK_VERSION = _get_version()
