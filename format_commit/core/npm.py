"""Package version changes through npm."""

import logging
import subprocess

logger = logging.getLogger(__name__)


class NpmError(Exception):
    """npm command error."""

    pass


class NpmOperations:
    """Runs ``npm version`` to bump the package version."""

    @staticmethod
    def version(version: str, preid: str | None = None, allow_same: bool = True) -> str:
        """Change the package version and return the new version tag.

        Args:
            version: A release type (``patch``, ``prerelease``...) or an explicit version
            preid: Pre-release identifier, used with ``pre*`` release types
            allow_same: Accept setting the version to its current value

        Returns:
            The new version as printed by npm, e.g. ``v1.2.3``
        """
        cmd = ["npm", "version", version]
        if preid:
            cmd.append(f"--preid={preid}")
        if allow_same:
            cmd.append("--allow-same-version")

        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            error_msg = e.stderr if e.stderr else str(e)
            raise NpmError(f"Failed to change version: {error_msg}")
        return result.stdout.strip()
