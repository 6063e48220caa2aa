"""
DependencyInstaller - makes sure the host utilities the tuning steps call exist.
"""

from typing import List

from ..errors import DependencyInstallError
from ..logs import get_logger
from .command import CommandRunner

logger = get_logger("installer")


class DependencyInstaller:
    """Installs missing packages with apt. No retries."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def is_installed(self, package: str) -> bool:
        result = self.runner.run(["dpkg-query", "-W", "-f=${Status}", package])
        return result.returncode == 0 and result.stdout.strip().endswith(" installed")

    def install(self, package: str):
        """
        Install one package.

        Raises:
            DependencyInstallError: If apt-get exits non-zero
        """
        logger.info(f"Installing missing package: {package}...")
        result = self.runner.run(["apt-get", "install", "-y", package])
        if result.returncode != 0:
            raise DependencyInstallError(package, output=result.stderr)

    def ensure(self, packages: List[str]) -> List[str]:
        """
        Install whatever is missing from `packages`.

        Returns:
            Packages that were installed by this call
        """
        logger.info("Checking for missing dependencies...")
        installed = []
        for package in packages:
            if self.is_installed(package):
                logger.info(f"Dependency {package} is already installed.")
                continue
            self.install(package)
            installed.append(package)
        return installed
