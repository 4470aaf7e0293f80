# common/package_manager.py
# -*- coding: utf-8 -*-
"""
Interfaces the installer steps program against.

Steps never shell out directly; they call a PackageManager and a
RepositoryRegistrar. The apt implementation lives in common.debian.apt_manager
and tests substitute recording fakes.
"""

from abc import ABC, abstractmethod
from typing import List, Union


class PackageManager(ABC):
    """Refreshes package indexes, installs and upgrades packages."""

    @abstractmethod
    def update(self) -> None:
        """Refresh the package index."""

    @abstractmethod
    def install(self, packages: Union[List[str], str]) -> None:
        """Install one or more packages."""

    @abstractmethod
    def upgrade(self) -> None:
        """Upgrade every installed package."""

    @abstractmethod
    def add_component(self, component: str) -> None:
        """Enable an archive component such as 'universe'."""


class RepositoryRegistrar(ABC):
    """Registers a third-party package repository."""

    @abstractmethod
    def install_source_package(self, url: str) -> None:
        """
        Download the package found at url and install it. The package is
        expected to drop the repository definition and its signing key into
        place.
        """
