"""Polyfactory factories for test data generation."""

from tests.factories.base import BaseFactory
from tests.factories.project import ProjectFactory, StudyFactory

__all__ = ["BaseFactory", "ProjectFactory", "StudyFactory"]
