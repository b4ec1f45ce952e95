"""
Project repository interface.
Defines the contract for project data persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from hourbook.domain.models.project import Project, ProjectStatus


class ProjectRepository(ABC):
    """
    Repository interface for Project aggregate.
    Reads fill creator_name from the users table.
    """

    @abstractmethod
    def save(self, project: Project) -> Project:
        """
        Save a project entity.
        Returns the saved project with its id and timestamps.
        """
        pass

    @abstractmethod
    def get_by_id(self, project_id: int) -> Optional[Project]:
        pass

    @abstractmethod
    def list_all(self) -> List[Project]:
        """All projects, newest first."""
        pass

    @abstractmethod
    def list_by_status(self, status: ProjectStatus) -> List[Project]:
        """Projects with the given status, newest first."""
        pass

    @abstractmethod
    def list_by_creator(self, user_id: str) -> List[Project]:
        pass

    @abstractmethod
    def update_status(self, project_id: int, status: ProjectStatus) -> bool:
        """
        Write a status directly.
        Returns False when the project does not exist.
        """
        pass

    @abstractmethod
    def delete(self, project_id: int) -> int:
        """
        Delete the project's time entries, then the project.
        Returns the number of removed time entries.
        """
        pass
