"""
Collaborator interfaces consumed by the services.

Implementations live beside this module: in-memory stores for tests and
demos, SQLAlchemy repositories for PostgreSQL.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..models.accident import Accident
from ..models.countermeasure import Countermeasure
from ..models.enums import LifecycleStatus, ProjectStatus, TargetType
from ..models.hotspot import Hotspot
from ..models.project import Project
from ..schemas.hotspot import HotspotSearchCriteria


class AccidentProvider(ABC):
    """Read-only access to the full accident collection."""

    @abstractmethod
    def all(self) -> List[Accident]:
        pass


class HotspotStore(ABC):
    @abstractmethod
    def all(self) -> List[Hotspot]:
        pass

    @abstractmethod
    def find_by_id(self, hotspot_id: int) -> Optional[Hotspot]:
        pass

    @abstractmethod
    def save(self, hotspot: Hotspot) -> None:
        """
        Persist a new hotspot.

        Raises:
            DuplicateIdentifierError: If the ID is already stored
        """
        pass

    @abstractmethod
    def update(self, hotspot: Hotspot) -> None:
        pass

    @abstractmethod
    def delete(self, hotspot_id: int) -> None:
        pass

    @abstractmethod
    def search(self, criteria: HotspotSearchCriteria) -> List[Hotspot]:
        """Return hotspots matching every set criterion, in any order."""
        pass


class CountermeasureStore(ABC):
    @abstractmethod
    def all(self) -> List[Countermeasure]:
        pass

    @abstractmethod
    def find_by_id(self, countermeasure_id: int) -> Optional[Countermeasure]:
        pass

    @abstractmethod
    def find_by_criteria(
        self, target_type: TargetType, statuses: Iterable[LifecycleStatus]
    ) -> List[Countermeasure]:
        """Countermeasures of ``target_type`` whose status is in ``statuses``."""
        pass

    @abstractmethod
    def save(self, countermeasure: Countermeasure) -> None:
        pass

    @abstractmethod
    def update(self, countermeasure: Countermeasure) -> None:
        pass

    @abstractmethod
    def delete(self, countermeasure_id: int) -> None:
        pass


class ProjectStore(ABC):
    @abstractmethod
    def all(self) -> List[Project]:
        pass

    @abstractmethod
    def find_by_id(self, project_id: int) -> Optional[Project]:
        pass

    @abstractmethod
    def find_by_hotspot(self, hotspot_id: int) -> List[Project]:
        pass

    @abstractmethod
    def find_by_countermeasure(self, countermeasure_id: int) -> List[Project]:
        pass

    @abstractmethod
    def find_by_status(self, status: ProjectStatus) -> List[Project]:
        pass

    @abstractmethod
    def save(self, project: Project) -> None:
        """
        Raises:
            DuplicateIdentifierError: If the ID is already stored
        """
        pass

    @abstractmethod
    def update(self, project: Project) -> None:
        pass

    @abstractmethod
    def delete(self, project_id: int) -> None:
        pass
