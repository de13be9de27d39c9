"""
In-memory implementations of the collaborator interfaces.

Insertion order is preserved, so ``all()`` returns records in the order
they were saved.
"""

from typing import Dict, Iterable, List, Optional

from ..exceptions import DuplicateIdentifierError
from ..models.accident import Accident
from ..models.countermeasure import Countermeasure
from ..models.enums import LifecycleStatus, ProjectStatus, TargetType
from ..models.hotspot import Hotspot
from ..models.project import Project
from ..schemas.hotspot import HotspotSearchCriteria
from .base import AccidentProvider, CountermeasureStore, HotspotStore, ProjectStore


class InMemoryAccidentProvider(AccidentProvider):
    def __init__(self, accidents: Iterable[Accident] = ()):
        self._accidents: List[Accident] = list(accidents)

    def add(self, accident: Accident) -> None:
        self._accidents.append(accident)

    def all(self) -> List[Accident]:
        return list(self._accidents)


class InMemoryHotspotStore(HotspotStore):
    def __init__(self, hotspots: Iterable[Hotspot] = ()):
        self._hotspots: Dict[int, Hotspot] = {}
        for hotspot in hotspots:
            self.save(hotspot)

    def all(self) -> List[Hotspot]:
        return list(self._hotspots.values())

    def find_by_id(self, hotspot_id: int) -> Optional[Hotspot]:
        return self._hotspots.get(hotspot_id)

    def save(self, hotspot: Hotspot) -> None:
        if hotspot.id in self._hotspots:
            raise DuplicateIdentifierError("Hotspot", hotspot.id)
        self._hotspots[hotspot.id] = hotspot

    def update(self, hotspot: Hotspot) -> None:
        self._hotspots[hotspot.id] = hotspot

    def delete(self, hotspot_id: int) -> None:
        self._hotspots.pop(hotspot_id, None)

    def search(self, criteria: HotspotSearchCriteria) -> List[Hotspot]:
        return [h for h in self._hotspots.values() if criteria.matches(h)]


class InMemoryCountermeasureStore(CountermeasureStore):
    def __init__(self, countermeasures: Iterable[Countermeasure] = ()):
        self._countermeasures: Dict[int, Countermeasure] = {}
        for countermeasure in countermeasures:
            self.save(countermeasure)

    def all(self) -> List[Countermeasure]:
        return list(self._countermeasures.values())

    def find_by_id(self, countermeasure_id: int) -> Optional[Countermeasure]:
        return self._countermeasures.get(countermeasure_id)

    def find_by_criteria(
        self, target_type: TargetType, statuses: Iterable[LifecycleStatus]
    ) -> List[Countermeasure]:
        allowed = set(statuses)
        return [
            cm
            for cm in self._countermeasures.values()
            if cm.target_type == target_type and cm.lifecycle_status in allowed
        ]

    def save(self, countermeasure: Countermeasure) -> None:
        if countermeasure.id in self._countermeasures:
            raise DuplicateIdentifierError("Countermeasure", countermeasure.id)
        self._countermeasures[countermeasure.id] = countermeasure

    def update(self, countermeasure: Countermeasure) -> None:
        self._countermeasures[countermeasure.id] = countermeasure

    def delete(self, countermeasure_id: int) -> None:
        self._countermeasures.pop(countermeasure_id, None)


class InMemoryProjectStore(ProjectStore):
    def __init__(self, projects: Iterable[Project] = ()):
        self._projects: Dict[int, Project] = {}
        for project in projects:
            self.save(project)

    def all(self) -> List[Project]:
        return list(self._projects.values())

    def find_by_id(self, project_id: int) -> Optional[Project]:
        return self._projects.get(project_id)

    def find_by_hotspot(self, hotspot_id: int) -> List[Project]:
        return [p for p in self._projects.values() if p.hotspot_id == hotspot_id]

    def find_by_countermeasure(self, countermeasure_id: int) -> List[Project]:
        return [
            p for p in self._projects.values() if p.countermeasure_id == countermeasure_id
        ]

    def find_by_status(self, status: ProjectStatus) -> List[Project]:
        return [p for p in self._projects.values() if p.status == status]

    def save(self, project: Project) -> None:
        if project.id in self._projects:
            raise DuplicateIdentifierError("Project", project.id)
        self._projects[project.id] = project

    def update(self, project: Project) -> None:
        self._projects[project.id] = project

    def delete(self, project_id: int) -> None:
        self._projects.pop(project_id, None)
