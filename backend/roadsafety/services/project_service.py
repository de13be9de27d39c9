"""
Service layer for remediation projects.

Projects apply a countermeasure to a hotspot and move through
proposed -> approved -> implemented -> closed. Event dispatch is a side
channel, as in the hotspot service.
"""

import logging
from typing import Any, Dict, List, Optional

from ..events.bus import (
    DomainEvent,
    EventDispatcher,
    ProjectApprovedEvent,
    ProjectImplementedEvent,
    ProjectProposedEvent,
)
from ..exceptions import NotFoundError
from ..models.enums import ProjectStatus
from ..models.project import Project
from ..repositories.base import ProjectStore

logger = logging.getLogger(__name__)

_TRANSITION_EVENTS = {
    ProjectStatus.APPROVED: ProjectApprovedEvent,
    ProjectStatus.IMPLEMENTED: ProjectImplementedEvent,
}


def _project_context(project: Project) -> Dict[str, Any]:
    return {
        "id": project.id,
        "countermeasureId": project.countermeasure_id,
        "hotspotId": project.hotspot_id,
        "periodStart": project.period.start.isoformat(),
        "periodEnd": project.period.end.isoformat(),
        "expectedCost": project.expected_cost.amount,
        "actualCost": project.actual_cost.amount,
        "status": project.status.value,
    }


class ProjectService:
    """
    CRUD, lookups and status transitions for projects.

    Args:
        store: Project persistence
        event_dispatcher: Receives proposed/approved/implemented events
    """

    def __init__(
        self,
        store: ProjectStore,
        event_dispatcher: Optional[EventDispatcher] = None,
    ):
        self.store = store
        self.event_dispatcher = event_dispatcher

    def create(self, project: Project) -> Project:
        """
        Raises:
            DuplicateIdentifierError: If the ID already exists
        """
        self.store.save(project)

        logger.info("Project created", extra={"context": _project_context(project)})
        self._publish(ProjectProposedEvent(project=project))
        return project

    def all(self) -> List[Project]:
        return self.store.all()

    def find_by_id(self, project_id: int) -> Optional[Project]:
        project = self.store.find_by_id(project_id)
        if project is not None:
            logger.info("Project retrieved", extra={"context": _project_context(project)})
        return project

    def find_by_hotspot(self, hotspot_id: int) -> List[Project]:
        projects = self.store.find_by_hotspot(hotspot_id)
        logger.info(
            "Projects retrieved for hotspot",
            extra={"context": {"hotspotId": hotspot_id, "count": len(projects)}},
        )
        return projects

    def find_by_countermeasure(self, countermeasure_id: int) -> List[Project]:
        projects = self.store.find_by_countermeasure(countermeasure_id)
        logger.info(
            "Projects retrieved for countermeasure",
            extra={"context": {"countermeasureId": countermeasure_id, "count": len(projects)}},
        )
        return projects

    def find_by_status(self, status: ProjectStatus) -> List[Project]:
        projects = self.store.find_by_status(status)
        logger.info(
            "Projects retrieved by status",
            extra={"context": {"status": status.value, "count": len(projects)}},
        )
        return projects

    def update(self, project: Project) -> Project:
        if self.store.find_by_id(project.id) is None:
            raise NotFoundError("Project", project.id)

        self.store.update(project)
        logger.info("Project updated", extra={"context": _project_context(project)})
        return project

    def delete(self, project_id: int) -> None:
        existing = self.store.find_by_id(project_id)
        if existing is None:
            raise NotFoundError("Project", project_id)

        self.store.delete(project_id)
        logger.info(
            "Project deleted",
            extra={"context": {"id": project_id, "status": existing.status.value}},
        )

    def transition_status(self, project_id: int, status: ProjectStatus) -> Project:
        """
        Move a project to ``status`` and persist it.

        Requesting the current status returns the project unchanged.

        Raises:
            NotFoundError: If the project does not exist
            InvalidTransitionError: If ``status`` is not the next step
        """
        project = self.store.find_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)

        if project.status == status:
            return project

        updated = project.transition_to(status)
        self.store.update(updated)

        context = _project_context(updated)
        context["previousStatus"] = project.status.value
        logger.info("Project status transitioned", extra={"context": context})

        event_class = _TRANSITION_EVENTS.get(status)
        if event_class is not None:
            self._publish(event_class(project=updated))
        return updated

    def _publish(self, event: DomainEvent) -> None:
        if self.event_dispatcher is None:
            return
        try:
            self.event_dispatcher.dispatch(event)
        except Exception as e:
            logger.warning(f"Event dispatch failed for {event.name}: {e}")
