from typing import Self

from dependency_injector.wiring import Provide, inject

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.calendar.app.service.calendar_exporter_service import CalendarExporter
from src.service.calendar.app.service.calendar_planner_service import CalendarPlanner
from src.service.calendar.domain.value_object.calendar_file import CalendarFile
from src.service.shared_kernel.app.interface.i_event_catalog import IEventCatalog


class ExportCalendarUseCase:
    def __init__(
        self,
        *,
        event_catalog: IEventCatalog,
        calendar_planner: CalendarPlanner,
        calendar_exporter: CalendarExporter,
    ) -> None:
        self.event_catalog = event_catalog
        self.calendar_planner = calendar_planner
        self.calendar_exporter = calendar_exporter

    @classmethod
    @inject
    def depends(
        cls,
        event_catalog: IEventCatalog = Provide[Container.event_catalog],
        calendar_planner: CalendarPlanner = Provide[Container.calendar_planner],
        calendar_exporter: CalendarExporter = Provide[Container.calendar_exporter],
    ) -> Self:
        return cls(
            event_catalog=event_catalog,
            calendar_planner=calendar_planner,
            calendar_exporter=calendar_exporter,
        )

    @Logger.io
    async def export_event(self, *, event_id: str) -> CalendarFile:
        """Calendar file for one catalog event, named after its title"""
        event = await self.event_catalog.get_event(event_id)
        return CalendarFile(
            filename=self.calendar_exporter.suggest_filename(event.title),
            content=self.calendar_exporter.export_one(event),
        )

    @Logger.io
    async def export_owner_calendar(self, *, owner_id: str) -> CalendarFile:
        """Every entry of the owner's calendar in one file"""
        entries = await self.calendar_planner.list_entries(owner_id=owner_id)
        return CalendarFile(
            filename=self.calendar_exporter.suggest_filename(f'calendar {owner_id}'),
            content=self.calendar_exporter.export_all(entries),
        )
