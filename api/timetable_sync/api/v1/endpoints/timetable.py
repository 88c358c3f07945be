"""
Endpoints de consulta del horario almacenado.
"""
from typing import List

from fastapi import APIRouter, Depends

from timetable_sync.application.dto.timetable_dto import (
    GroupScheduleDTO,
    NextDayScheduleDTO,
    TimetableEntryDTO,
)
from timetable_sync.application.use_cases.timetable_use_cases import TimetableUseCases
from timetable_sync.api.v1.dependencies.use_case_deps import get_timetable_use_cases


router = APIRouter(prefix="/timetable", tags=["Timetable"])


@router.get("/groups", response_model=List[str])
async def list_groups(
    use_cases: TimetableUseCases = Depends(get_timetable_use_cases),
) -> List[str]:
    """Grupos con horario almacenado."""
    return await use_cases.list_groups()


@router.get("/groups/{group}", response_model=GroupScheduleDTO)
async def get_group_schedule(
    group: str,
    use_cases: TimetableUseCases = Depends(get_timetable_use_cases),
) -> GroupScheduleDTO:
    """Horario de un grupo ordenado por fecha y hora."""
    items = await use_cases.get_schedule_for_group(group)
    return GroupScheduleDTO(
        group=group,
        total=len(items),
        items=[TimetableEntryDTO.model_validate(item) for item in items],
    )


@router.get("/next", response_model=NextDayScheduleDTO)
async def get_next_day_schedule(
    use_cases: TimetableUseCases = Depends(get_timetable_use_cases),
) -> NextDayScheduleDTO:
    """
    Horario del dia mas proximo con clases.
    Responde 404 (SCHEDULE_NOT_FOUND) si no hay nada desde hoy.
    """
    day, items = await use_cases.get_next_day_schedule()
    return NextDayScheduleDTO(
        date=day,
        total=len(items),
        items=[TimetableEntryDTO.model_validate(item) for item in items],
        text=use_cases.formatter.format_day(items),
    )
