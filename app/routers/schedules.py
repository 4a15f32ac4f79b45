# =============================================================================
# app/routers/schedules.py - Schedule Endpoints
# =============================================================================
# Shift CRUD, attendance statuses and schedule generation.
#
# Endpoints:
#   GET  /schedules                          - List shifts (?type=actual|reference)
#   PUT  /schedules                          - Change a shift's hours
#   POST /schedules/add                      - Add or overwrite a one-off shift
#   POST /schedules/submit                   - Create a regular shift
#   POST /schedules/status                   - Mark a day (called out, ...)
#   POST /schedules/generate                 - Generate shifts for everyone
#   POST /schedules/generate/{employee_name} - Generate shifts for one person
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query

from app.dependencies import AdminDep, EmployeeDep
from core.models.schedule import (
    AddShiftRequest,
    GenerateSchedulesRequest,
    ScheduleStatusUpdate,
    ScheduleTimesUpdate,
    ScheduleType,
    SubmitShiftRequest,
)
from core.services.schedule_service import ScheduleService, validate_weeks

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_schedules(
    employee: EmployeeDep,
    schedule_type: Annotated[ScheduleType | None, Query(alias="type")] = None,
):
    return ScheduleService.list_schedules(schedule_type)


@router.put("")
async def update_schedule_times(admin: AdminDep, update: ScheduleTimesUpdate):
    rows = ScheduleService.update_times(
        update.employee_id, update.schedule_date, update.start_time, update.end_time
    )
    return {"message": "Schedule updated successfully", "data": rows}


@router.post("/add")
async def add_shift(admin: AdminDep, shift: AddShiftRequest):
    """Add a shift for an employee looked up by name. 404 if the name is unknown."""
    row = ScheduleService.add_shift(
        shift.employee_name, shift.date, shift.start_time, shift.end_time
    )
    return {"message": "Shift added successfully", "data": row}


@router.post("/submit")
async def submit_shift(admin: AdminDep, shift: SubmitShiftRequest):
    """Create a shift. 400 if the employee already has one that day."""
    ScheduleService.submit_shift(shift.employee_id, shift.day, shift.start_time, shift.end_time)
    return {"message": "Schedule submitted successfully"}


@router.post("/status")
async def update_schedule_status(admin: AdminDep, update: ScheduleStatusUpdate):
    result = ScheduleService.set_status(update.employee_id, update.schedule_date, update.status)
    return {"message": "Schedule updated successfully", **result}


@router.post("/generate")
async def generate_schedules(admin: AdminDep, request: GenerateSchedulesRequest):
    """
    Generate shifts from reference schedules for every employee.

    With background=true the work is queued and a task id is returned;
    poll GET /api/v1/tasks/{task_id}.
    """
    if request.background:
        validate_weeks(request.weeks)
        try:
            from workers.tasks import generate_schedules as generate_task

            task = generate_task.delay(request.weeks)
        except Exception as e:
            logger.error(f"Failed to queue schedule generation: {e}")
            raise HTTPException(
                status_code=503,
                detail=f"Failed to queue task. Is Redis running? Error: {e}",
            )
        logger.info(f"Queued schedule generation for {request.weeks} week(s): {task.id}")
        return {"message": "Schedule generation queued", "task_id": task.id}

    ScheduleService.generate_all(request.weeks)
    return {"message": f"Schedules generated successfully for {request.weeks} week(s)"}


@router.post("/generate/{employee_name}")
async def generate_schedules_for_employee(
    admin: AdminDep,
    request: GenerateSchedulesRequest,
    employee_name: Annotated[str, Path(min_length=1)],
):
    if request.background:
        validate_weeks(request.weeks)
        try:
            from workers.tasks import generate_schedules_for_employee as generate_task

            task = generate_task.delay(employee_name, request.weeks)
        except Exception as e:
            logger.error(f"Failed to queue schedule generation for {employee_name}: {e}")
            raise HTTPException(
                status_code=503,
                detail=f"Failed to queue task. Is Redis running? Error: {e}",
            )
        return {"message": f"Schedule generation queued for {employee_name}", "task_id": task.id}

    result = ScheduleService.generate_for_employee(employee_name, request.weeks)
    return {"message": f"Schedules generated for {employee_name}", **result}
