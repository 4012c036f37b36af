"""근무 자동 생성 서비스 — 점수 기반 근무 배정 제안.

Shift Generator — Proposes shifts for a date range from business hours,
staff requirements and employee availability. Every open day is split into
three equal slots (morning, afternoon, evening); for each required position
the best scoring candidates are assigned. Nothing is persisted: the result
is a proposal the admin reviews before creating real shifts.
"""

from datetime import date, datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.store import WEEKDAYS, Store, default_business_hours
from app.models.user import User
from app.repositories.store_repository import store_repository, store_settings_repository
from app.schemas.shift import (
    Availability,
    GeneratedShift,
    GenerateShiftsRequest,
    GenerateShiftsResponse,
    GeneratorEmployee,
)
from app.utils.exceptions import BadRequestError

SLOT_NAMES: tuple[str, ...] = ("morning", "afternoon", "evening")

# 포지션별 색상 — Calendar colors per position
POSITION_COLORS: dict[str, str] = {
    "cashier": "#4f46e5",
    "floor": "#0891b2",
    "kitchen": "#ca8a04",
    "manager": "#be185d",
}
OTHER_POSITION_COLOR: str = "#6b7280"

# 점수 기준 — Scoring constants
UNAVAILABLE_SCORE: int = -1000
MISSING_POSITION_SCORE: int = -800
OVER_WEEKLY_HOURS_SCORE: int = -500
MIN_CANDIDATE_SCORE: int = -100
DEFAULT_FULFILLMENT_RATE: float = 0.5

# 한 번에 생성 가능한 최대 일수 — Longest range accepted per request
MAX_GENERATION_DAYS: int = 92


def position_color(position: str) -> str:
    return POSITION_COLORS.get(position, OTHER_POSITION_COLOR)


def parse_hhmm(value: str) -> time:
    """HH:MM 문자열을 time으로 변환합니다.

    Raises:
        ValueError: 범위를 벗어난 시각 (Hour or minute out of range)
    """
    hour, minute = (int(part) for part in value.split(":"))
    return time(hour, minute)


def split_day(day: date, open_time: str, close_time: str, tz: ZoneInfo) -> list[tuple[str, datetime, datetime]]:
    """영업시간을 세 개의 같은 길이 시간대로 나눕니다. 영업시간이 없으면 빈 목록."""
    start: datetime = datetime.combine(day, parse_hhmm(open_time), tzinfo=tz)
    end: datetime = datetime.combine(day, parse_hhmm(close_time), tzinfo=tz)
    if end <= start:
        return []
    third: timedelta = (end - start) / 3
    bounds: list[datetime] = [start, start + third, start + third * 2, end]
    return [(name, bounds[i], bounds[i + 1]) for i, name in enumerate(SLOT_NAMES)]


class EmployeeState:
    """생성 중 직원별 누적 상태.

    Running counters for one employee while a schedule is generated.
    Weekly counters reset after each Saturday.
    """

    def __init__(self, employee: GeneratorEmployee) -> None:
        self.employee: GeneratorEmployee = employee
        self.weekly_hours: float = 0.0
        self.weekly_shift_count: int = 0
        self.total_hours: float = 0.0
        self.last_assigned_date: date | None = None
        self.last_shift_end: datetime | None = None
        self.assigned_days: set[date] = set()
        self.fulfillment_rate: float = DEFAULT_FULFILLMENT_RATE
        self.preferred_days: set[str] = {d.lower() for d in employee.preferred_days}

    def consecutive_days_before(self, day: date) -> int:
        count: int = 0
        cursor: date = day - timedelta(days=1)
        while cursor in self.assigned_days:
            count += 1
            cursor -= timedelta(days=1)
        return count

    def assign(self, day: date, end: datetime, hours: float) -> None:
        self.weekly_hours += hours
        self.weekly_shift_count += 1
        self.total_hours += hours
        self.last_assigned_date = day
        self.assigned_days.add(day)
        if self.last_shift_end is None or end > self.last_shift_end:
            self.last_shift_end = end

    def reset_week(self) -> None:
        self.weekly_hours = 0.0
        self.weekly_shift_count = 0


def check_availability(
    employee_id: str,
    day: date,
    start: datetime,
    end: datetime,
    availability: list[Availability],
    tz: ZoneInfo,
) -> tuple[bool, int]:
    """직원이 시간대에 근무 가능한지와 우선순위를 반환합니다.

    An employee without availability entries for the day is available with
    priority 0. Otherwise the slot must fit entirely inside one entry.
    """
    entries: list[Availability] = [
        a for a in availability if a.employee_id == employee_id and a.date == day
    ]
    if not entries:
        return True, 0
    for entry in entries:
        available_from = datetime.combine(day, parse_hhmm(entry.start_time), tzinfo=tz)
        available_to = datetime.combine(day, parse_hhmm(entry.end_time), tzinfo=tz)
        if available_from <= start and available_to >= end:
            return True, entry.priority
    return False, 0


def calculate_assignment_score(
    state: EmployeeState,
    day: date,
    start: datetime,
    end: datetime,
    position: str,
    availability: list[Availability],
    tz: ZoneInfo,
) -> float:
    """후보 직원의 배정 점수를 계산합니다.

    Scoring, highest first:
        - unavailable: -1000, lacking the position: -800,
          exceeding the weekly maximum: -500
        - priority x 20
        - minus max(0, 10 - remaining weekly hours / 4)
        - -5 when already working that day, -2 when worked the day before
        - +round((1 - fulfillment rate) x 15)
        - +10 while under the weekly minimum, +10 on a preferred day
    """
    employee: GeneratorEmployee = state.employee
    is_available, priority = check_availability(employee.id, day, start, end, availability, tz)
    if not is_available:
        return UNAVAILABLE_SCORE
    if position not in employee.positions:
        return MISSING_POSITION_SCORE

    shift_hours: float = (end - start).total_seconds() / 3600
    remaining_hours: float = (employee.max_hours_per_week or 40) - state.weekly_hours
    if remaining_hours < shift_hours:
        return OVER_WEEKLY_HOURS_SCORE

    score: float = priority * 20
    score -= max(0.0, 10 - remaining_hours / 4)

    if state.last_assigned_date is not None:
        days_since: int = (day - state.last_assigned_date).days
        if days_since == 0:
            score -= 5
        elif days_since == 1:
            score -= 2

    score += round((1 - state.fulfillment_rate) * 15)
    if employee.min_hours_per_week and state.weekly_hours < employee.min_hours_per_week:
        score += 10
    if WEEKDAYS[day.weekday()] in state.preferred_days:
        score += 10
    return score


def generate_shifts(config: GenerateShiftsRequest, tz_name: str = "UTC") -> GenerateShiftsResponse:
    """근무 배정안을 생성합니다.

    Args:
        config: 기간, 영업시간, 직원, 필요 인원, 가용 시간 (Generation input)
        tz_name: 영업시간을 해석할 매장 시간대 (Store timezone for wall-clock times)

    Returns:
        GenerateShiftsResponse: 생성된 근무, 미충원 목록, 요약
                                (Proposed shifts, unfilled slots and a summary)
    """
    tz: ZoneInfo = ZoneInfo(tz_name)
    business_hours = {day.lower(): hours for day, hours in config.business_hours.items()}
    requirements: dict[tuple[str, str], Any] = {
        (req.day_of_week.lower(), req.time_slot): req for req in config.staff_requirements
    }
    states: list[EmployeeState] = [EmployeeState(e) for e in config.employees]

    shifts: list[GeneratedShift] = []
    unfilled: list[dict[str, Any]] = []
    open_days: int = 0

    day: date = config.start_date
    while day <= config.end_date:
        weekday: str = WEEKDAYS[day.weekday()]
        hours = business_hours.get(weekday)
        slots = split_day(day, hours.open, hours.close, tz) if hours is not None and hours.is_open else []
        if slots:
            open_days += 1
        # 휴식 시간은 전날까지의 근무 기준 — Rest is measured against earlier days
        rest_anchor: dict[str, datetime | None] = {s.employee.id: s.last_shift_end for s in states}

        for slot_name, slot_start, slot_end in slots:
            requirement = requirements.get((weekday, slot_name))
            if requirement is None:
                continue
            positions: dict[str, int] = requirement.required_positions or {"floor": requirement.count}
            slot_hours: float = (slot_end - slot_start).total_seconds() / 3600
            assigned_in_slot: set[str] = set()

            for position, needed in positions.items():
                candidates: list[tuple[float, EmployeeState]] = []
                for state in states:
                    employee_id: str = state.employee.id
                    if employee_id in assigned_in_slot:
                        continue
                    if state.consecutive_days_before(day) >= config.max_consecutive_days:
                        continue
                    last_end = rest_anchor[employee_id]
                    if last_end is not None and (slot_start - last_end) < timedelta(hours=config.min_rest_hours):
                        continue
                    score = calculate_assignment_score(
                        state, day, slot_start, slot_end, position, config.availability, tz
                    )
                    if score > MIN_CANDIDATE_SCORE:
                        candidates.append((score, state))
                candidates.sort(key=lambda item: item[0], reverse=True)

                chosen = candidates[:needed]
                for score, state in chosen:
                    employee: GeneratorEmployee = state.employee
                    shifts.append(GeneratedShift(
                        id=f"gen-{day:%Y%m%d}-{slot_name}-{position}-{employee.id}",
                        employee_id=employee.id,
                        employee_name=employee.name,
                        date=day,
                        start_time=slot_start,
                        end_time=slot_end,
                        position=position,
                        time_slot=slot_name,
                        score=score,
                        color=position_color(position),
                    ))
                    state.assign(day, slot_end, slot_hours)
                    assigned_in_slot.add(employee.id)

                if len(chosen) < needed:
                    unfilled.append({
                        "date": day.isoformat(),
                        "time_slot": slot_name,
                        "position": position,
                        "required": needed,
                        "assigned": len(chosen),
                    })

        # 토요일 이후 주간 누적 초기화 — Weekly counters reset after Saturday
        if day.weekday() == 5:
            for state in states:
                state.reset_week()
        day += timedelta(days=1)

    summary: dict[str, Any] = {
        "total_shifts": len(shifts),
        "total_hours": round(sum(s.total_hours for s in states), 2),
        "open_days": open_days,
        "unfilled_positions": sum(u["required"] - u["assigned"] for u in unfilled),
        "hours_by_employee": {s.employee.id: round(s.total_hours, 2) for s in states},
    }
    return GenerateShiftsResponse(shifts=shifts, unfilled=unfilled, summary=summary)


class ShiftGeneratorService:
    """근무 자동 생성 서비스 — 매장 시간대 적용 및 샘플 설정."""

    async def generate(self, db: AsyncSession, admin: User, data: GenerateShiftsRequest) -> GenerateShiftsResponse:
        """매장 시간대로 근무 배정안을 생성합니다.

        Raises:
            BadRequestError: 잘못된 기간 또는 시각 (Bad date range or time value)
        """
        if data.end_date < data.start_date:
            raise BadRequestError("end_date must not be before start_date")
        if (data.end_date - data.start_date).days + 1 > MAX_GENERATION_DAYS:
            raise BadRequestError(f"Date range must not exceed {MAX_GENERATION_DAYS} days")
        unknown_days = [d for d in data.business_hours if d.lower() not in WEEKDAYS]
        if unknown_days:
            raise BadRequestError(f"Unknown weekday: {', '.join(unknown_days)}")

        tz_name: str = await store_settings_repository.get_timezone(db, admin.store_id)
        try:
            return generate_shifts(data, tz_name)
        except ValueError as exc:
            raise BadRequestError(f"Invalid time value: {exc}") from exc

    async def sample_settings(self, db: AsyncSession, admin: User) -> dict[str, Any]:
        """생성 화면용 샘플 설정 — 매장 영업시간과 기본 필요 인원."""
        store: Store | None = await store_repository.get_by_id(db, admin.store_id)
        business_hours: dict[str, Any] = (store.business_hours if store is not None else None) or default_business_hours()
        staff_requirements: list[dict[str, Any]] = []
        for day in WEEKDAYS:
            if not business_hours.get(day, {}).get("is_open", False):
                continue
            weekend: bool = day in ("saturday", "sunday")
            staff_requirements.extend([
                {"day_of_week": day, "time_slot": "morning", "count": 3 if weekend else 2},
                {"day_of_week": day, "time_slot": "afternoon", "count": 4 if weekend else 3},
                {"day_of_week": day, "time_slot": "evening", "count": 3},
            ])
        return {
            "business_hours": business_hours,
            "staff_requirements": staff_requirements,
            "generation_defaults": {
                "max_consecutive_days": 5,
                "min_rest_hours": 10,
            },
            "positions": sorted(POSITION_COLORS),
        }


# 싱글턴 인스턴스 — Singleton instance
shift_generator_service: ShiftGeneratorService = ShiftGeneratorService()
