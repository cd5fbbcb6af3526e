from datetime import date

from ..enums import HolidaySource, HolidayType, StaffScope

# (month, day, name)
NATIONAL_HOLIDAYS = (
    (1, 1, "New Year's Day"),
    (4, 23, "National Sovereignty and Children's Day"),
    (5, 1, "Labour and Solidarity Day"),
    (5, 19, "Commemoration of Atatürk, Youth and Sports Day"),
    (8, 30, "Victory Day"),
    (10, 29, "Republic Day"),
)


def national_holidays(year: int) -> list[dict]:
    return [
        {
            "name": name,
            "description": f"{name} (national holiday)",
            "start_date": date(year, month, day),
            "end_date": date(year, month, day),
            "type": HolidayType.NATIONAL_HOLIDAY,
            "affects_staff_type": StaffScope.ALL,
            "blocks_appointments": True,
            "academic_year": year,
            "source": HolidaySource.NATIONAL,
        }
        for month, day, name in NATIONAL_HOLIDAYS
    ]


def manual_fallback_holidays(year: int) -> list[dict]:
    """Used only when neither the calendars nor the national list produced anything."""
    return [
        {
            "name": "Year-End University Closure",
            "description": "University closed for the year-end break",
            "start_date": date(year, 12, 25),
            "end_date": date(year, 12, 25),
            "type": HolidayType.UNIVERSITY_CLOSURE,
            "affects_staff_type": StaffScope.ALL,
            "blocks_appointments": True,
            "academic_year": year,
            "source": HolidaySource.MANUAL_FALLBACK,
        }
    ]
