from ..enums import StaffScope
from ..models import AcademicHoliday


def is_date_blocked(day, staff_type: str | None = None) -> AcademicHoliday | None:
    """
    The first active, appointment-blocking holiday covering `day`, or None.
    With `staff_type`, only holidays affecting that staff type count; without
    it, anything not scoped to "none".
    """
    qs = AcademicHoliday.objects.active().blocking().for_date(day)
    if staff_type:
        qs = qs.affecting(staff_type)
    else:
        qs = qs.exclude(affects_staff_type=StaffScope.NONE)
    return qs.order_by("start_date", "id").first()
