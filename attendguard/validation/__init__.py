from attendguard.validation.composite import validate_attendance, validate_enrollment, validate_session  # noqa: F401
from attendguard.validation.fields import (  # noqa: F401
    validate_calendar_date,
    validate_clock_time,
    validate_identifier,
    validate_time_range,
)
