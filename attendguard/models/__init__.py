# Carrega módulos para registrar tabelas no metadata:
from attendguard.models.session import AttendanceSession  # noqa: F401
from attendguard.models.enrollment import SectionEnrollment  # noqa: F401
from attendguard.models.attendance import AttendanceRecord  # noqa: F401
