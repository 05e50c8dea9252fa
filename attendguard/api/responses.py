from fastapi.responses import JSONResponse

from attendguard.schemas.errors import AppError, ErrorCategory

CONFLICT_CODES = {"ALREADY_MARKED", "SESSION_CONFLICT", "DUPLICATE_ENROLLMENT", "SECTION_FULL"}

_STATUS_BY_CATEGORY = {
    ErrorCategory.validation: 400,
    ErrorCategory.authentication: 401,
    ErrorCategory.authorization: 403,
    ErrorCategory.not_found: 404,
    ErrorCategory.network: 503,
    ErrorCategory.database: 503,
    ErrorCategory.unknown: 500,
}

def status_for(error: AppError) -> int:
    if error.code in CONFLICT_CODES:
        return 409
    return _STATUS_BY_CATEGORY[error.category]

def rejected(result) -> JSONResponse:
    """Resposta de erro padronizada a partir de um *Result com ok=False."""
    return JSONResponse(status_code=status_for(result.error), content=result.model_dump(mode="json"))
