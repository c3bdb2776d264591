from fastapi import HTTPException


def api_error(status_code: int, error_code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error_code": error_code, "error_message": message})


def invalid_job_id(message: str = "Job ID required") -> HTTPException:
    return api_error(400, "INVALID_JOB_ID", message)


def storage_unavailable() -> HTTPException:
    return api_error(500, "STORAGE_UNAVAILABLE", "Storage temporarily unavailable, retry shortly")
