"""Domain errors raised by the service layer.

Each error carries the HTTP status and machine-readable code the API layer
answers with.
"""


class BlogError(Exception):
    """Base class for expected failures of a blog operation"""
    status_code = 400
    code = "blog_error"
    detail = "Operation failed"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class NotFound(BlogError):
    status_code = 404
    code = "not_found"
    detail = "Resource not found"


class InvalidState(BlogError):
    status_code = 400
    code = "invalid_state"
    detail = "Operation not allowed in the current status"


class NotAuthorized(BlogError):
    status_code = 403
    code = "not_authorized"
    detail = "You are not allowed to perform this action"


class ValidationError(BlogError):
    status_code = 400
    code = "validation_error"
    detail = "Validation failed"


class SelfAction(BlogError):
    status_code = 400
    code = "self_action"
    detail = "You cannot perform this action on your own content"


class DuplicateReport(BlogError):
    status_code = 409
    code = "duplicate_report"
    detail = "You have already reported this comment"


class DepthExceeded(BlogError):
    status_code = 400
    code = "depth_exceeded"
    detail = "Maximum reply depth exceeded"
