from __future__ import annotations


class SparkError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SparkError):
    status_code = 400


class NotFoundError(SparkError):
    status_code = 404

    def __init__(self, resource: str, identifier: object):
        super().__init__(f"{resource} not found: {identifier}")
        self.resource = resource
        self.identifier = identifier


class ConfigurationError(SparkError):
    def __init__(self, setting: str):
        super().__init__(f"{setting} not configured")
        self.setting = setting


class UpstreamError(SparkError):
    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class UpstreamAuthError(UpstreamError):
    def __init__(
        self,
        message: str = (
            "Product Hunt API requires authentication. "
            "Please set the PRODUCT_HUNT_API_TOKEN environment variable."
        ),
        upstream_status: int | None = 401,
    ):
        super().__init__(message, upstream_status=upstream_status)


class ModelResponseError(UpstreamError):
    pass


class EmptyResultError(SparkError):
    def __init__(self, target_date: str):
        super().__init__(f"No Product Hunt launches found for {target_date}")
        self.target_date = target_date


class RepositoryError(SparkError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Idea store error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class StorageError(SparkError):
    pass
