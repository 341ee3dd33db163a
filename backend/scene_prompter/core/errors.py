from typing import Optional


class PrompterError(Exception):
    """Base class for every error surfaced to the author."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreValidationError(PrompterError):
    """Rejected edit: missing required field, bad reference, bad value."""

    status_code = 400


class NotFoundError(PrompterError):
    status_code = 404


class GenerationServiceError(PrompterError):
    """Non-success status or an unexpected response shape from the generation service."""

    status_code = 502

    def __init__(self, message: str, status: Optional[int] = None, detail: str = ""):
        super().__init__(message)
        self.status = status
        self.detail = detail


class GenerationTransportError(GenerationServiceError):
    """The call itself failed (connection refused, timeout, TLS...)."""


class SuggestionError(PrompterError):
    status_code = 502


class RefinementError(PrompterError):
    status_code = 502


class RefinementBusyError(PrompterError):
    status_code = 409


def truncate_detail(detail: str, limit: int = 100) -> str:
    detail = detail or ""
    if len(detail) <= limit:
        return detail
    return f"{detail[:limit]}..."


def describe_generation_failure(task: str, error: GenerationServiceError) -> str:
    """Author-facing message for a failed generation call, e.g. task="menyarankan aksi"."""
    if isinstance(error, GenerationTransportError):
        return f"Terjadi kesalahan saat {task}. Coba lagi. Detail: {truncate_detail(error.detail)}"
    if error.status is not None and not 200 <= error.status < 300:
        return f"Gagal {task}. Status: {error.status}. Detail: {truncate_detail(error.detail)}"
    return f"Gagal {task}. Respon API tidak terduga."
