from fastapi import status


class RelayError(Exception):
    """Base class for failures reported back to the uploading client."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoFilesError(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self):
        super().__init__("No files were provided")


class FileTooLargeError(RelayError):
    status_code = 413

    def __init__(self, filename: str):
        super().__init__(f"{filename} exceeds the max allowed size")
        self.filename = filename


class ProviderError(RelayError):
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, detail: str):
        super().__init__("Upload to provider failed")
        self.detail = detail
