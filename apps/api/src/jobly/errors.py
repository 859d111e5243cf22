class JoblyError(Exception):
    pass


class InvalidFilterError(JoblyError, ValueError):
    """A listing filter bag was rejected before any query ran."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"{key}: {reason}")
        self.key = key
        self.reason = reason


class JobNotFoundError(JoblyError, LookupError):
    def __init__(self, job_id: int) -> None:
        super().__init__(f"No job: {job_id}")
        self.job_id = job_id


class UnknownCompanyError(JoblyError, ValueError):
    def __init__(self, handle: str) -> None:
        super().__init__(f"No company: {handle}")
        self.handle = handle
