from abc import ABC, abstractmethod

from resumatch.models import JobRecord


class JobSource(ABC):
    @abstractmethod
    def get_jobs(self) -> list[JobRecord]:
        pass
