from abc import ABC, abstractmethod

class IAuthService(ABC):
    @abstractmethod
    async def login(self, email: str, password: str, db) -> dict:
        pass

    @abstractmethod
    async def register(self, data: dict, db) -> dict:
        pass

    @abstractmethod
    async def verify_otp(self, email: str, otp: str, db) -> dict:
        pass

    @abstractmethod
    async def resend_otp(self, email: str, db) -> dict:
        pass
