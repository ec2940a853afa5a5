from abc import ABC, abstractmethod


class IProvider(ABC):
    """Common shape of every external provider adapter (hosting, DNS, email)"""

    name: str

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """True when the provider has the credentials it needs"""
        pass
