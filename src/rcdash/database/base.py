"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from rcdash.domain.entities import (
    Application,
    DictionaryEntry,
    SuccessRateFact,
    SuccessRateRow,
    UnmappedCode,
)

DEFAULT_APPLICATIONS = (
    "Bale",
    "CMS",
    "SMS Notif",
    "QRIS",
    "EDC Merchant",
    "EDC Agent",
    "Bale Korpora",
)


class Database(ABC):
    """Abstract database interface for rcdash.

    Write methods commit immediately unless they run inside ``transaction()``,
    in which case they are flushed and committed together when the block
    exits, or rolled back if it raises.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def reset_schema(self, seed: bool = True) -> None:
        """Drop and recreate every table, optionally seeding the default applications."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Context manager grouping writes into one all-or-nothing unit."""
        pass

    # Application operations
    @abstractmethod
    def create_application(self, name: str) -> int:
        """Create a new application. Returns application ID."""
        pass

    @abstractmethod
    def get_application(self, application_id: int) -> Optional[Application]:
        """Get application by ID."""
        pass

    @abstractmethod
    def get_application_by_name(self, name: str) -> Optional[Application]:
        """Get application by name."""
        pass

    @abstractmethod
    def application_exists(self, application_id: int) -> bool:
        """Check whether an application exists."""
        pass

    @abstractmethod
    def list_applications(self) -> list[Application]:
        """List all applications ordered by name."""
        pass

    @abstractmethod
    def delete_application(self, application_id: int) -> None:
        """Delete an application together with its dictionary, facts and unmapped codes."""
        pass

    # Dictionary operations
    @abstractmethod
    def find_dictionary_entry(
        self, application_id: int, transaction_type: str, response_code: str
    ) -> Optional[DictionaryEntry]:
        """Find the entry for an exact (application, transaction type, response code) key."""
        pass

    @abstractmethod
    def find_dictionary_entry_by_code(
        self, application_id: int, response_code: str
    ) -> Optional[DictionaryEntry]:
        """Find an entry by (application, response code).

        An entry without a transaction type is preferred, then the lowest id.
        """
        pass

    @abstractmethod
    def get_dictionary_entry(self, entry_id: int) -> Optional[DictionaryEntry]:
        """Get dictionary entry by ID."""
        pass

    @abstractmethod
    def upsert_dictionary_entry(
        self,
        application_id: int,
        transaction_type: str,
        response_code: str,
        error_class: str,
        description: Optional[str] = None,
    ) -> None:
        """Insert or update an entry on its unique key.

        The error class is always overwritten; the description only when the
        new one is not None.
        """
        pass

    @abstractmethod
    def update_dictionary_error_class(self, entry_id: int, error_class: str) -> None:
        """Set the error class of a dictionary entry."""
        pass

    @abstractmethod
    def update_dictionary_description(self, entry_id: int, description: Optional[str]) -> None:
        """Set the description of a dictionary entry."""
        pass

    @abstractmethod
    def list_dictionary_entries(
        self,
        application_id: Optional[int] = None,
        error_class: Optional[str] = None,
        transaction_type: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[DictionaryEntry]:
        """List dictionary entries with optional filters.

        ``search`` matches response code or description (case-insensitive
        substring).
        """
        pass

    @abstractmethod
    def count_dictionary_entries(
        self,
        application_id: Optional[int] = None,
        error_class: Optional[str] = None,
        transaction_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> int:
        """Count dictionary entries matching the same filters as list_dictionary_entries."""
        pass

    # Unmapped code operations
    @abstractmethod
    def upsert_unmapped_code(
        self,
        application_id: int,
        transaction_type: str,
        response_code: str,
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> None:
        """Insert an unmapped code, or overwrite description and status if the key exists."""
        pass

    @abstractmethod
    def get_unmapped_code(self, unmapped_id: int) -> Optional[UnmappedCode]:
        """Get unmapped code by ID."""
        pass

    @abstractmethod
    def list_unmapped_codes(self, application_id: Optional[int] = None) -> list[UnmappedCode]:
        """List unmapped codes, newest first."""
        pass

    @abstractmethod
    def delete_unmapped_code(self, unmapped_id: int) -> None:
        """Delete an unmapped code."""
        pass

    # Success-rate fact operations
    @abstractmethod
    def insert_success_rate_facts(
        self, application_id: int, rows: Sequence[SuccessRateRow]
    ) -> list[int]:
        """Insert normalized rows in order. Returns the new fact IDs."""
        pass

    @abstractmethod
    def get_success_rate_fact(self, fact_id: int) -> Optional[SuccessRateFact]:
        """Get success-rate fact by ID."""
        pass

    @abstractmethod
    def list_success_rate_facts(
        self,
        application_id: Optional[int] = None,
        response_code: Optional[str] = None,
    ) -> list[SuccessRateFact]:
        """List success-rate facts ordered by date, then ID."""
        pass

    @abstractmethod
    def update_fact_response_code(
        self, fact_id: int, response_code: str, description: Optional[str]
    ) -> None:
        """Write a response code and description onto a fact."""
        pass

    @abstractmethod
    def set_fact_error_class(self, fact_id: int, error_class: Optional[str]) -> None:
        """Set the error class of a single fact."""
        pass

    @abstractmethod
    def classify_unresolved_facts(
        self,
        application_id: int,
        response_code: str,
        transaction_type: Optional[str],
        error_class: str,
    ) -> int:
        """Set the error class on facts with this key whose class is still null.

        A None transaction type matches every type. Returns the number of
        facts updated.
        """
        pass

    @abstractmethod
    def propagate_fact_description(
        self,
        application_id: int,
        response_code: str,
        transaction_type: Optional[str],
        description: Optional[str],
    ) -> int:
        """Copy a description onto facts with this key. Returns the number updated."""
        pass

    @abstractmethod
    def list_facts_without_response_code(
        self,
        application_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[SuccessRateFact]:
        """List facts with no response code whose status is not a success alias."""
        pass

    @abstractmethod
    def count_facts_without_response_code(self, application_id: Optional[int] = None) -> int:
        """Count facts returned by list_facts_without_response_code."""
        pass
