"""Operator reconciliation of unmapped codes, rows without a code and dictionary edits."""

import logging
from dataclasses import dataclass, field
from typing import Generic, Iterable, Optional, TypeVar

from rcdash.database.base import Database
from rcdash.domain.classification import ClassificationResolver
from rcdash.domain.entities import (
    DictionaryEntry,
    SuccessRateFact,
    SuccessRateRow,
    UnmappedCode,
)
from rcdash.domain.errors import (
    NotFoundError,
    ValidationError,
    dictionary_entry_not_found,
    fact_not_found,
    invalid_error_class,
    unmapped_code_not_found,
)
from rcdash.domain.policy import error_class_for_flag

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")

DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True)
class Page(Generic[ItemT]):
    """One page of a listing."""

    items: list[ItemT] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: Optional[int] = None

    @property
    def pages(self) -> int:
        if not self.limit:
            return 1
        return max(1, -(-self.total // self.limit))


def validate_error_class(value: Optional[str]) -> str:
    """Normalize an operator-supplied error class.

    Accepts S, N and Sukses case-insensitively, plus the success aliases used
    in dictionary files.

    Raises:
        ValidationError: If the value is not a known class
    """
    error_class = error_class_for_flag(value)
    if error_class is None:
        raise ValidationError(invalid_error_class(value))
    return error_class


def _paging(page: int, limit: Optional[int]) -> int:
    if page < 1:
        raise ValidationError(f"Page must be 1 or greater, got {page}")
    if limit is not None and limit < 1:
        raise ValidationError(f"Limit must be 1 or greater, got {limit}")
    return (page - 1) * limit if limit else 0


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class ReconciliationService:
    """Service for the operator queues and the edits that resolve them.

    Every write runs in its own transaction, so a failure part way through
    leaves the database untouched.
    """

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db
        self.resolver = ClassificationResolver(db)

    # Unmapped codes
    def list_unmapped_codes(self, application_id: Optional[int] = None) -> list[UnmappedCode]:
        """List unmapped codes, newest first."""
        return self.db.list_unmapped_codes(application_id)

    def _get_unmapped_or_raise(self, unmapped_id: int) -> UnmappedCode:
        unmapped = self.db.get_unmapped_code(unmapped_id)
        if unmapped is None:
            raise NotFoundError(unmapped_code_not_found(unmapped_id))
        return unmapped

    def _apply_unmapped(self, unmapped: UnmappedCode, error_class: str) -> int:
        existing = self.db.find_dictionary_entry(
            unmapped.application_id, unmapped.transaction_type, unmapped.response_code
        )
        description = unmapped.description
        if existing is not None and existing.description:
            description = None
        self.db.upsert_dictionary_entry(
            unmapped.application_id,
            unmapped.transaction_type,
            unmapped.response_code,
            error_class,
            description=description,
        )
        classified = self.db.classify_unresolved_facts(
            unmapped.application_id,
            unmapped.response_code,
            unmapped.transaction_type or None,
            error_class,
        )
        self.db.delete_unmapped_code(unmapped.id)
        return classified

    def resolve_unmapped_code(self, unmapped_id: int, error_class: str) -> int:
        """Map an unmapped code into the dictionary.

        Creates or updates the dictionary entry, classifies the facts with the
        same key that are still unclassified, and removes the unmapped code.

        Args:
            unmapped_id: Unmapped code ID
            error_class: S, N or Sukses

        Returns:
            Number of facts classified

        Raises:
            NotFoundError: If the unmapped code does not exist
            ValidationError: If the error class is invalid
        """
        error_class = validate_error_class(error_class)
        unmapped = self._get_unmapped_or_raise(unmapped_id)
        with self.db.transaction():
            classified = self._apply_unmapped(unmapped, error_class)
        logger.info(
            "Resolved unmapped code %s/%s as %s, %d facts classified",
            unmapped.transaction_type,
            unmapped.response_code,
            error_class,
            classified,
        )
        return classified

    def resolve_unmapped_codes(self, mappings: Iterable[tuple[int, str]]) -> int:
        """Resolve several unmapped codes at once.

        Every mapping is validated before anything is written; the writes
        then succeed or fail together.

        Args:
            mappings: (unmapped code ID, error class) pairs

        Returns:
            Total number of facts classified

        Raises:
            NotFoundError: If any unmapped code does not exist
            ValidationError: If the batch is empty or any error class is invalid
        """
        resolved = [
            (self._get_unmapped_or_raise(unmapped_id), validate_error_class(error_class))
            for unmapped_id, error_class in mappings
        ]
        if not resolved:
            raise ValidationError("No unmapped codes to resolve")

        with self.db.transaction():
            classified = sum(
                self._apply_unmapped(unmapped, error_class) for unmapped, error_class in resolved
            )
        logger.info(
            "Resolved %d unmapped codes, %d facts classified", len(resolved), classified
        )
        return classified

    # Facts without a response code
    def list_facts_without_response_code(
        self,
        application_id: Optional[int] = None,
        page: int = 1,
        limit: Optional[int] = DEFAULT_PAGE_SIZE,
    ) -> Page[SuccessRateFact]:
        """List facts that have no response code and are not successes."""
        offset = _paging(page, limit)
        return Page(
            items=self.db.list_facts_without_response_code(application_id, limit, offset),
            total=self.db.count_facts_without_response_code(application_id),
            page=page,
            limit=limit,
        )

    def assign_response_code(
        self, fact_id: int, response_code: str, description: Optional[str] = None
    ) -> Optional[str]:
        """Give a fact a response code and classify it.

        The fact is classified from the dictionary like an uploaded row; a
        code with no dictionary entry is recorded as unmapped.

        Args:
            fact_id: Success-rate fact ID
            response_code: Response code to assign
            description: Description to store; the current one is kept if None

        Returns:
            The new error class, or None if the code is unmapped

        Raises:
            NotFoundError: If the fact does not exist
            ValidationError: If the response code is blank
        """
        response_code = (response_code or "").strip()
        if not response_code:
            raise ValidationError("Response code is required")
        fact = self.db.get_success_rate_fact(fact_id)
        if fact is None:
            raise NotFoundError(fact_not_found(fact_id))

        description = _optional_text(description)
        if description is None:
            description = fact.description

        row = SuccessRateRow(
            row_number=fact.id,
            date=fact.date,
            month=fact.month,
            year=fact.year,
            transaction_type=fact.transaction_type,
            response_code=response_code,
            description=description,
            total_count=fact.total_count,
            total_amount=fact.total_amount,
            total_fee=fact.total_fee,
            status=fact.status,
        )
        with self.db.transaction():
            self.db.update_fact_response_code(fact_id, response_code, description)
            error_class = self.resolver.resolve(fact.application_id, row)
            self.db.set_fact_error_class(fact_id, error_class)
        logger.info("Assigned response code %s to fact %d (class %s)", response_code, fact_id, error_class)
        return error_class

    # Dictionary
    def list_dictionary_entries(
        self,
        application_id: Optional[int] = None,
        error_class: Optional[str] = None,
        transaction_type: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page[DictionaryEntry]:
        """List dictionary entries with optional filters and paging."""
        if error_class is not None:
            error_class = validate_error_class(error_class)
        offset = _paging(page, limit)
        filters = dict(
            application_id=application_id,
            error_class=error_class,
            transaction_type=transaction_type,
            search=_optional_text(search),
        )
        return Page(
            items=self.db.list_dictionary_entries(**filters, limit=limit, offset=offset),
            total=self.db.count_dictionary_entries(**filters),
            page=page,
            limit=limit,
        )

    def _get_entry_or_raise(self, entry_id: int) -> DictionaryEntry:
        entry = self.db.get_dictionary_entry(entry_id)
        if entry is None:
            raise NotFoundError(dictionary_entry_not_found(entry_id))
        return entry

    def update_dictionary_error_class(self, entry_id: int, error_class: str) -> int:
        """Change the error class of a dictionary entry.

        Facts with the entry's key that are still unclassified take the new
        class; facts already classified keep theirs.

        Returns:
            Number of facts classified
        """
        error_class = validate_error_class(error_class)
        entry = self._get_entry_or_raise(entry_id)
        with self.db.transaction():
            self.db.update_dictionary_error_class(entry_id, error_class)
            classified = self.db.classify_unresolved_facts(
                entry.application_id,
                entry.response_code,
                entry.transaction_type or None,
                error_class,
            )
        logger.info("Dictionary entry %d set to %s, %d facts classified", entry_id, error_class, classified)
        return classified

    def _apply_description(self, entry: DictionaryEntry, description: Optional[str]) -> int:
        self.db.update_dictionary_description(entry.id, description)
        return self.db.propagate_fact_description(
            entry.application_id,
            entry.response_code,
            entry.transaction_type or None,
            description,
        )

    def update_dictionary_description(self, entry_id: int, description: Optional[str]) -> int:
        """Change the description of a dictionary entry.

        The description is copied onto every fact with the same application
        and response code, and the same transaction type when the entry has
        one.

        Returns:
            Number of facts updated
        """
        entry = self._get_entry_or_raise(entry_id)
        with self.db.transaction():
            updated = self._apply_description(entry, _optional_text(description))
        logger.info("Dictionary entry %d description updated on %d facts", entry_id, updated)
        return updated

    def update_dictionary_descriptions(self, updates: Iterable[tuple[int, Optional[str]]]) -> int:
        """Change several descriptions at once, all or nothing.

        Returns:
            Total number of facts updated
        """
        entries = [
            (self._get_entry_or_raise(entry_id), _optional_text(description))
            for entry_id, description in updates
        ]
        if not entries:
            raise ValidationError("No dictionary entries to update")

        with self.db.transaction():
            updated = sum(self._apply_description(entry, description) for entry, description in entries)
        logger.info("Updated %d dictionary descriptions, %d facts", len(entries), updated)
        return updated
