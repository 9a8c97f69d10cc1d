"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the services never handle ORM
objects and the schema can change without touching them.
"""

from rcdash.domain import entities as domain
from rcdash.database.models import (
    Application as ORMApplication,
    DictionaryEntry as ORMDictionaryEntry,
    SuccessRateFact as ORMSuccessRateFact,
    UnmappedCode as ORMUnmappedCode,
)


def application_to_domain(orm_application: ORMApplication) -> domain.Application:
    """Convert SQLAlchemy Application model to domain Application entity."""
    return domain.Application(
        id=orm_application.id,
        name=orm_application.name,
        created_at=orm_application.created_at,
    )


def dictionary_entry_to_domain(orm_entry: ORMDictionaryEntry) -> domain.DictionaryEntry:
    """Convert SQLAlchemy DictionaryEntry model to domain DictionaryEntry entity."""
    return domain.DictionaryEntry(
        id=orm_entry.id,
        application_id=orm_entry.application_id,
        transaction_type=orm_entry.transaction_type or "",
        response_code=orm_entry.response_code or "",
        description=orm_entry.description,
        error_class=orm_entry.error_class,
    )


def success_rate_fact_to_domain(orm_fact: ORMSuccessRateFact) -> domain.SuccessRateFact:
    """Convert SQLAlchemy SuccessRateFact model to domain SuccessRateFact entity."""
    return domain.SuccessRateFact(
        id=orm_fact.id,
        application_id=orm_fact.application_id,
        date=orm_fact.date,
        month=orm_fact.month,
        year=orm_fact.year,
        transaction_type=orm_fact.transaction_type,
        response_code=orm_fact.response_code,
        description=orm_fact.description,
        total_count=orm_fact.total_count,
        total_amount=orm_fact.total_amount,
        total_fee=orm_fact.total_fee,
        status=orm_fact.status,
        error_class=orm_fact.error_class,
        created_at=orm_fact.created_at,
        updated_at=orm_fact.updated_at,
    )


def unmapped_code_to_domain(orm_unmapped: ORMUnmappedCode) -> domain.UnmappedCode:
    """Convert SQLAlchemy UnmappedCode model to domain UnmappedCode entity."""
    return domain.UnmappedCode(
        id=orm_unmapped.id,
        application_id=orm_unmapped.application_id,
        transaction_type=orm_unmapped.transaction_type or "",
        response_code=orm_unmapped.response_code,
        description=orm_unmapped.description,
        status=orm_unmapped.status,
        error_class=orm_unmapped.error_class,
        created_at=orm_unmapped.created_at,
    )


def success_rate_row_to_orm(application_id: int, row: domain.SuccessRateRow) -> ORMSuccessRateFact:
    """Build a SuccessRateFact model from a normalized upload row."""
    return ORMSuccessRateFact(
        application_id=application_id,
        date=row.date,
        month=row.month,
        year=row.year,
        transaction_type=row.transaction_type,
        response_code=row.response_code,
        description=row.description,
        total_count=row.total_count,
        total_amount=row.total_amount,
        total_fee=row.total_fee,
        status=row.status,
        error_class=row.error_class,
    )
