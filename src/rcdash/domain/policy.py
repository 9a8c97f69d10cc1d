"""Row validation and business-default policies for uploads.

A policy is an ordered list of rules. Each rule pairs a predicate over a row
draft with an action:

- ``Skip``: drop the row silently (blank rows, unknown dictionary flags)
- ``Reject``: hard row error that fails the whole upload
- ``Fill``: set a default value and keep evaluating

The first ``Skip`` or ``Reject`` that matches decides the row. A non-strict
policy turns every ``Reject`` into a ``Skip``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from rcdash.domain.entities import ERROR_CLASS_HARD, ERROR_CLASS_SOFT, ERROR_CLASS_SUCCESS
from rcdash.domain.errors import RowError

INVALID_DATE = "InvalidDate"
MISSING_REQUIRED_FIELD = "MissingRequiredField"

SUCCESS_STATUS_ALIASES = frozenset({"sukses", "success"})

SUCCESS_FLAG_ALIASES = {
    "S": ERROR_CLASS_SOFT,
    "N": ERROR_CLASS_HARD,
    "SUKSES": ERROR_CLASS_SUCCESS,
    "SUCCESS": ERROR_CLASS_SUCCESS,
    "BERHASIL": ERROR_CLASS_SUCCESS,
}

DEFAULT_SUCCESS_DESCRIPTION = "Success"
DEFAULT_SUCCESS_RESPONSE_CODE = "00"


def is_success_status(status: Optional[str]) -> bool:
    """True if a free-text status is one of the success aliases."""
    return bool(status) and status.strip().lower() in SUCCESS_STATUS_ALIASES


def error_class_for_flag(flag: Optional[str]) -> Optional[str]:
    """Map a dictionary S/N cell to an error class, or None if unrecognized."""
    if not flag:
        return None
    return SUCCESS_FLAG_ALIASES.get(flag.strip().upper())


def classify_without_code(status: Optional[str]) -> Optional[str]:
    """Error class for a row that has no response code to look up."""
    return ERROR_CLASS_SUCCESS if is_success_status(status) else None


@dataclass
class RowDraft:
    """Mutable view of a row while a policy is applied."""

    row_number: int
    values: dict[str, Any]
    date_error: Optional[str] = None

    def get(self, name: str) -> Any:
        return self.values.get(name)

    def blank(self, name: str) -> bool:
        value = self.values.get(name)
        if value is None:
            return True
        return isinstance(value, str) and not value.strip()


@dataclass(frozen=True)
class Skip:
    pass


@dataclass(frozen=True)
class Reject:
    code: str
    reason: Callable[[RowDraft], str]


@dataclass(frozen=True)
class Fill:
    name: str
    value: Any


Action = Union[Skip, Reject, Fill]


@dataclass(frozen=True)
class Rule:
    name: str
    when: Callable[[RowDraft], bool]
    then: Action


ACCEPT = "accept"
SKIP = "skip"
REJECT = "reject"


@dataclass(frozen=True)
class Verdict:
    """Outcome of applying a policy to one row."""

    action: str
    rule: Optional[str] = None
    error: Optional[RowError] = None

    @property
    def accepted(self) -> bool:
        return self.action == ACCEPT


@dataclass(frozen=True)
class RowPolicy:
    """Ordered rules applied to every row of one upload kind."""

    name: str
    rules: tuple[Rule, ...]
    strict: bool = True

    def apply(self, draft: RowDraft) -> Verdict:
        """Evaluate the rules in order, filling defaults into the draft."""
        for rule in self.rules:
            if not rule.when(draft):
                continue
            action = rule.then
            if isinstance(action, Fill):
                draft.values[action.name] = action.value
                continue
            if isinstance(action, Skip) or not self.strict:
                return Verdict(SKIP, rule=rule.name)
            error = RowError(draft.row_number, action.code, action.reason(draft))
            return Verdict(REJECT, rule=rule.name, error=error)
        return Verdict(ACCEPT)

    def lenient(self, name: Optional[str] = None) -> "RowPolicy":
        """Copy of this policy that skips rows instead of rejecting them."""
        return RowPolicy(name=name or f"{self.name}-lenient", rules=self.rules, strict=False)


def _missing(header: str) -> Reject:
    return Reject(MISSING_REQUIRED_FIELD, lambda draft: f"Missing required field: {header}")


def _success(draft: RowDraft) -> bool:
    return is_success_status(draft.get("status"))


SUCCESS_RATE_RULES = (
    Rule(
        "blank row",
        lambda d: d.blank("raw_date") and d.blank("transaction_type"),
        Skip(),
    ),
    Rule(
        "invalid date",
        lambda d: d.date_error is not None,
        Reject(INVALID_DATE, lambda d: f"Invalid date '{d.get('raw_date')}': {d.date_error}"),
    ),
    Rule("date required", lambda d: d.blank("date"), _missing("Tanggal Transaksi")),
    Rule("month required", lambda d: d.blank("month"), _missing("month")),
    Rule("year required", lambda d: d.blank("year"), _missing("year")),
    Rule(
        "transaction type required",
        lambda d: d.blank("transaction_type"),
        _missing("Jenis Transaksi"),
    ),
    Rule(
        "success description default",
        lambda d: _success(d) and d.blank("description"),
        Fill("description", DEFAULT_SUCCESS_DESCRIPTION),
    ),
    Rule(
        "success response code default",
        lambda d: _success(d) and d.blank("response_code"),
        Fill("response_code", DEFAULT_SUCCESS_RESPONSE_CODE),
    ),
)

DICTIONARY_RULES = (
    Rule("unrecognized success flag", lambda d: d.get("error_class") is None, Skip()),
)

STRICT_SUCCESS_RATE_POLICY = RowPolicy(name="strict", rules=SUCCESS_RATE_RULES)
LENIENT_SUCCESS_RATE_POLICY = STRICT_SUCCESS_RATE_POLICY.lenient("lenient")
DICTIONARY_POLICY = RowPolicy(name="dictionary", rules=DICTIONARY_RULES)

POLICIES = {
    "strict": STRICT_SUCCESS_RATE_POLICY,
    "lenient": LENIENT_SUCCESS_RATE_POLICY,
}


def get_policy(name: str) -> RowPolicy:
    """Look up a success-rate policy by name."""
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown row policy '{name}'. Supported: {', '.join(POLICIES)}")
