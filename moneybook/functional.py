import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar, Union

from moneybook.domain import MemoCategory, TxType

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def _reject(error: str, message: str, **extra: Any) -> 'Left[dict, Any]':
    logger.info("Rejected input error=%s message=%s", error, message)
    return Left({"error": error, "message": message, **extra})


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def safe_budget(budgets: Mapping[str, Decimal], category: str) -> Maybe[Decimal]:
    if category in budgets:
        return Some(budgets[category])
    return Nothing()


def parse_amount(raw: Union[str, int, float, Decimal, None]) -> Either[dict, Decimal]:
    if _is_blank(raw):
        return _reject("missing_amount", "Amount is required")
    # float goes through str so 0.1 stays 0.1
    text = str(raw).strip().replace(",", "")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return _reject("invalid_amount", f"Amount {raw!r} is not a number", amount=raw)
    if not amount.is_finite():
        return _reject("invalid_amount", f"Amount {raw!r} is not a finite number", amount=raw)
    return Right(amount)


def parse_iso_date(raw: Union[str, date, None], default: Optional[date] = None) -> Either[dict, date]:
    if isinstance(raw, datetime):
        return Right(raw.date())
    if isinstance(raw, date):
        return Right(raw)
    if _is_blank(raw):
        return Right(default or date.today())
    try:
        return Right(date.fromisoformat(str(raw).strip()))
    except ValueError:
        return _reject("invalid_date", f"Date {raw!r} is not an ISO date (YYYY-MM-DD)", date=raw)


def parse_tx_type(raw: Union[str, TxType]) -> Either[dict, TxType]:
    try:
        return Right(TxType(raw))
    except ValueError:
        return _reject("invalid_type", f"Transaction type must be 'expense' or 'income', got {raw!r}", type=raw)


def validate_transaction(
    tx_type: Union[str, TxType],
    amount: Union[str, int, float, Decimal, None],
    category: Optional[str],
    description: str = "",
    tx_date: Union[str, date, None] = None,
    reject_negative: bool = False,
) -> Either[dict, dict]:
    """Check raw transaction input and return the cleaned field values.

    Amount and category must be non-empty. Negative amounts are kept as
    entered unless ``reject_negative`` is set.
    """
    if _is_blank(category):
        return _reject("missing_category", "Category is required")

    def _check_sign(value: Decimal) -> Either[dict, Decimal]:
        if value < 0:
            if reject_negative:
                return _reject("negative_amount", f"Amount {value} is negative", amount=value)
            logger.warning("Accepting negative amount %s for category %s", value, category)
        return Right(value)

    fields: dict = {"category": category.strip(), "description": (description or "").strip()}

    def _collect(key: str) -> Callable[[Any], Either[dict, dict]]:
        def _store(value: Any) -> Either[dict, dict]:
            fields[key] = value
            return Right(fields)
        return _store

    return (
        parse_amount(amount)
        .bind(_check_sign)
        .bind(_collect("amount"))
        .bind(lambda _: parse_tx_type(tx_type))
        .bind(_collect("type"))
        .bind(lambda _: parse_iso_date(tx_date))
        .bind(_collect("date"))
    )


def validate_budget(category: Optional[str], amount: Union[str, int, float, Decimal, None]) -> Either[dict, tuple]:
    if _is_blank(category):
        return _reject("missing_category", "Category is required")
    return parse_amount(amount).map(lambda value: (category.strip(), value))


def validate_memo(
    title: Optional[str],
    content: Optional[str],
    category: Union[str, MemoCategory] = MemoCategory.GENERAL,
    memo_date: Union[str, date, None] = None,
) -> Either[dict, dict]:
    if _is_blank(title):
        return _reject("missing_title", "Memo title is required")
    if _is_blank(content):
        return _reject("missing_content", "Memo content is required")
    try:
        memo_category = MemoCategory(category)
    except ValueError:
        return _reject("invalid_memo_category", f"Unknown memo category {category!r}", category=category)
    return parse_iso_date(memo_date).map(
        lambda d: {"title": title.strip(), "content": content.strip(), "category": memo_category, "date": d}
    )
