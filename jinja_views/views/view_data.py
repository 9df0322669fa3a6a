"""View data bag and validation state handed to templates."""

from collections.abc import Iterator, Mapping
from datetime import date, datetime
from decimal import Decimal

from markupsafe import Markup
from pydantic import ValidationError

# Values a template may receive through the view data bag.
ViewValue = str | int | float | bool | Decimal | date | datetime | Markup | None

VIEW_VALUE_TYPES = (str, int, float, bool, Decimal, date, datetime, Markup, type(None))

# Key under which validation state is exposed in the merged view data.
MODEL_STATE_KEY = "model_state"

FORM_ERROR_KEY = ""


class ViewData(Mapping[str, ViewValue]):
    """Read-only mapping of auxiliary template inputs such as the page title.

    Values are limited to render-safe primitives (see ``ViewValue``);
    anything else is rejected when the bag is built.
    """

    def __init__(self, values: Mapping[str, ViewValue] | None = None, **kwargs: ViewValue):
        data = dict(values or {})
        data.update(kwargs)
        for key, value in data.items():
            if not isinstance(key, str):
                raise TypeError(f"View data keys must be strings, got {type(key).__name__}")
            if not isinstance(value, VIEW_VALUE_TYPES):
                raise TypeError(f"Unsupported view data value for {key!r}: {type(value).__name__}")
        self._data: dict[str, ViewValue] = data

    def __getitem__(self, key: str) -> ViewValue:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ViewData({self._data!r})"


class ModelState(Mapping[str, list[str]]):
    """Field-level and form-level validation errors.

    Form-level errors are stored under the empty string key.
    """

    def __init__(self) -> None:
        self._errors: dict[str, list[str]] = {}

    def __getitem__(self, key: str) -> list[str]:
        return self._errors[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __repr__(self) -> str:
        return f"ModelState({self._errors!r})"

    def add_error(self, key: str, message: str) -> None:
        """Record an error message for a field (or ``""`` for the whole form)."""
        self._errors.setdefault(key, []).append(message)

    @property
    def is_valid(self) -> bool:
        return not self._errors

    @property
    def error_count(self) -> int:
        return sum(len(messages) for messages in self._errors.values())

    @property
    def form_errors(self) -> list[str]:
        return self.errors_for(FORM_ERROR_KEY)

    def errors_for(self, key: str) -> list[str]:
        """Error messages for a field, empty when it has none."""
        return list(self._errors.get(key, []))

    def all_errors(self) -> list[str]:
        """Every message, form-level ones first."""
        messages = self.form_errors
        for key, errors in self._errors.items():
            if key != FORM_ERROR_KEY:
                messages.extend(errors)
        return messages

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "ModelState":
        """Build validation state from a pydantic ValidationError.

        Errors are keyed by the top-level field location, which is the alias
        when the model was validated by alias.
        """
        state = cls()
        for error in exc.errors():
            location = error.get("loc") or ()
            key = str(location[0]) if location else FORM_ERROR_KEY
            state.add_error(key, error["msg"])
        return state
