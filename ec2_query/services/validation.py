"""
Input validation for the instance operations.

Each operation owns an ordered table of ValidationRule entries. Rules are
checked against the caller's options after the operation defaults have been
merged in, and the first rule that fails raises InvalidArgumentError naming
the offending field. Once every rule passes, the options are loaded into the
operation's pydantic record, which checks the shape of the remaining
free-form fields.
"""
import math
import re
from typing import Any, Callable, Iterable, Mapping, NamedTuple, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from ec2_query.config import config
from ec2_query.models.instance_models import ShutdownBehavior

OptionsT = TypeVar("OptionsT", bound=BaseModel)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class InvalidArgumentError(ValueError):
    """Raised when an option violates one of an operation's input rules."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ValidationRule(NamedTuple):
    field: str
    check: Callable[[Mapping[str, Any]], bool]
    message: str


def to_count(value: Any) -> int:
    """Read an instance count, returning 0 for anything that is not a count.

    Strings are read up to their first non-digit, so "3" and "3 instances"
    both give 3. Booleans are never counts.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    return 0


def is_strict_bool(value: Any) -> bool:
    return value is True or value is False


def _absent(field: str) -> Callable[[Mapping[str, Any]], bool]:
    return lambda options: options.get(field) is None


def _present(field: str) -> Callable[[Mapping[str, Any]], bool]:
    return lambda options: bool(options.get(field))


def _optional_bool(field: str) -> Callable[[Mapping[str, Any]], bool]:
    return lambda options: options.get(field) is None or is_strict_bool(options[field])


def _valid_image_id(options: Mapping[str, Any]) -> bool:
    image_id = options.get("image_id")
    return isinstance(image_id, str) and image_id != ""


def _valid_max_count(options: Mapping[str, Any]) -> bool:
    max_count = to_count(options.get("max_count"))
    return max_count > 0 and max_count >= to_count(options.get("min_count"))


def _known_instance_type(options: Mapping[str, Any]) -> bool:
    instance_type = options.get("instance_type")
    if instance_type is None:
        return True
    # Looked up on every call so the configured set can be extended.
    return isinstance(instance_type, str) and instance_type in config.INSTANCE_TYPES


def _known_shutdown_behavior(options: Mapping[str, Any]) -> bool:
    behavior = options.get("instance_initiated_shutdown_behavior")
    return behavior is None or behavior in tuple(ShutdownBehavior)


def _sendable_user_data(options: Mapping[str, Any]) -> bool:
    # Raw bytes are only sent as-is when they decode as UTF-8.
    user_data = options.get("user_data")
    if not isinstance(user_data, bytes) or options.get("base64_encoded") is True:
        return True
    try:
        user_data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


RUN_INSTANCES_RULES = (
    ValidationRule("addressing_type", _absent("addressing_type"),
                   "addressing_type has been deprecated"),
    ValidationRule("group_id", _absent("group_id"),
                   "group_id has been deprecated"),
    ValidationRule("image_id", _valid_image_id,
                   "image_id must be provided"),
    ValidationRule("min_count", lambda options: to_count(options.get("min_count")) > 0,
                   "min_count is not valid"),
    ValidationRule("max_count", _valid_max_count,
                   "max_count is not valid or must be >= min_count"),
    ValidationRule("instance_type", _known_instance_type,
                   "instance_type must specify a valid instance type"),
    ValidationRule("monitoring_enabled", _optional_bool("monitoring_enabled"),
                   "monitoring_enabled must be True or False"),
    ValidationRule("disable_api_termination", _optional_bool("disable_api_termination"),
                   "disable_api_termination must be True or False"),
    ValidationRule("instance_initiated_shutdown_behavior", _known_shutdown_behavior,
                   "instance_initiated_shutdown_behavior must be 'stop' or 'terminate'"),
    ValidationRule("base64_encoded", lambda options: is_strict_bool(options.get("base64_encoded")),
                   "base64_encoded must be True or False"),
    ValidationRule("user_data", _sendable_user_data,
                   "user_data must be UTF-8 text unless base64_encoded is True"),
)

INSTANCE_ID_RULES = (
    ValidationRule("instance_id", _present("instance_id"), "No instance_id provided"),
)

STOP_INSTANCES_RULES = INSTANCE_ID_RULES + (
    ValidationRule("force", _optional_bool("force"), "force must be True or False"),
)


def defaults_for(options_cls: type[BaseModel]) -> dict[str, Any]:
    """Return the documented default of every optional field of a record."""
    return {
        name: field.get_default(call_default_factory=True)
        for name, field in options_cls.model_fields.items()
        if not field.is_required()
    }


def validate(options: Mapping[str, Any], rules: Iterable[ValidationRule]) -> None:
    """Check options against rules in order, raising on the first failure."""
    for rule in rules:
        if not rule.check(options):
            raise InvalidArgumentError(rule.field, rule.message)


def resolve_options(
    options_cls: type[OptionsT],
    bundle: Mapping[str, Any],
    rules: Iterable[ValidationRule] = (),
    coercions: Optional[Mapping[str, Callable[[Any], Any]]] = None,
) -> OptionsT:
    """Merge defaults into bundle, validate it and build the options record."""
    merged = defaults_for(options_cls)
    merged.update(bundle)
    validate(merged, rules)

    for name, coerce in (coercions or {}).items():
        merged[name] = coerce(merged.get(name))

    try:
        return options_cls.model_validate(merged)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else options_cls.__name__
        raise InvalidArgumentError(field, f"{field}: {error['msg']}") from exc
