from common.errors import InvalidArgumentError

STANDARD_FORMAT = "STANDARD_FORMAT"
UPGRADE_FORMAT = "UPGRADE_FORMAT"
PERFORMANCE_FORMAT = "PERFORMANCE_FORMAT"

CUSTOM_FORMATS = frozenset({STANDARD_FORMAT, UPGRADE_FORMAT, PERFORMANCE_FORMAT})


def is_valid_custom_format(custom_format):
    return custom_format in CUSTOM_FORMATS


def require(value, field):
    if value is None:
        raise InvalidArgumentError(f"{field} field should not be None.")


def require_one_of(**fields):
    """At least one of the keyword arguments must be set."""
    if all(value is None for value in fields.values()):
        names = " and ".join(fields)
        raise InvalidArgumentError(f"At least one of the fields {names} should be provided.")


def validate_custom_format(is_custom_format_enabled, custom_format):
    if is_custom_format_enabled and not is_valid_custom_format(custom_format):
        raise InvalidArgumentError(f"CustomFormat provided is not a valid one: {custom_format!r}")


def validate_build_identity(id, name):
    require_one_of(id=id, name=name)


def validate_report_identity(id, name, build_id, build_name):
    """Rules shared by every report update: the report and its build must be reachable."""
    if id is None and name is None and build_id is None and build_name is None:
        raise InvalidArgumentError("At least id field should be provided.")
    require_one_of(id=id, name=name)
    if id is None:
        require_one_of(build_id=build_id, build_name=build_name)
