"""Exception definitions for formrules"""


class FormRulesException(Exception):
    """Base exception for all formrules errors.

    All custom exceptions in formrules inherit from this class. Routine
    outcomes (build diagnostics, evaluation notes, validation errors) are
    returned as data and never raised; only invalid input shapes and
    collaborator failures end up here.
    """

    pass


class SchemaException(FormRulesException):
    """Raised when a schema value has an invalid shape.

    Use this exception when:
    - A condition payload is neither a simple nor a complex condition
    - A schema document cannot be parsed into the data model
    """

    pass


class SchemaNotFoundError(FormRulesException):
    """Raised when a schema store cannot supply a module or workflow by id."""

    pass


class ConfigException(FormRulesException):
    """Raised when configuration validation or loading fails.

    Use this exception when:
    - The configuration file cannot be found
    - The TOML syntax is invalid
    - Configuration validation fails (missing required fields, invalid values)
    """

    pass


class OptionSetResolutionError(FormRulesException):
    """Raised by option-set providers when a reference cannot be resolved.

    The hierarchy builder catches this (and any other resolver failure) and
    reports it as a build warning.
    """

    pass
