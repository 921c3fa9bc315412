"""Custom exceptions for cmdletgen.

This module defines a hierarchy of exceptions used throughout cmdletgen to
provide clear, actionable error messages for different failure scenarios.
"""

from collections.abc import Iterable


class CmdletGenError(Exception):
    """Base exception for all cmdletgen errors.

    All exceptions raised by cmdletgen inherit from this class, making it easy
    to catch all cmdletgen-related errors with a single except clause.

    Example:
        try:
            project = await ProjectAssembler(state).init()
        except CmdletGenError as e:
            print(f"cmdletgen error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SchemaError(CmdletGenError):
    """Base exception for schema-related errors."""

    pass


class SchemaLoadError(SchemaError):
    """Failed to load an API description from a source.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load API description from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class SchemaValidationError(SchemaError):
    """The API description is not a valid OpenAPI document.

    Attributes:
        source: The source path or URL of the invalid document.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"API description validation failed for '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class SchemaReferenceError(SchemaError):
    """Failed to resolve a $ref reference in the API description.

    Attributes:
        reference: The $ref string that could not be resolved.
        reason: Explanation of why the reference couldn't be resolved.
    """

    def __init__(self, reference: str, reason: str | None = None):
        self.reference = reference
        self.reason = reason
        message = f"Failed to resolve reference '{reference}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class UnsupportedSchemaKindError(SchemaError):
    """The type resolver met a schema shape it cannot map.

    Attributes:
        schema_path: Location of the offending schema in the API description.
        kind: The kind (or raw type) that could not be mapped.
    """

    def __init__(self, schema_path: str, kind: str | None = None):
        self.schema_path = schema_path
        self.kind = kind
        message = f"Unsupported schema kind at '{schema_path}'"
        if kind:
            message += f' ({kind})'
        super().__init__(message)


class ConfigurationError(CmdletGenError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class MissingConfigurationError(ConfigurationError):
    """A required configuration key has no value and no default.

    Attributes:
        key: The configuration key that was requested.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Missing required configuration value '{key}'", field=key)


class CodeGenerationError(CmdletGenError):
    """Error during code generation.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class NamespaceStateError(CodeGenerationError):
    """A namespace was used in a state that does not allow it.

    Raised when a finalized namespace is mutated or when definitions of a
    namespace are read before its initialization completed. This is a
    programming error, not something a user can fix in their input.

    Attributes:
        namespace: Full name of the namespace.
        state: The state the namespace was in.
    """

    def __init__(self, namespace: str, state: str, action: str = 'modify'):
        self.namespace = namespace
        self.state = state
        super().__init__(f"Cannot {action} namespace '{namespace}' in state {state}")


class GenerationAbortedError(CodeGenerationError):
    """The generation checkpoint found recorded errors.

    Attributes:
        errors: Every error recorded during the run, in recording order.
    """

    def __init__(self, errors: Iterable[CmdletGenError]):
        self.errors = list(errors)
        lines = '\n'.join(f'  - {error}' for error in self.errors)
        super().__init__(
            f'Generation aborted with {len(self.errors)} error(s):\n{lines}'
        )


class OutputError(CmdletGenError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
