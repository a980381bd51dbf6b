"""
Error taxonomy for FakeForge.

Only configuration, parse, and output errors are fatal to a run.
Inference and relationship gaps never raise; they degrade to defaults.
"""


class ForgeError(Exception):
    """Base class for every error raised by FakeForge."""


class ConfigError(ForgeError):
    """Bad CLI options, config file, or missing schema file."""


class SchemaError(ForgeError):
    """Schema failed structural validation."""


class SchemaParseError(ForgeError):
    """Schema file could not be parsed."""


class OutputError(ForgeError):
    """Generated data could not be written."""


class ClassifierError(ForgeError):
    """Remote classifier call failed."""
