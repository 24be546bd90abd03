"""
Scala-specific configuration.

Reads the ``language_config`` section of a GeneratorConfig.
"""


class ScalaConfig:
    """Scala-specific configuration."""

    def __init__(self, **kwargs):
        """Initialize Scala configuration."""
        # Emit the slf4j and thrift import block in record and service units
        self.thrift_imports = kwargs.get("thrift_imports", True)

        # Prefix of synthesized temporaries in composite constants
        self.temp_prefix = kwargs.get("temp_prefix", "tmp")

        # "assign" -> tmp0.x = v, "bean" -> tmp0.setX(v)
        self.setter_style = kwargs.get("setter_style", "assign")
        if self.setter_style not in ("assign", "bean"):
            raise ValueError(f"Invalid setter_style: {self.setter_style}")

        # "placeholder" -> empty service class, "strict" -> fail on functions
        self.service_policy = kwargs.get("service_policy", "placeholder")
        if self.service_policy not in ("placeholder", "strict"):
            raise ValueError(f"Invalid service_policy: {self.service_policy}")

        # Give record parameters defaults so empty instances can be built
        self.field_defaults = kwargs.get("field_defaults", True)

        # Key looked up in a module's namespaces
        self.namespace_key = kwargs.get("namespace_key", "scala")
