from dataclasses import dataclass

from jinja2 import Environment


@dataclass(frozen=True)
class TemplateSource:
    """A template's logical name and source text, as handed to the inspector."""

    name: str
    code: str
    path: str | None = None

    @classmethod
    def from_environment(cls, environment: Environment, name: str) -> "TemplateSource":
        """
        Read *name* through the environment's loader.

        Raises ``TemplateNotFound`` for unknown names and ``TypeError`` when the
        environment has no loader.
        """
        if environment.loader is None:
            raise TypeError("no loader for this environment specified")
        code, path, _ = environment.loader.get_source(environment, name)
        return cls(name=name, code=code, path=path)
