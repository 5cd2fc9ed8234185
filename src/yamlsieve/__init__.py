"""yamlsieve: a linter for YAML files."""

__version__ = "0.1.0"

from yamlsieve.config import ConfigError, LintConfig  # noqa: E402
from yamlsieve.engine import run, run_all  # noqa: E402
from yamlsieve.models import LintProblem, ProblemLevel  # noqa: E402

__all__ = [
    "ConfigError",
    "LintConfig",
    "LintProblem",
    "ProblemLevel",
    "__version__",
    "run",
    "run_all",
]
