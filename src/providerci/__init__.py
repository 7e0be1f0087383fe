from .config import Options, load_options, parse_options
from .dsl import JobBuilder, build, matrix, sh, uses, workflow
from .errors import GeneratorError, OptionsValidationError, UnknownProviderError, UnresolvedDependencyError
from .model import INERT, GoreleaserConfig, Job, ProviderFile, Step, Workflow
from .provider import PROVIDER_FILE_PATHS, build_provider_files, provider_files

__all__ = [
    "Options", "load_options", "parse_options",
    "JobBuilder", "build", "matrix", "sh", "uses", "workflow",
    "GeneratorError", "OptionsValidationError", "UnknownProviderError", "UnresolvedDependencyError",
    "INERT", "GoreleaserConfig", "Job", "ProviderFile", "Step", "Workflow",
    "PROVIDER_FILE_PATHS", "build_provider_files", "provider_files",
]
