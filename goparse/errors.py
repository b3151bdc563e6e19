"""Error hierarchy for package loading and signature checking."""


class CatalogError(RuntimeError):
    """Base class for hard failures that abort catalog extraction."""


class PackageLoadError(CatalogError):
    """Raised when a directory cannot be turned into one compilation unit."""


class PackageNotFoundError(PackageLoadError):
    """Raised when a directory holds no non-test Go package."""

    def __init__(self, path: str):
        super().__init__(f"no non-test packages found in {path}")
        self.path = path


class AmbiguousPackageError(PackageLoadError):
    """Raised when a directory holds more than one non-test Go package."""

    def __init__(self, path: str, packages: list):
        super().__init__(
            f"multiple packages found in {path}: {', '.join(sorted(packages))}"
        )
        self.path = path
        self.packages = list(packages)


class GoSyntaxError(PackageLoadError):
    """Raised when a source file does not parse cleanly."""


class TypeCheckError(CatalogError):
    """Raised when a signature type cannot be resolved."""
