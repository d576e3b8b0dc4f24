"""System dependency checker for di2hap."""

import importlib
import sys
from dataclasses import dataclass


@dataclass
class CheckResult:
    """Result of a dependency check."""

    name: str
    passed: bool
    version: str | None = None
    message: str | None = None


class DependencyChecker:
    """Check runtime dependencies for di2hap."""

    def check_python(self) -> CheckResult:
        """Check Python version is 3.11+."""
        version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
        passed = sys.version_info >= (3, 11)

        return CheckResult(
            name="Python",
            passed=passed,
            version=version,
            message=None if passed else "Python 3.11+ required",
        )

    def _check_module(self, module_name: str, install_hint: str) -> CheckResult:
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            return CheckResult(
                name=module_name,
                passed=False,
                message=f"{module_name} not installed. Install with: {install_hint}",
            )
        return CheckResult(
            name=module_name,
            passed=True,
            version=getattr(module, "__version__", "unknown"),
        )

    def check_cyvcf2(self) -> CheckResult:
        """Check if cyvcf2 (htslib bindings) is installed."""
        return self._check_module("cyvcf2", "pip install cyvcf2")

    def check_numpy(self) -> CheckResult:
        """Check if numpy is installed."""
        return self._check_module("numpy", "pip install numpy")

    def check_all(self) -> list[CheckResult]:
        """Run all dependency checks.

        Returns:
            List of CheckResult for each dependency.
        """
        return [
            self.check_python(),
            self.check_cyvcf2(),
            self.check_numpy(),
        ]


def check_all() -> list[CheckResult]:
    """Convenience function to run all dependency checks."""
    return DependencyChecker().check_all()
