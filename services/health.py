"""
Health probe logic for liveness and readiness checks.

Liveness  (/health/live)  — is the process running?
Readiness (/health/ready) — can it serve bot traffic? (render backend
                            configured + cache store reachable)
"""

import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from ssr.settings import SSRSettings


@dataclass
class CheckResult:
    healthy: bool
    message: str
    details: Optional[Dict] = field(default=None)


class HealthChecker:
    """Liveness and readiness health checks."""

    def __init__(self, settings: Optional[SSRSettings] = None):
        self.settings = settings
        self.start_time = time.time()

    def liveness(self) -> CheckResult:
        """Liveness probe — always healthy if the process is alive."""
        return CheckResult(
            healthy=True,
            message="Process is running",
            details={"uptime_seconds": round(time.time() - self.start_time, 1)},
        )

    def readiness(self) -> CheckResult:
        """Readiness probe — healthy only when the render backend and cache are usable."""
        checks: Dict[str, Dict] = {}
        all_ok = True

        for name, check in (("render_backend", self._check_render_backend),
                            ("cache", self._check_cache)):
            try:
                result = check()
            except Exception as exc:
                result = CheckResult(healthy=False, message=str(exc))
            checks[name] = result.__dict__
            if not result.healthy:
                all_ok = False

        return CheckResult(
            healthy=all_ok,
            message="All checks passed" if all_ok else "One or more checks failed",
            details=checks,
        )

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------

    def _check_render_backend(self) -> CheckResult:
        if self.settings is None:
            return CheckResult(healthy=False, message="SSR gate not configured")
        return CheckResult(
            healthy=True,
            message="Render backend configured",
            details={"render_url": self.settings.render_url},
        )

    def _check_cache(self) -> CheckResult:
        if self.settings is None:
            return CheckResult(healthy=False, message="SSR gate not configured")
        cache = self.settings.cache
        if not cache.is_available():
            return CheckResult(healthy=False, message=f"Cache '{cache.name}' unavailable")
        return CheckResult(healthy=True, message=f"Cache '{cache.name}' available",
                           details=cache.get_info())
