"""
Circuit Breaker for the Classification and Reply Services

Counts consecutive failures per service. Once a service crosses the
threshold its circuit opens and the engine goes straight to local
fallbacks instead of waiting on another timeout. After the recovery
timeout one trial call is let through (half_open); success closes the
circuit, failure opens it again.

States:
    closed    - calls pass through
    open      - calls skipped, fallback used
    half_open - one trial call allowed

Usage:
    breaker = CircuitBreaker(failure_threshold=3, recovery_timeout=30)

    if breaker.can_execute("classifier"):
        try:
            result = await classifier.classify(...)
            breaker.record_success("classifier")
        except Exception:
            breaker.record_failure("classifier")
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

CLOSED = "closed"
OPEN = "open"
HALF_OPEN = "half_open"


@dataclass
class CircuitState:
    failure_count: int = 0
    success_count: int = 0
    opened_at: float = 0.0
    state: str = CLOSED
    trial_in_flight: bool = False


class CircuitBreaker:
    """Per-service circuit breaker.

    Args:
        failure_threshold: Consecutive failures before the circuit opens.
        recovery_timeout: Seconds an open circuit waits before a trial call.
        clock: Monotonic time source, replaceable in tests.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock
        self._circuits: dict[str, CircuitState] = {}
        self._lock = threading.Lock()

    def _get_circuit(self, service: str) -> CircuitState:
        """Must hold _lock."""
        if service not in self._circuits:
            self._circuits[service] = CircuitState()
        return self._circuits[service]

    def _recovered(self, circuit: CircuitState) -> bool:
        return self._clock() - circuit.opened_at >= self.recovery_timeout

    def can_execute(self, service: str) -> bool:
        with self._lock:
            circuit = self._get_circuit(service)

            if circuit.state == OPEN:
                if not self._recovered(circuit):
                    return False
                circuit.state = HALF_OPEN
                circuit.trial_in_flight = False
                logger.info(f"Circuit for '{service}' half_open, allowing a trial call")

            if circuit.state == HALF_OPEN:
                if circuit.trial_in_flight:
                    return False
                circuit.trial_in_flight = True

            return True

    def record_success(self, service: str) -> None:
        with self._lock:
            circuit = self._get_circuit(service)
            circuit.success_count += 1
            circuit.failure_count = 0
            if circuit.state != CLOSED:
                logger.info(f"Circuit for '{service}' closed (recovered)")
            circuit.state = CLOSED
            circuit.trial_in_flight = False

    def record_failure(self, service: str) -> None:
        with self._lock:
            circuit = self._get_circuit(service)
            circuit.failure_count += 1

            if circuit.state == HALF_OPEN or circuit.failure_count >= self.failure_threshold:
                if circuit.state != OPEN:
                    logger.warning(
                        f"Circuit for '{service}' OPENED after {circuit.failure_count} failure(s)"
                    )
                circuit.state = OPEN
                circuit.opened_at = self._clock()
                circuit.trial_in_flight = False

    def _effective_state(self, circuit: CircuitState) -> str:
        """Must hold _lock."""
        if circuit.state == OPEN and self._recovered(circuit):
            return HALF_OPEN
        return circuit.state

    def get_state(self, service: str) -> str:
        """Effective state, reporting half_open once an open circuit has waited long enough."""
        with self._lock:
            return self._effective_state(self._get_circuit(service))

    def get_all_states(self) -> dict[str, dict[str, Any]]:
        with self._lock:
            return {
                service: {
                    "state": self._effective_state(circuit),
                    "failure_count": circuit.failure_count,
                    "success_count": circuit.success_count,
                }
                for service, circuit in self._circuits.items()
            }

    def reset(self, service: str | None = None) -> None:
        with self._lock:
            if service is None:
                self._circuits.clear()
            else:
                self._circuits.pop(service, None)
