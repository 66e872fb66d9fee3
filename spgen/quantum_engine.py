"""
Quantum byte source: builds a circuit, puts qubits in superposition,
measures them in alternating bases, and turns the outcomes into bytes
for the generator.

Every block is hashed together with bytes from the OS CSPRNG, so the
output is never weaker than SystemByteSource. Needs the `quantum` extra.
"""
from __future__ import annotations

import os
import threading
from typing import List

from loguru import logger
from qiskit import QuantumCircuit, transpile
from qiskit_aer import AerSimulator

from .config import DEFAULT_QUANTUM_CONFIG, QuantumSourceConfig
from .entropy import amplify_entropy, bits_to_bytes, xor_bits
from .errors import ConfigurationError, ResourceError
from .secure import secure_clear

OS_MIX_BYTES = 32


class QuantumByteSource:
    """
    Byte source backed by a local quantum simulator.
    """

    def __init__(self, config: QuantumSourceConfig | None = None) -> None:
        self.config = config or DEFAULT_QUANTUM_CONFIG
        self.backend = AerSimulator()

        # Measurement bases of the last circuit, for inspection.
        self.last_measurement_basis: list[str] | None = None
        self._pending = bytearray()
        self._lock = threading.Lock()

        if self.config.num_qubits <= 0:
            raise ConfigurationError("num_qubits must be positive.")

        max_qubits = getattr(self.backend, "num_qubits", None)

        if max_qubits is not None and self.config.num_qubits > max_qubits:
            raise ConfigurationError(
                f"Configured num_qubits={self.config.num_qubits} exceeds "
                f"backend limit ({max_qubits}). "
                "Lower num_qubits in QuantumSourceConfig."
            )

    def _build_circuit(self) -> tuple[QuantumCircuit, list[str]]:
        """
        Prepare N qubits, put them in superposition, then measure
        in alternating bases (Z, X, Z, X, ...).
        """
        n = self.config.num_qubits
        measurement_basis: list[str] = []

        qc = QuantumCircuit(n, n)

        for i in range(n):
            qc.h(i)

        # Odd indices get a second H so they are read in the X basis.
        for i in range(n):
            if i % 2 == 1:
                measurement_basis.append("X")
                qc.h(i)
            else:
                measurement_basis.append("Z")
            qc.measure(i, i)

        return qc, measurement_basis

    def sample_bits(self) -> List[int]:
        """
        Run the circuit once (single shot) and return one bit per qubit.
        """
        qc, measurement_basis = self._build_circuit()

        try:
            tqc = transpile(qc, self.backend)
            result = self.backend.run(tqc, shots=1).result()
            counts = result.get_counts()
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Quantum backend run failed: {exc!r}")
            raise ResourceError("Quantum random source unavailable.") from exc

        bitstring = next(iter(counts.keys()))

        # Qiskit orders bits as [q_(n-1) ... q_0]; reverse so index 0 is first qubit.
        bitstring = bitstring[::-1]

        self.last_measurement_basis = measurement_basis
        return [int(b) for b in bitstring]

    def _block(self) -> bytes:
        """
        One 32-byte block: XOR of independent streams, mixed with OS bytes.
        """
        streams = max(1, self.config.quantum_streams)

        combined = self.sample_bits()
        for _ in range(streams - 1):
            combined = xor_bits(combined, self.sample_bits())

        try:
            os_bytes = os.urandom(OS_MIX_BYTES)
        except (OSError, NotImplementedError) as exc:
            raise ResourceError("Secure random source unavailable.") from exc

        return amplify_entropy(
            bits_to_bytes(combined),
            rounds=max(1, self.config.entropy_rounds),
            extra=os_bytes,
        )

    def __call__(self, n: int) -> bytes:
        # Unused bytes of a block are kept for the next call.
        with self._lock:
            while len(self._pending) < n:
                self._pending += self._block()
            out = bytes(self._pending[:n])
            self._pending[:n] = bytes(n)
            del self._pending[:n]
            return out

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet handed out."""
        return len(self._pending)

    def wipe(self) -> None:
        """Zero and drop any buffered bytes."""
        with self._lock:
            secure_clear(self._pending)
            self._pending = bytearray()
