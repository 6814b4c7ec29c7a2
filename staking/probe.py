"""
staking/probe.py - Best-effort validator metadata from the staking contract.

Tries candidate selectors tier by tier (validator struct, isValidator bool,
validator count) and accepts the first plausible answer. Transport and
parse failures on one candidate are logged and the next candidate is tried.
The probe never raises; exhaustion returns None.
"""

import dataclasses
from typing import Optional, Sequence

from chains.providers import RPCProvider
from core.constants import DEFAULT_STAKING_CONTRACT, ProbeTier
from core.logging import get_logger
from core.models import ContractProbeResult
from core.result import Err
from staking.abi import PROBE_TIERS, Candidate, hex_to_bytes

logger = get_logger(__name__)


class ContractProbe:
    """Resolve an unknown validator-contract interface by elimination."""

    def __init__(
        self,
        provider: RPCProvider,
        contract_address: str = DEFAULT_STAKING_CONTRACT,
        tiers: Sequence[tuple[ProbeTier, Sequence[Candidate]]] = PROBE_TIERS,
    ):
        self.provider = provider
        self.contract_address = contract_address
        self.tiers = tiers

    def _try_candidate(self, candidate: Candidate, address: str) -> Optional[ContractProbeResult]:
        result = self.provider.try_eth_call(self.contract_address, candidate.encode(address))
        if isinstance(result, Err):
            logger.debug(
                "Probe candidate gave no data",
                extra={"context": {"signature": candidate.signature, "reason": result.reason}},
            )
            return None

        try:
            decoded = candidate.decoder(hex_to_bytes(result.value))
        except (ValueError, IndexError) as e:
            logger.debug(
                "Probe candidate unparseable",
                extra={"context": {"signature": candidate.signature, "error": str(e)}},
            )
            return None

        if decoded is None:
            return None
        return dataclasses.replace(decoded, selector=candidate.selector)

    def probe(self, address: str) -> Optional[ContractProbeResult]:
        """
        Probe the staking contract for address.

        Returns:
            First plausible ContractProbeResult, or None if every candidate
            in every tier is exhausted
        """
        for tier, candidates in self.tiers:
            for candidate in candidates:
                try:
                    found = self._try_candidate(candidate, address)
                except Exception as e:
                    logger.debug(
                        "Probe candidate raised",
                        extra={"context": {"signature": candidate.signature, "error": str(e)}},
                    )
                    continue

                if found is not None:
                    logger.debug(
                        "Probe resolved",
                        extra={"context": {
                            "address": address,
                            "tier": tier.value,
                            "signature": candidate.signature,
                            "active": found.is_active,
                            "jailed": found.is_jailed,
                        }},
                    )
                    return found

        logger.info(
            "Contract probe exhausted",
            extra={"context": {"address": address, "contract": self.contract_address}},
        )
        return None
