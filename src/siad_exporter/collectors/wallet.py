from __future__ import annotations

import logging

from ..currency import to_siacoins
from ..types import PAYLOAD_ERRORS, CollectorPartialError, WalletInfo
from .collector_base import ModuleCollector

logger = logging.getLogger(__name__)


class WalletCollector(ModuleCollector):
    """Wallet lock state, balances and address count."""

    NAME = "wallet"
    VERSION = "0.1.0"
    LOADED_GAUGE = "wallet_module_loaded"

    def refresh(self) -> None:
        status = WalletInfo.from_dict(self.client.wallet_get())

        self.gauges.set("wallet_module_loaded", 1)
        if status.unlocked:
            self.gauges.set("wallet_locked", 0)
        else:
            self.gauges.set("wallet_locked", 1)

        self.gauges.set("wallet_confirmed_siacoin_balance_hastings", float(status.confirmed_siacoin_balance))
        self.gauges.set("wallet_confirmed_siacoin_balance", to_siacoins(status.confirmed_siacoin_balance))

        if status.unconfirmed_incoming_siacoins is not None:
            self.gauges.set("wallet_unconfirmed_incoming_siacoins", to_siacoins(status.unconfirmed_incoming_siacoins))
        if status.unconfirmed_outgoing_siacoins is not None:
            self.gauges.set("wallet_unconfirmed_outgoing_siacoins", to_siacoins(status.unconfirmed_outgoing_siacoins))
        # Siafunds are indivisible; the balance is a plain count.
        if status.siafund_balance is not None:
            self.gauges.set("wallet_siafund_balance", float(status.siafund_balance))
        if status.siacoin_claim_balance is not None:
            self.gauges.set("wallet_siacoin_claim_balance", to_siacoins(status.siacoin_claim_balance))

        try:
            addresses = self.client.wallet_addresses_get().get("addresses") or []
            if not isinstance(addresses, list):
                raise TypeError(f"expected a list of addresses, got {type(addresses).__name__}")
        except PAYLOAD_ERRORS as e:
            logger.info("Could not fetch wallet addresses: %s", e)
            raise CollectorPartialError([f"wallet addresses: {e}"])
        self.gauges.set("wallet_address_count", len(addresses))
